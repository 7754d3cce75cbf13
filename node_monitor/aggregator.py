"""Reverse-scan aggregation: newest line wins for every metric slot."""

from typing import Any, Callable, Iterable, Mapping, Sequence

LineExtractor = Callable[[str], Mapping[str, Any] | None]


def reverse_scan(lines: Sequence[str], extractors: Iterable[LineExtractor],
                 defaults: Mapping[str, Any]) -> dict[str, Any]:
    """Scan *lines* newest-to-oldest and keep the first value found per slot.

    *lines* are ordered oldest first. Every slot in *defaults* is present in the
    result; slots the extractors never produced keep their default. Slots not
    named in *defaults* are ignored.
    """
    extractors = tuple(extractors)
    found: dict[str, Any] = {}

    for line in reversed(lines):
        for extractor in extractors:
            values = extractor(line)
            if not values:
                continue
            for slot, value in values.items():
                if slot in defaults and slot not in found:
                    found[slot] = value
        if len(found) == len(defaults):
            break

    result = dict(defaults)
    result.update(found)
    return result
