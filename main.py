"""Entry point for the Ethereum node monitor API."""

import logging
import signal
import sys

from node_monitor.config import load_config, log_level_from_env
from node_monitor.dashboard import create_app, run_dashboard


def main():
    logging.basicConfig(
        level=getattr(logging, log_level_from_env(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
        stream=sys.stderr,
    )
    logger = logging.getLogger(__name__)
    config = load_config()

    def signal_handler(signum, frame):
        logger.info("Received signal %d, shutting down...", signum)
        sys.exit(0)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    app = create_app(config)
    logger.info("Node monitor API on http://%s:%d (geth unit %r, prysm unit %r)",
                config.host, config.port, config.geth_service, config.prysm_service)
    run_dashboard(app, config.host, config.port)


if __name__ == "__main__":
    main()
