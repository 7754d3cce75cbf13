"""Flask API serving the node stats snapshot."""

import logging

from flask import Flask, jsonify

from node_monitor.config import Config
from node_monitor.models import utc_now_iso
from node_monitor.snapshot import SnapshotAssembler

logger = logging.getLogger(__name__)


def create_app(config: Config | None = None, assembler: SnapshotAssembler | None = None) -> Flask:
    app = Flask(__name__)
    config = config or Config()
    assembler = assembler or SnapshotAssembler(config)

    @app.route("/api/eth-node-stats")
    def eth_node_stats():
        try:
            payload = assembler.build()
        except Exception as exc:
            logger.exception("Failed to build node stats snapshot")
            return jsonify(error=str(exc)), 500
        return jsonify(payload)

    @app.route("/api/health")
    def health():
        return jsonify(status="ok", timestamp=utc_now_iso())

    return app


def run_dashboard(app: Flask, host: str, port: int):
    app.run(host=host, port=port, use_reloader=False)
