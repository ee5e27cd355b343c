from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from .config import load_config
from .detect import detect_format
from .errors import MalformedPayloadError, SmwksError
from .loader import deserialize_any, serialize, summarize
from .model import DiagramModel

logger = logging.getLogger(__name__)


def create_app() -> Flask:
    cfg = load_config()
    app = Flask(__name__)

    def _artifact():
        filename = request.args.get("filename", "")
        try:
            raw = request.get_data().decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedPayloadError(f"Request body is not valid UTF-8: {e}") from e
        return filename, raw

    def _load(filename: str, raw: str):
        model = DiagramModel(version=cfg.format_version)
        result = deserialize_any(model, raw, filename)
        return model, result

    @app.route("/detect", methods=["POST"])
    def detect():
        try:
            filename, raw = _artifact()
        except SmwksError as e:
            return jsonify({"status": "error", "error": str(e)}), 400
        return jsonify({"format": detect_format(raw, filename).value})

    @app.route("/convert", methods=["POST"])
    def convert():
        filename = request.args.get("filename", "")
        try:
            filename, raw = _artifact()
            model, result = _load(filename, raw)
        except SmwksError as e:
            logger.warning(f"Conversion of {filename!r} failed: {e}")
            return jsonify({"status": "error", "error": str(e)}), 400
        if not result.loaded:
            return jsonify({"status": "unsupported", "format": result.format.value}), 415
        return jsonify(
            {
                "status": "ok",
                "format": result.format.value,
                "warnings": result.warnings,
                "artifact": serialize(model),
            }
        )

    @app.route("/inspect", methods=["POST"])
    def inspect():
        try:
            filename, raw = _artifact()
            model, result = _load(filename, raw)
        except SmwksError as e:
            return jsonify({"status": "error", "error": str(e)}), 400
        if not result.loaded:
            return jsonify({"status": "unsupported", "format": result.format.value}), 415
        return jsonify({"status": "ok", "format": result.format.value, "summary": summarize(model)})

    return app


def run(host: str | None = None, port: int | None = None, debug: bool = False) -> None:
    cfg = load_config()
    app = create_app()
    app.run(
        host=host or cfg.env["SERVER_HOST"],
        port=port or cfg.env["SERVER_PORT"],
        debug=debug,
    )


if __name__ == "__main__":
    run()
