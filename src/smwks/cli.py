from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List

from .config import load_config
from .detect import detect_format
from .errors import MalformedPayloadError, SmwksError
from .loader import deserialize_any, serialize, summarize
from .model import DiagramModel
from .server import run as run_server

logger = logging.getLogger(__name__)

EXIT_ERROR = 1
EXIT_UNRECOGNIZED = 2


def setup_logging(verbose: bool = False, level_name: str = "INFO") -> None:
    """Configure logging with a clean format for terminal output."""
    level = logging.DEBUG if verbose else getattr(logging, level_name, logging.INFO)

    # Create formatter with timestamp and level
    formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    # Log to stderr so command output on stdout stays machine readable
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = []  # Clear any existing handlers
    root_logger.addHandler(handler)


def _read_artifact(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise MalformedPayloadError(f"{path.name} is not valid UTF-8: {e}") from e


def _load(path: Path) -> DiagramModel | None:
    cfg = load_config()
    model = DiagramModel(version=cfg.format_version)
    result = deserialize_any(model, _read_artifact(path), path.name)
    if not result.loaded:
        return None
    return model


def cmd_detect(args: argparse.Namespace) -> int:
    path = Path(args.file)
    print(detect_format(_read_artifact(path), path.name).value)
    return 0


def cmd_convert(args: argparse.Namespace) -> int:
    path = Path(args.file)
    model = _load(path)
    if model is None:
        print(f"Unrecognized artifact: {path}")
        return EXIT_UNRECOGNIZED

    out_path = Path(args.output) if args.output else path.with_suffix(".smwks")
    out_path.write_text(serialize(model), encoding="utf-8")
    logger.info(f"Wrote {out_path}")
    print(str(out_path))
    return 0


def cmd_inspect(args: argparse.Namespace) -> int:
    path = Path(args.file)
    model = _load(path)
    if model is None:
        print(f"Unrecognized artifact: {path}")
        return EXIT_UNRECOGNIZED

    print(json.dumps(summarize(model), indent=2, ensure_ascii=False))
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    run_server(host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="smwks", description="SystemicWorks file tools")
    p.add_argument("--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    # smwks detect
    p_detect = sub.add_parser("detect", help="Print the detected format of a file")
    p_detect.add_argument("file")
    p_detect.set_defaults(func=cmd_detect)

    # smwks convert
    p_convert = sub.add_parser("convert", help="Convert any supported file to the current .smwks format")
    p_convert.add_argument("file")
    p_convert.add_argument("-o", "--output", help="Output path (default: input with .smwks extension)")
    p_convert.set_defaults(func=cmd_convert)

    # smwks inspect
    p_inspect = sub.add_parser("inspect", help="Summarize a diagram and list its feedback loops")
    p_inspect.add_argument("file")
    p_inspect.set_defaults(func=cmd_inspect)

    # smwks serve
    p_serve = sub.add_parser("serve", help="Run the HTTP conversion service")
    p_serve.add_argument("--host", help="Bind address (default: SMWKS_SERVER_HOST)")
    p_serve.add_argument("--port", type=int, help="Port (default: SMWKS_SERVER_PORT)")
    p_serve.set_defaults(func=cmd_serve)

    return p


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose, load_config().log_level)
    try:
        return args.func(args)
    except SmwksError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
