"""Command line front-end: ``potato-doctor predict FILE`` and ``potato-doctor ping``."""

import argparse
import sys
from pathlib import Path

from pydantic import ValidationError

from potato_doctor.acquisition import accept_upload
from potato_doctor.config import Settings, format_validation_error
from potato_doctor.diseases import build_result_view, format_result_text
from potato_doctor.state import API_HINT
from potato_doctor.utils.api_client import build_client
from potato_doctor.utils.logger import setup_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="potato-doctor", description="Potato leaf disease classifier client")
    parser.add_argument("--api-url", help="Base URL of the classification API (overrides POTATO_API_URL)")
    parser.add_argument("--timeout", type=float, help="Prediction timeout in seconds")
    parser.add_argument("--mock", action="store_true", help="Use the offline mock client")

    sub = parser.add_subparsers(dest="command", required=True)
    predict = sub.add_parser("predict", help="Classify a leaf image")
    predict.add_argument("file", type=Path)
    sub.add_parser("ping", help="Check whether the API is running")
    return parser


def resolve_settings(args: argparse.Namespace) -> Settings:
    overrides = {}
    if args.api_url:
        overrides["api_url"] = args.api_url
    if args.timeout is not None:
        overrides["predict_timeout"] = args.timeout
    if args.mock:
        overrides["use_mock"] = True
    return Settings.from_env(**overrides)


def cmd_predict(client, path: Path) -> int:
    if not path.is_file():
        print(f"File not found: {path}", file=sys.stderr)
        return 1

    outcome = accept_upload(path.name, None, path.read_bytes())
    if not outcome.is_selected:
        print(f"{outcome.title}: {outcome.message}", file=sys.stderr)
        return 1

    prediction = client.try_predict(outcome.image)
    if not prediction.ok:
        print(f"Error: {prediction.error.message}. {API_HINT}", file=sys.stderr)
        return 1

    print(format_result_text(build_result_view(prediction.result)))
    return 0


def cmd_ping(client) -> int:
    if client.ping():
        print(f"API is running at {client.base_url}")
        return 0
    print(f"API is not reachable at {client.base_url}", file=sys.stderr)
    return 1


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = resolve_settings(args)
    except ValidationError as exc:
        parser.error(format_validation_error(exc))
    setup_logger(settings.log_level)
    client = build_client(settings)

    if args.command == "predict":
        return cmd_predict(client, args.file)
    return cmd_ping(client)


if __name__ == "__main__":
    sys.exit(main())
