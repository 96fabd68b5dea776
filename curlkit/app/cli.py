"""Command-line interface for issuing one request."""

from __future__ import annotations

import argparse
import json
import sys
from typing import IO, Any, Sequence

from ..core import CurlError, HttpMethod, InvalidRequest, Request, Response, TransportError
from ..settings import AppConfig, load_config
from ..utils.logging import configure_logging, get_logger

LOGGER = get_logger(__name__)


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except (OSError, ValueError) as exc:
        print(f"curlkit: invalid configuration: {exc}", file=sys.stderr)
        return 2

    configure_logging(
        level=config.log_level,
        structured=config.structured_logs and not args.log_plain,
    )

    request = _build_request(args, config)
    try:
        response = request.send()
    except InvalidRequest as exc:
        LOGGER.error(
            "Invalid request",
            extra={"event": "cli.error", "reason": str(exc)},
        )
        print(f"curlkit: {exc}", file=sys.stderr)
        return 2
    except TransportError as exc:
        LOGGER.error(
            "Request failed",
            extra={"event": "cli.error", "method": request.method, "url": request.url},
        )
        print(f"curlkit: {exc}", file=sys.stderr)
        return 1
    except CurlError as exc:
        print(f"curlkit: {exc}", file=sys.stderr)
        return 1

    LOGGER.info(
        "Request completed",
        extra={
            "event": "cli.command",
            "method": request.method,
            "url": response.url,
            "status": response.status_code,
        },
    )
    _write_response(response, include=args.include, stream=sys.stdout)
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="curlkit", description="Send a single HTTP request")
    parser.add_argument(
        "method",
        type=str.upper,
        choices=[method.value for method in HttpMethod],
        help="HTTP method (case-insensitive)",
    )
    parser.add_argument("url", help="Request URL")
    parser.add_argument(
        "-H",
        "--header",
        dest="headers",
        action="append",
        type=_header_pair,
        default=[],
        metavar="NAME:VALUE",
        help="Request header; may be repeated",
    )
    parser.add_argument(
        "-b",
        "--cookie",
        dest="cookies",
        action="append",
        type=_field_pair,
        default=[],
        metavar="NAME=VALUE",
        help="Cookie to send; may be repeated",
    )
    parser.add_argument(
        "-q",
        "--query",
        dest="queries",
        action="append",
        type=_field_pair,
        default=[],
        metavar="NAME=VALUE",
        help="Query parameter appended to the URL; may be repeated",
    )
    parser.add_argument(
        "--json",
        dest="json_body",
        type=_json_value,
        default=None,
        metavar="JSON",
        help="JSON body for POST/PUT",
    )
    parser.add_argument(
        "-d",
        "--data",
        dest="form",
        action="append",
        type=_field_pair,
        default=[],
        metavar="NAME=VALUE",
        help="Form field for POST/PUT; may be repeated",
    )
    parser.add_argument(
        "-i",
        "--include",
        action="store_true",
        help="Print the status line and response headers before the body",
    )
    parser.add_argument("--config", help="Path to configuration file", default=None)
    parser.add_argument(
        "--log-plain",
        action="store_true",
        help="Use plain-text logs instead of JSON",
    )
    return parser


def _split_pair(raw: str, separator: str) -> tuple[str, str]:
    name, sep, value = raw.partition(separator)
    name = name.strip()
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected NAME{separator}VALUE, got {raw!r}")
    return name, value.strip()


def _header_pair(raw: str) -> tuple[str, str]:
    return _split_pair(raw, ":")


def _field_pair(raw: str) -> tuple[str, str]:
    return _split_pair(raw, "=")


def _json_value(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise argparse.ArgumentTypeError(f"invalid JSON body: {exc}") from exc


def _collect_form(pairs: Sequence[tuple[str, str]]) -> dict[str, Any] | None:
    if not pairs:
        return None
    form: dict[str, Any] = {}
    for name, value in pairs:
        if name in form:
            existing = form[name]
            form[name] = [*existing, value] if isinstance(existing, list) else [existing, value]
        else:
            form[name] = value
    return form


def _build_request(args: argparse.Namespace, config: AppConfig) -> Request:
    request = (
        Request(settings=config.http)
        .set_method(args.method)
        .set_url(args.url)
        .set_headers(dict(args.headers))
        .set_cookies(dict(args.cookies))
        .set_queries(dict(args.queries))
        .set_post_data(args.json_body)
    )
    form = _collect_form(args.form)
    if form is not None:
        request.set_post_data_urlencode(form)
    return request


def _write_response(response: Response, *, include: bool, stream: IO[str]) -> None:
    if include:
        stream.write(f"HTTP {response.status_code} {response.reason}".rstrip() + "\n")
        for name, value in response.headers.items():
            stream.write(f"{name}: {value}\n")
        stream.write("\n")
    stream.write(response.text)
    if response.text and not response.text.endswith("\n"):
        stream.write("\n")


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
