"""CLI entrypoint for network-mashup."""

from __future__ import annotations

import argparse
import json
import logging
import mimetypes
import sys
from pathlib import Path
from typing import Any

from network_mashup.errors import CLIError
from network_mashup.listing import FeedListing
from network_mashup.router import FetchTopFree, FetchTopPaid
from network_mashup.runtime_config import load_runtime_config, set_current_runtime_config
from network_mashup.service import FeedService
from network_mashup.settings import Settings
from network_mashup.transport import HttpxTransport, Transport


def _build_transport() -> Transport:
    return HttpxTransport()


def _build_service(settings: Settings) -> FeedService:
    return FeedService(
        _build_transport(),
        endpoints=settings.endpoints(),
        max_workers=settings.max_workers,
    )


def _parse_params(raw_values: list[str]) -> dict[str, Any]:
    params: dict[str, Any] = {}
    for raw in raw_values:
        if "=" not in raw:
            raise CLIError(f"invalid --param {raw!r}; expected KEY=VALUE")
        key, value = raw.split("=", 1)
        key = key.strip()
        if not key:
            raise CLIError(f"invalid --param {raw!r}; empty key")
        params[key] = value
    return params


def _cmd_feed(args: argparse.Namespace) -> int:
    call_name = "top free" if args.command == "top-free" else "top paid"
    listing = FeedListing()
    with _build_service(args.settings) as service:
        fetch = service.fetch_top_free if args.command == "top-free" else service.fetch_top_paid
        success, _ = fetch(listing.apply).result()
    if not success:
        print(f"failed to fetch {call_name} applications", file=sys.stderr)
        return 1
    if args.json:
        for record in listing.records:
            print(json.dumps(record.to_dict(), sort_keys=True))
    else:
        for line in listing.render_lines():
            print(line)
    return 0


def _cmd_author(args: argparse.Namespace) -> int:
    call = FetchTopFree() if args.feed == "free" else FetchTopPaid()
    with _build_service(args.settings) as service:
        success, name = service.fetch_feed_author(call).result()
    if not success:
        print("failed to fetch feed author", file=sys.stderr)
        return 1
    print(name or "")
    return 0


def _cmd_post(args: argparse.Namespace) -> int:
    params = _parse_params(args.param)
    with _build_service(args.settings) as service:
        success = service.create_post(params).result()
    print("ok" if success else "failed")
    return 0 if success else 1


def _cmd_upload(args: argparse.Namespace) -> int:
    path = Path(args.path).expanduser()
    if not path.is_file():
        raise CLIError(f"file not found: {path}")
    params = _parse_params(args.param)
    mime_type = args.mime_type or mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    with _build_service(args.settings) as service:
        success = service.create_multipart(
            params,
            path.read_bytes(),
            mime_type=mime_type,
            field_name=args.field_name,
            file_name=path.name,
            boundary=args.boundary,
        ).result()
    print("ok" if success else "failed")
    return 0 if success else 1


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="network-mashup")
    parser.add_argument("--config", default="", help="path to runtime.toml")
    parser.add_argument("--log-level", default="", help="override configured log level")
    subparsers = parser.add_subparsers(dest="command")

    for name in ("top-free", "top-paid"):
        feed = subparsers.add_parser(name, help=f"list {name.replace('-', ' ')} applications")
        feed.add_argument("--json", action="store_true", help="emit one JSON object per line")
        feed.set_defaults(func=_cmd_feed)

    author = subparsers.add_parser("author", help="print the feed author name")
    author.add_argument("feed", choices=("free", "paid"))
    author.set_defaults(func=_cmd_author)

    post = subparsers.add_parser("post", help="post JSON params to the echo endpoint")
    post.add_argument("--param", action="append", default=[], metavar="KEY=VALUE")
    post.set_defaults(func=_cmd_post)

    upload = subparsers.add_parser("upload", help="multipart upload to the echo endpoint")
    upload.add_argument("path")
    upload.add_argument("--param", action="append", default=[], metavar="KEY=VALUE")
    upload.add_argument("--field-name", default="file")
    upload.add_argument("--mime-type", default="")
    upload.add_argument("--boundary", default=None)
    upload.set_defaults(func=_cmd_upload)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    func = getattr(args, "func", None)
    if func is None:
        parser.print_help()
        return 0
    try:
        config_path = Path(args.config).expanduser() if args.config else None
        set_current_runtime_config(load_runtime_config(config_path))
        args.settings = Settings.from_runtime()
        logging.basicConfig(
            level=(args.log_level or args.settings.log_level).upper(),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        return int(func(args))
    except (CLIError, RuntimeError, ValueError) as exc:
        print(str(exc), file=sys.stderr)
        return 2
    finally:
        set_current_runtime_config(None)


if __name__ == "__main__":
    raise SystemExit(main())
