"""Command-line interface for poking the SUS API with the active configuration."""

from __future__ import annotations

import argparse
import sys
from typing import Any

import orjson
from loguru import logger
from pydantic import BaseModel, ValidationError

from sus_client.clients.errors import ClientError
from sus_client.clients.sus_client import SusClient
from sus_client.settings import get_settings


def command_check_config(args: argparse.Namespace) -> None:
    """Print active configuration."""

    settings = get_settings()
    print("SUS client configuration")
    print(f"Endpoint: {settings.endpoint}")
    print(f"User agent: {settings.user_agent}")
    print(f"Rate limit: {settings.requests_per_second}/s (burst {settings.request_burst_size})")
    print(f"Block on rate limit: {settings.block_till_rate_limit_reset}")
    print(f"Max connections per route: {settings.max_connections_per_route}")
    print(f"Timeout: {settings.timeout if settings.timeout is not None else 'none'}")
    print(f"Log level: {settings.log_level}")


def command_categories(args: argparse.Namespace) -> None:
    """List listing categories."""

    with SusClient.make() as client:
        _print_json(client.categories())


def command_sales_ticker(args: argparse.Namespace) -> None:
    """Show the public sales ticker."""

    with SusClient.make() as client:
        _print_json(client.sales_ticker())


def command_username_available(args: argparse.Namespace) -> None:
    """Check whether a username can still be registered."""

    with SusClient.make() as client:
        _print_json(client.is_username_available(args.username))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SUS API command-line tools.")
    sub = parser.add_subparsers(dest="command", required=True)

    check = sub.add_parser("check-config", help="Print active configuration.")
    check.set_defaults(func=command_check_config)

    categories = sub.add_parser("categories", help="List listing categories.")
    categories.set_defaults(func=command_categories)

    ticker = sub.add_parser("sales-ticker", help="Show the public sales ticker.")
    ticker.set_defaults(func=command_sales_ticker)

    available = sub.add_parser("username-available", help="Check whether a username is free.")
    available.add_argument("username", help="Username to check.")
    available.set_defaults(func=command_username_available)

    return parser


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level)


def run(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        configure_logging(get_settings().log_level)
        args.func(args)
    except ValidationError as exc:
        print(f"Invalid configuration: {exc.error_count()} error(s); check SUS_* environment variables", file=sys.stderr)
        return 1
    except ClientError as exc:
        print(f"Request failed: {exc}", file=sys.stderr)
        return 1
    return 0


def _print_json(value: Any) -> None:
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json", by_alias=True)
    elif isinstance(value, list):
        value = [item.model_dump(mode="json", by_alias=True) if isinstance(item, BaseModel) else item for item in value]
    print(orjson.dumps(value, option=orjson.OPT_INDENT_2, default=str).decode("utf-8"))


if __name__ == "__main__":
    sys.exit(run())
