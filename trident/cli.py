"""Command-line entry point: ``trident campaign create``."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime, timedelta
from typing import List

from trident.auth import get_authenticator
from trident.clients.orchestrator import OrchestratorClient
from trident.config import Settings, get_settings
from trident.services.campaign import (
    DEFAULT_PROVIDER,
    CampaignOptions,
    CampaignService,
)
from trident.services.exceptions import ServiceError
from trident.timeutil import format_rfc3339, parse_duration

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Send log records to stderr at the requested level."""
    root_logger = logging.getLogger()
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    if not root_logger.handlers:
        logging.basicConfig(
            level=numeric_level,
            format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        )
    else:
        root_logger.setLevel(numeric_level)


def _duration(value: str) -> timedelta:
    try:
        parsed = parse_duration(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc
    if parsed < timedelta(0):
        raise argparse.ArgumentTypeError(f"duration {value!r} must not be negative")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    default_not_before = format_rfc3339(datetime.now().astimezone())

    parser = argparse.ArgumentParser(
        prog="trident",
        description="Client for the password spraying campaign orchestrator.",
    )
    parser.add_argument("--config", help="JSON config file (orchestrator-url, providers, ...)")
    parser.add_argument(
        "--log-level",
        help="Logging level (default: the configured log-level, INFO)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parser_campaign = subparsers.add_parser("campaign", help="campaign management subcommand")
    campaign_commands = parser_campaign.add_subparsers(dest="campaign_command")

    parser_create = campaign_commands.add_parser(
        "create",
        help="create a password spraying campaign",
        description="can be used to create and examine existing password spraying campaigns",
    )
    # required arguments
    parser_create.add_argument("-u", "--userfile", required=True,
                               help="file of usernames (newline separated)")
    parser_create.add_argument("-p", "--passfile", required=True,
                               help="file of passwords (newline separated)")
    # optional arguments
    parser_create.add_argument("-b", "--notbefore", default=default_not_before,
                               help="requests will not start before this time (RFC3339, default: now)")
    parser_create.add_argument("-w", "--window", type=_duration, default=timedelta(hours=672),
                               help="a duration that this campaign will be active (ex: 4w, default: 672h)")
    parser_create.add_argument("-i", "--interval", type=_duration, default=timedelta(seconds=1),
                               help="requests will happen with this interval between them (default: 1s)")
    parser_create.add_argument("-a", "--auth-provider", default=DEFAULT_PROVIDER,
                               help=f"this is the authentication platform you are attacking (default: {DEFAULT_PROVIDER})")
    parser_create.add_argument("-y", "--yes", action="store_true", help="Skip confirmation prompt")
    parser_create.add_argument("--dry-run", action="store_true",
                               help="Show the campaign and payload without sending it")
    return parser


def campaign_create(
    args: argparse.Namespace,
    settings: Settings,
) -> bool:
    options = CampaignOptions(
        user_file=args.userfile,
        password_file=args.passfile,
        not_before=args.notbefore,
        window=args.window,
        interval=args.interval,
        provider=args.auth_provider,
        assume_yes=args.yes,
        dry_run=args.dry_run,
    )
    with OrchestratorClient(
        settings.orchestrator_url,
        authenticator=get_authenticator(settings),
        timeout=settings.request_timeout,
    ) as client:
        service = CampaignService(client, providers=settings.providers)
        return service.create(options)


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command != "campaign" or args.campaign_command != "create":
        parser.print_help()
        return 2

    configure_logging(args.log_level or "INFO")
    try:
        settings = get_settings(args.config)
        configure_logging(args.log_level or settings.log_level)
        logger.debug(
            "Client settings: %s",
            settings.model_dump(exclude={"auth_token"}),
        )
        campaign_create(args, settings)
    except ServiceError as exc:
        logger.error("%s", exc)
        return 1
    except KeyboardInterrupt:
        print("", file=sys.stderr)
        return 130
    return 0


if __name__ == "__main__":  # pragma: no cover - module entry point
    raise SystemExit(main())
