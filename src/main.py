# src/main.py — v3
"""CLI entry point: profile and health commands.

Usage:
    ghcard profile <login> [--scope personal|org|all] [--orgs a,b] [options]
    ghcard health
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import TYPE_CHECKING

from ghcard.version import __version__

if TYPE_CHECKING:
    from ghcard.config.settings import Settings

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    from ghcard.config.settings import ConfigurationError, load_settings

    try:
        settings = load_settings()
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    _setup_logging(settings, args.verbose)

    try:
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="ghcard",
        description=f"ghcard v{__version__} - cached GitHub profile statistics",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- profile ---
    p_profile = subparsers.add_parser(
        "profile", help="Fetch a user's profile statistics as JSON",
    )
    p_profile.add_argument("login", help="GitHub login")
    p_profile.add_argument(
        "--scope", choices=["personal", "org", "all"], default="personal",
        help="Repositories to count (default: personal)",
    )
    p_profile.add_argument(
        "--orgs", default="",
        help="Comma-separated organization logins for org/all scopes",
    )
    p_profile.add_argument(
        "--lang-count", type=int, default=5,
        help="Number of languages to rank, 1-10 (default: 5)",
    )
    p_profile.add_argument(
        "--no-languages", action="store_true",
        help="Skip language aggregation",
    )
    p_profile.add_argument(
        "--refresh", action="store_true",
        help="Bypass cached values",
    )
    p_profile.set_defaults(func=_cmd_profile)

    # --- health ---
    p_health = subparsers.add_parser(
        "health", help="Show cache telemetry and persistent store reachability",
    )
    p_health.set_defaults(func=_cmd_health)

    return parser


async def _cmd_profile(args: argparse.Namespace, settings: Settings) -> int:
    """Fetch one profile and print it."""
    from pydantic import ValidationError

    from ghcard.api.facade import create_profile_service
    from ghcard.github.errors import ProfileFetchError

    async with create_profile_service(settings) as service:
        try:
            profile = await service.get_profile(
                args.login,
                include_languages=not args.no_languages,
                language_limit=args.lang_count,
                scope=args.scope,
                organizations=args.orgs,
                force_refresh=args.refresh,
            )
        except ValidationError:
            logger.error("Invalid GitHub login: %r", args.login)
            return 1
        except ProfileFetchError as exc:
            logger.error("%s (%s, HTTP %d)", exc, exc.kind.value, exc.http_status)
            return 1

    print(profile.model_dump_json(indent=2))
    return 0


async def _cmd_health(args: argparse.Namespace, settings: Settings) -> int:
    """Print the service health report."""
    from ghcard.api.facade import create_profile_service

    async with create_profile_service(settings) as service:
        report = await service.health()

    print(report.model_dump_json(indent=2))
    return 0


def _setup_logging(settings: Settings, verbose: bool) -> None:
    """Configure logging for CLI usage."""
    from ghcard.logging.logger import setup_logging

    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )


if __name__ == "__main__":
    sys.exit(main())
