from __future__ import annotations

import argparse
import asyncio
import json
import sys

import structlog

from .config import settings
from .gateway import QueryGateway
from .logging_config import setup_logging
from .service import TrustService

log = structlog.get_logger()


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="passfield-guard",
        description="Check host names against the password-field trust list.",
    )
    parser.add_argument("domains", nargs="+", metavar="DOMAIN")
    parser.add_argument("--config", default=settings.config_url, help="bootstrap config.json location")
    parser.add_argument("--base-url", default=settings.base_url, help="base for relative locations")
    parser.add_argument(
        "--strict", action="store_true", help="exit with status 1 if any domain is untrusted"
    )
    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> int:
    setup_logging(settings.log_level)
    log.info("starting_passfield_guard", config_url=args.config, domains=len(args.domains))

    untrusted = 0
    async with TrustService(config_url=args.config, base_url=args.base_url) as service:
        gateway = QueryGateway(service.handle_message)
        for domain in args.domains:
            trusted = await gateway.query_is_trusted(domain.lower())
            if not trusted:
                untrusted += 1
            print(json.dumps({"domain": domain, "isWhitelisted": trusted}))

    log.info("run_complete", checked=len(args.domains), untrusted=untrusted)
    return 1 if args.strict and untrusted else 0


def main(argv: list[str] | None = None) -> None:
    sys.exit(asyncio.run(run(_parse_args(argv))))


if __name__ == "__main__":
    main()
