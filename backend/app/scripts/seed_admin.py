#!/usr/bin/env python3
"""
Script to create the initial admin user, or promote an existing one.

Usage:
  python -m app.scripts.seed_admin [--email EMAIL] [--password PASSWORD] [--name NAME]

Connection string, secret and credentials default to MONGO_URI, JWT_SECRET,
ADMIN_EMAIL and ADMIN_PASSWORD from the environment or .env.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from app.core.config import Settings, get_settings
from app.core.logging_config import setup_logging
from app.services.seed_service import SeedStatus, seed_admin

logger = logging.getLogger("app.scripts.seed_admin")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Ensure an admin user exists")
    parser.add_argument("--email", help="Admin email (overrides ADMIN_EMAIL)")
    parser.add_argument("--password", help="Password used if the user is created (overrides ADMIN_PASSWORD)")
    parser.add_argument("--name", help="Display name used if the user is created")
    return parser


def resolve_settings(args: argparse.Namespace, base: Optional[Settings] = None) -> Settings:
    base = base or get_settings()
    overrides = {}
    if args.email:
        overrides["ADMIN_EMAIL"] = args.email
    if args.password:
        overrides["ADMIN_PASSWORD"] = args.password
    if args.name:
        overrides["ADMIN_FULL_NAME"] = args.name
    return base.model_copy(update=overrides)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = resolve_settings(args)
    except ValidationError as e:
        print(f"❌ Invalid configuration: {e}", file=sys.stderr)
        return 1

    setup_logging(settings.LOG_LEVEL, settings.GRAYLOG_HOST, settings.GRAYLOG_PORT)

    result = asyncio.run(seed_admin(settings))

    if result.status == SeedStatus.SUCCESS:
        logger.info(result.message)
    else:
        logger.error(result.message)
    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())
