#!/usr/bin/env python3
"""
Sheet API playground client:
1. Resolves a shared spreadsheet url into a canonical sheet reference (/sheet_meta)
2. Fetches the sheet's rows as JSON (/sheet/{id}) with optional offset/limit/row
3. Prints the public API url, response code and response body

Usage:
    python main.py fetch <SHEET_URL> [--offset N] [--limit N] [--row N] [--csv PATH]
    python main.py meta     # Show the service account to share sheets with
    python main.py check    # Check configuration and API server reachability
"""
import sys
import asyncio
import argparse
import logging
from pathlib import Path

from playground.errors import ConfigurationError
from playground.export.preview import export_csv, render_state
from playground.extract.sheet_meta import fetch_service_account
from playground.logger import setup_logging
from playground.models import Error, TransportFailure
from playground.orchestrator import Orchestrator
from playground.urls import extract_shared_sheet_url
from playground.utils.config import Settings, settings


logger = logging.getLogger(__name__)

# --- Command: FETCH ---

async def run_fetch(cfg: Settings, sheet_url: str, offset: str, limit: str, row: str, csv_path: str = None) -> int:
    """
    Run the resolve-then-fetch pipeline once and print the result.

    Returns the process exit code: 1 when the pipeline ended in an error.
    """
    orchestrator = Orchestrator(cfg)
    sheet_url = extract_shared_sheet_url(sheet_url)

    state = await orchestrator.submit(sheet_url, offset=offset, limit=limit, row=row)
    output = render_state(state)
    if output:
        print(output)
    else:
        logger.info("Nothing to fetch: sheet url is empty")

    if csv_path:
        path = Path(csv_path)
        if not path.is_absolute() and path.parent == Path("."):
            path = Path(cfg.EXPORT_PATH) / path
        export_csv(state, path)

    return 1 if isinstance(state, (Error, TransportFailure)) else 0


# --- Command: META ---

async def run_meta(cfg: Settings) -> int:
    account = await fetch_service_account(cfg)
    if not account:
        logger.error("Could not load the service account from the API server")
        return 1
    print(f"Publish the spreadsheet or share it with {account}")
    return 0


# --- Command: CHECK ---

async def run_check_env(cfg: Settings) -> int:
    """Check configuration and that the API server answers."""
    logger.info("Checking configuration...")

    import os
    if not os.path.exists('.env'):
        logger.info(".env not found, using environment variables only")
    else:
        logger.info(".env found")

    try:
        base = cfg.request_base()
    except ConfigurationError as e:
        logger.error(f"Configuration invalid: {e}")
        return 1
    logger.info(f"API server: {base}")

    account = await fetch_service_account(cfg)
    if account is None:
        logger.error("API server did not answer /meta")
        return 1
    logger.info(f"API server reachable, service account: {account}")
    return 0


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Sheet API playground: turn a spreadsheet url into a JSON API url"
    )
    parser.add_argument("--debug", action="store_true", help="Set log level to DEBUG")
    parser.add_argument("--json-logs", action="store_true", help="Enable JSON logging format")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Fetch command
    p_fetch = subparsers.add_parser('fetch', help='Resolve a sheet url and fetch its data')
    p_fetch.add_argument('sheet_url', help='Spreadsheet url (or a playground link with ?sheetUrl=)')
    p_fetch.add_argument('--offset', default='', help='Rows to skip (optional)')
    p_fetch.add_argument('--limit', default='', help='Maximum rows to return (optional)')
    p_fetch.add_argument('--row', default='', help='Single row to return (optional)')
    p_fetch.add_argument('--csv', default=None, help='Also write the returned rows to this CSV file')

    # Meta command
    subparsers.add_parser('meta', help='Show the service account to share sheets with')

    # Check command
    subparsers.add_parser('check', help='Check configuration')

    args = parser.parse_args()

    log_level = "DEBUG" if getattr(args, 'debug', False) else settings.LOG_LEVEL
    json_format = getattr(args, 'json_logs', False)
    setup_logging(level=log_level, json_format=json_format)

    try:
        if args.command == 'fetch':
            code = asyncio.run(run_fetch(settings, args.sheet_url, args.offset, args.limit, args.row, args.csv))
        elif args.command == 'meta':
            code = asyncio.run(run_meta(settings))
        elif args.command == 'check':
            code = asyncio.run(run_check_env(settings))
    except KeyboardInterrupt:
        logger.info("Process interrupted by user")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    main()
