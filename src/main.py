"""Entry point for the wallet scam scanner.

Usage: python -m src.main <owner-address> [--json-logs] [--log-level LEVEL]
Prints the scan result as JSON on stdout.
"""

import argparse
import asyncio
import json
import sys

from loguru import logger

from src.scanner.exceptions import InvalidAddressError, UpstreamUnavailableError
from src.scanner.orchestrator import scan_wallet
from src.utils.logger import setup_logger

EXIT_UPSTREAM = 1
EXIT_INVALID_ADDRESS = 2


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Scan a Solana wallet for scam tokens.")
    parser.add_argument("owner", help="wallet address (base-58)")
    parser.add_argument("--json-logs", action="store_true", help="structured logs on stderr")
    parser.add_argument("--log-level", default="INFO")
    return parser.parse_args(argv)


async def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    setup_logger(json_logs=args.json_logs, level=args.log_level)
    logger.info(f"Scanning wallet {args.owner[:8]}...")

    try:
        result = await scan_wallet(args.owner)
    except InvalidAddressError as e:
        logger.error(f"Invalid wallet address: {e}")
        return EXIT_INVALID_ADDRESS
    except UpstreamUnavailableError as e:
        logger.error(f"Chain RPC unavailable, try again later: {e}")
        return EXIT_UPSTREAM

    json.dump(result.model_dump(by_alias=True, mode="json"), sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")
    return 0


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
