#!/usr/bin/env python3
"""
Example: Close every Hyperliquid position and cancel every resting order.

The backend closes and cancels item by item and reports a partition of
closed positions, cancelled orders and errors; this script prints it.

Usage:
    python examples/close_all_positions.py [--yes]

Environment Variables:
    NUMORA_SESSION_TOKEN=your_session_token_here
    NUMORA_BASE_URL=http://localhost:5000
"""

import argparse
import asyncio
import logging

from numora_client import BulkActionOrchestrator, NumoraClient, Notifier

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def print_toast(toast):
    print(f"[{toast.variant.value}] {toast.title}: {toast.description}")


async def main(confirmed: bool):
    async with NumoraClient.from_env() as client:
        positions = [p for p in await client.get_positions() if p.can_close]
        print(f"{len(positions)} Hyperliquid position(s) open")

        if not confirmed:
            print("Dry run, pass --yes to close everything")
            return

        actions = BulkActionOrchestrator(client, Notifier(print_toast))
        summary = await actions.close_all()
        if summary is None:
            return

        for result in summary.errors:
            print(f"  failed: {result.target}: {result.error_message}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Close all Hyperliquid positions")
    parser.add_argument("--yes", action="store_true", help="Actually send the close-all request")
    args = parser.parse_args()
    asyncio.run(main(args.yes))
