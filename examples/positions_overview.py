#!/usr/bin/env python3
"""
Example: Show every open position across Hyperliquid, Orderly and Polymarket.

This example demonstrates how to:
1. Create a dashboard client using environment variables
2. Fetch positions and protective orders from every venue
3. Display the unified position list with SL/TP and liquidation distance
4. Show per-venue exposure totals

Prerequisites:
- Set NUMORA_SESSION_TOKEN (and optionally NUMORA_BASE_URL)
- Install numora-client in development mode: pip install -e .

Usage:
    python examples/positions_overview.py

Environment Variables:
    NUMORA_SESSION_TOKEN=your_session_token_here
    NUMORA_BASE_URL=http://localhost:5000
"""

import asyncio
from dotenv import load_dotenv

load_dotenv()
import logging
from decimal import Decimal
from typing import Optional

from numora_client import NumoraClient, summarize_by_exchange

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def format_price(value: Optional[Decimal]) -> str:
    if value is None:
        return "N/A"
    return f"{value:,.4f}"


def format_percentage(value: Optional[Decimal]) -> str:
    if value is None:
        return "N/A"
    return f"{value * 100:+.2f}%"


def print_section_header(title: str):
    """Print a formatted section header."""
    print("\n" + "=" * 70)
    print(f" {title.upper()} ".center(70, "="))
    print("=" * 70)


async def main():
    async with NumoraClient.from_env() as client:
        positions = await client.get_positions()

        print_section_header("Positions")
        if not positions:
            print("No open positions")

        for position in positions:
            flag = " (!)" if position.is_flagged else ""
            print(
                f"{position.exchange.value:<12} {position.symbol:<16}{flag} "
                f"{position.side.value:<5} {position.size} @ {format_price(position.entry_price)} "
                f"| mark {format_price(position.current_price)} "
                f"| PnL {position.unrealized_pnl:+,.2f} ({format_percentage(position.roe)}) "
                f"| {position.leverage}x"
            )
            if position.protection_applicable:
                sl = position.stop_loss.trigger_or_limit_price if position.stop_loss else None
                tp = position.take_profit.trigger_or_limit_price if position.take_profit else None
                print(f"{'':<12} SL {format_price(sl)}  TP {format_price(tp)}  "
                      f"liq distance {format_percentage(position.liquidation_distance)}")

        print_section_header("Exposure by venue")
        for summary in summarize_by_exchange(positions):
            print(
                f"{summary.exchange.value:<12} {summary.position_count} position(s) "
                f"notional {summary.notional:,.2f}  PnL {summary.unrealized_pnl:+,.2f}"
            )

        stats = client.get_statistics()
        logger.info(f"{stats.total_requests} requests, avg {stats.avg_duration_ms:.0f} ms")


if __name__ == "__main__":
    asyncio.run(main())
