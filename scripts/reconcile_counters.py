"""Recompute post/comment counters from the join tables.

Usage: python -m scripts.reconcile_counters [POST_ID]
"""
import asyncio
import sys

from app.core.logging import setup_logging
from app.workers.maintenance import run_reconciliation


async def main(post_id: int | None) -> None:
    fixed = await run_reconciliation(post_id)
    print(f"Corrected {fixed} row(s)")


if __name__ == "__main__":
    setup_logging()
    target = int(sys.argv[1]) if len(sys.argv) > 1 else None
    asyncio.run(main(target))
