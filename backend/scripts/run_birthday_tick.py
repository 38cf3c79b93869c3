#!/usr/bin/env python3
"""
Run one birthday scheduler tick by hand (same code path as the scheduled job).

Usage: cd backend && poetry run python scripts/run_birthday_tick.py [--at 2024-12-25T02:05:00Z] [--generate]
  --at        pretend "now" is this UTC instant (ISO 8601)
  --generate  run job generation even if this is outside UTC hour 0
"""
import argparse
import sys
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from app.config import settings
from app.core.logging import setup_logging
from app.scheduler.birthday_job import run_birthday_tick


def _parse_at(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def main() -> int:
    parser = argparse.ArgumentParser(description="Run one birthday tick (generate during UTC hour 0, dispatch always)")
    parser.add_argument("--at", type=_parse_at, default=None, help="UTC instant to use as now (ISO 8601)")
    parser.add_argument("--generate", action="store_true", help="Force job generation on this tick")
    args = parser.parse_args()

    setup_logging(settings)
    report = run_birthday_tick(args.at, force_generation=args.generate)
    if report is None:
        print("Tick failed or was skipped; see log.")
        return 1
    print(f"Tick at {report.now.isoformat()} ({report.kind.value})")
    if report.generation is not None:
        print(f"  {report.generation.summary()}")
    if report.dispatch is not None:
        print(f"  {report.dispatch.summary()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
