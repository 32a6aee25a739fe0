#!/usr/bin/env python3
"""
View the cash forecast, aging summary and KPIs from persisted data.

Connects to the database (tables and data must already exist) and prints
the dashboard figures as of today.  Structured log lines go to stderr at
the configured ``log_level``.

Usage:
    python3 scripts/view_cashflow.py
    python3 scripts/view_cashflow.py --days 30 --db-url sqlite:///cash.db
    python3 scripts/view_cashflow.py --json
"""

import argparse
import json
import sys
from pathlib import Path
from uuid import uuid4

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

W = 64


def banner(title: str) -> None:
    print()
    print("=" * W)
    print(f"  {title}")
    print("=" * W)


def field(name: str, value, indent: int = 4) -> None:
    print(f"{' ' * indent}{name}: {value}")


def print_forecast(series, every: int) -> None:
    banner(f"CASH FORECAST ({len(series)} days)")
    if not series:
        print("    (empty)")
        return
    for i, point in enumerate(series):
        if i % every == 0 or i == len(series) - 1:
            field(point.date.isoformat(), f"{point.projected_cash:>14,.2f}")


def print_aging(summary) -> None:
    banner("AGING")
    for name, value in summary.to_dict().items():
        field(name, value)


def print_kpis(kpis) -> None:
    banner("KPIS")
    for name, value in kpis.to_dict().items():
        field(name, "n/a" if value is None else value)


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Print the cash forecast, aging summary and dashboard KPIs.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "examples:\n"
            "  python3 scripts/view_cashflow.py --days 30\n"
            "  python3 scripts/view_cashflow.py --config cashflow.yaml --json\n"
        ),
    )
    parser.add_argument(
        "--days", type=int, default=None,
        help="Forecast horizon in days (default: from config)",
    )
    parser.add_argument(
        "--every", type=int, default=7,
        help="Print every Nth forecast day (default: 7)",
    )
    parser.add_argument(
        "--config", type=Path, default=None,
        help="YAML file overriding the packaged defaults",
    )
    parser.add_argument(
        "--db-url", type=str, default=None,
        help="Database URL (default: from config or CASHFLOW_DATABASE_URL)",
    )
    parser.add_argument(
        "--json", action="store_true",
        help="Output JSON instead of formatted text",
    )

    args = parser.parse_args()
    if args.every < 1:
        print("  ERROR: --every must be at least 1", file=sys.stderr)
        return 1

    from cashflow_config import get_active_config
    from cashflow_kernel.db.engine import get_session, init_engine_from_url
    from cashflow_kernel.domain.clock import SystemClock
    from cashflow_kernel.exceptions import CashflowError
    from cashflow_kernel.logging_config import LogContext, configure_logging
    from cashflow_kernel.selectors.settings_selector import SettingsSelector
    from cashflow_modules.dashboard.service import DashboardService

    try:
        config = get_active_config(args.config)
    except (OSError, ValueError) as exc:
        print(f"  ERROR: Invalid configuration: {exc}", file=sys.stderr)
        return 1

    # JSON log lines go to stderr; stdout carries the report
    configure_logging(level=config.log_level, stream=sys.stderr)

    # Connect
    try:
        init_engine_from_url(args.db_url or config.database_url, echo=False)
    except Exception as exc:
        print(f"  ERROR: Cannot connect to database: {exc}", file=sys.stderr)
        return 1

    session = get_session()

    try:
        with LogContext.bind(request_id=f"view_cashflow-{uuid4().hex[:12]}"):
            svc = DashboardService(session, clock=SystemClock(), config=config)
            series = svc.project_cashflow(args.days)
            aging = svc.summarize_aging()
            kpis = svc.compute_kpis(SettingsSelector(session).get_cash_baseline())

        if args.json:
            print(json.dumps({
                "forecast": [p.to_dict() for p in series],
                "aging": aging.to_dict(),
                "kpis": kpis.to_dict(),
            }, indent=2))
            return 0

        print_kpis(kpis)
        print_aging(aging)
        print_forecast(series, args.every)
        banner("DONE")
        return 0

    except CashflowError as exc:
        print(f"  ERROR [{exc.code}]: {exc}", file=sys.stderr)
        return 1

    finally:
        session.close()


if __name__ == "__main__":
    sys.exit(main())
