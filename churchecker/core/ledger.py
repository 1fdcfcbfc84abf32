"""Totals for the money ledgers (offerings and expenses), recomputed from raw rows."""

from collections import defaultdict
from datetime import date
from typing import Any, Dict, Iterable


def _as_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def summarize_ledger(rows: Iterable[Dict[str, Any]], date_column: str, group_column: str, today: date) -> Dict[str, Any]:
    """total, this_month_total/count and per-group totals of a ledger"""
    total = 0
    count = 0
    this_month_total = 0
    this_month_count = 0
    by_group: Dict[str, int] = defaultdict(int)
    for row in rows:
        amount = row.get("amount") or 0
        total += amount
        count += 1
        by_group[row.get(group_column) or "other"] += amount
        day = _as_date(row[date_column])
        if day.year == today.year and day.month == today.month:
            this_month_total += amount
            this_month_count += 1
    return {
        "total": total,
        "count": count,
        "this_month_total": this_month_total,
        "this_month_count": this_month_count,
        "by_group": dict(by_group),
    }
