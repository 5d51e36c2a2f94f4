from __future__ import annotations

import datetime
import math
from collections.abc import Iterable

from pricesync.schemas.investment import InvestmentRecord, PortfolioSummary

_DAYS_PER_YEAR = 365.25


def to_number(value) -> float | None:
    """Coerce a loosely typed numeric field; ``None`` when not a finite number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def cost_basis(record: InvestmentRecord) -> float:
    return to_number(record.total_cost) or 0.0


def _parse_date(value) -> datetime.date | None:
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip().replace("Z", "+00:00")
        try:
            return datetime.datetime.fromisoformat(text).date()
        except ValueError:
            return None
    return None


def accrued_fd_value(
    record: InvestmentRecord, today: datetime.date | None = None
) -> float | None:
    """Simple-interest value of a fixed deposit, or ``None`` if it cannot be computed."""
    principal = to_number(record.total_cost)
    rate = to_number(record.interest_rate)
    start = _parse_date(record.date)
    if principal is None or rate is None or start is None:
        return None
    if principal <= 0 or rate <= 0:
        return None

    today = today or datetime.date.today()
    years_elapsed = (today - start).days / _DAYS_PER_YEAR
    if years_elapsed <= 0:
        return None
    return principal + principal * (rate / 100) * years_elapsed


def profit_loss(record: InvestmentRecord) -> float | None:
    if record.current_value is None:
        return None
    return record.current_value - cost_basis(record)


def percentage_change(record: InvestmentRecord) -> float | None:
    change = profit_loss(record)
    basis = cost_basis(record)
    if change is None or basis <= 0:
        return None
    return change / basis * 100


def summarize(records: Iterable[InvestmentRecord]) -> PortfolioSummary:
    count = 0
    total_cost = 0.0
    current_value = 0.0
    for record in records:
        count += 1
        basis = cost_basis(record)
        total_cost += basis
        current_value += record.current_value if record.current_value is not None else basis

    change = current_value - total_cost
    return PortfolioSummary(
        count=count,
        total_cost=total_cost,
        current_value=current_value,
        profit_loss=change,
        percentage_change=change / total_cost * 100 if total_cost > 0 else None,
    )
