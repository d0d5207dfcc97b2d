"""
marketing_ingest/dates/period_labels.py

Bucket labels for daily, weekly and monthly aggregation.

Week labels use a Monday-anchored scheme: week 1 starts on the Monday of
the week containing January 1st (which may fall in the previous December).
Labels are zero-padded and year-prefixed so lexicographic order matches
chronological order. The ``> 53`` clamp to ``<year+1>/wk01`` is kept as-is
because existing chart data is keyed on these exact labels.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

MAX_WEEK_NUMBER = 53


class Granularity:
    """
    Supported aggregation bucket sizes.
    """

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    ALL = (DAY, WEEK, MONTH)


def _as_date(value: date) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def monday_of(value: date) -> date:
    """
    Return the Monday of the week containing ``value`` (Sunday belongs to the week before).
    """

    value = _as_date(value)
    return value - timedelta(days=value.weekday())


def week_label(value: date) -> str:
    """
    Return the ``YYYY/wkNN`` label of the week containing ``value``.
    """

    value = _as_date(value)
    year = value.year
    first_monday = monday_of(date(year, 1, 1))
    week_number = (monday_of(value) - first_monday).days // 7 + 1

    if week_number <= 0:
        return week_label(date(year - 1, 12, 31))
    if week_number > MAX_WEEK_NUMBER:
        return f"{year + 1}/wk01"
    return f"{year}/wk{week_number:02d}"


def month_label(value: date) -> str:
    """
    Return the ``YYYY/MM`` label of the month containing ``value``.
    """

    value = _as_date(value)
    return f"{value.year}/{value.month:02d}"


def day_label(value: date) -> str:
    """
    Return the ``YYYY-MM-DD`` label of ``value``.
    """

    return _as_date(value).isoformat()


def period_label(value: date, granularity: str) -> str:
    """
    Dispatch to the label function for ``granularity``.
    """

    if granularity == Granularity.DAY:
        return day_label(value)
    if granularity == Granularity.WEEK:
        return week_label(value)
    if granularity == Granularity.MONTH:
        return month_label(value)
    raise ValueError(f"Unsupported granularity '{granularity}'. Allowed values: {list(Granularity.ALL)}.")
