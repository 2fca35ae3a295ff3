"""Collection Calendar — month arithmetic for due dates and monthly donation windows.

Invariants:
    - add_one_month clamps to the last valid day (Jan 31 -> Feb 28/29), never overflows
    - Time of day and tzinfo are preserved by add_one_month
    - month_bounds returns [first instant of month, first instant of next month)

Design Decisions:
    - dateutil.relativedelta over manual day juggling: calendar-correct clamping for free
    - Half-open month window: no 23:59:59 end-of-day fudge, no lost sub-second events
"""

from datetime import datetime

from dateutil.relativedelta import relativedelta


def add_one_month(moment: datetime) -> datetime:
    return moment + relativedelta(months=1)


def month_bounds(moment: datetime) -> tuple[datetime, datetime]:
    """Start (inclusive) and end (exclusive) of the calendar month containing moment."""
    start = moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    return start, start + relativedelta(months=1)
