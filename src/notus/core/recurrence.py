"""Recurrence policies - one calendar-aware step rule per cadence."""

from datetime import date
from enum import Enum

from dateutil.relativedelta import relativedelta


class Recurrence(Enum):
    """How often a recurring event repeats."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @property
    def step(self) -> relativedelta:
        return _STEPS[self]

    def time_step(self, d: date) -> date:
        """The next occurrence after ``d``."""
        return d + self.step

    def nth(self, base: date, n: int) -> date:
        """
        The n-th occurrence counted from ``base`` (n=0 is ``base`` itself).

        Stepping is anchored on ``base``, so month and year steps clamp to the
        end of short months without drifting: Jan 31 gives Feb 29 (leap year),
        then Mar 31.
        """
        return base + self.step * n


_STEPS = {
    Recurrence.DAILY: relativedelta(days=1),
    Recurrence.WEEKLY: relativedelta(weeks=1),
    Recurrence.MONTHLY: relativedelta(months=1),
    Recurrence.YEARLY: relativedelta(years=1),
}
