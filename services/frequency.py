"""
Payment frequency resolution.

Maps a cadence name ("monthly", "quarterly", "10_days", ...) to a step unit
and step size, and produces the n-th due date from an anchor date.
"""
import enum
import re
from dataclasses import dataclass
from datetime import date
from typing import Optional

from dateutil.relativedelta import relativedelta

from .exceptions import InvalidFrequency


DEFAULT_FREQUENCY = "monthly"


class FrequencyUnit(str, enum.Enum):
     DAYS = "days"
     WEEKS = "weeks"
     MONTHS = "months"
     YEARS = "years"


@dataclass(frozen=True)
class Frequency:
     """A resolved cadence: advance ``step`` ``unit``s per installment."""

     unit: FrequencyUnit
     step: int = 1

     def offset(self, periods: int) -> relativedelta:
          return relativedelta(**{self.unit.value: self.step * periods})

     def nth_date(self, anchor: date, n: int) -> date:
          """
          Due date of installment ``n`` (0-based) counted from ``anchor``.

          Always computed from the anchor, so month-end dates clamp per month
          (Jan 31 -> Feb 29 -> Mar 31) instead of drifting.
          """
          return anchor + self.offset(n)


_NAMED_FREQUENCIES = {
     "daily": Frequency(FrequencyUnit.DAYS, 1),
     "weekly": Frequency(FrequencyUnit.WEEKS, 1),
     "biweekly": Frequency(FrequencyUnit.WEEKS, 2),
     "monthly": Frequency(FrequencyUnit.MONTHS, 1),
     "bimonthly": Frequency(FrequencyUnit.MONTHS, 2),
     "quarterly": Frequency(FrequencyUnit.MONTHS, 3),
     "biannual": Frequency(FrequencyUnit.MONTHS, 6),
     "semiannual": Frequency(FrequencyUnit.MONTHS, 6),
     "yearly": Frequency(FrequencyUnit.YEARS, 1),
     "annual": Frequency(FrequencyUnit.YEARS, 1),
     "annually": Frequency(FrequencyUnit.YEARS, 1),
}

# Custom cadences: "10_days", "2 weeks", "every_3_months", "1-year"
_CUSTOM_PATTERN = re.compile(r"^(?:every[ _-]?)?(\d+)[ _-]?(day|week|month|year)s?$")


def resolve_frequency(name: Optional[str] = None) -> Frequency:
     """
     Resolve a cadence name.

     Omitted / blank names fall back to monthly. Unknown names and
     non-positive custom steps raise InvalidFrequency.
     """
     if name is None or not name.strip():
          return _NAMED_FREQUENCIES[DEFAULT_FREQUENCY]

     key = name.strip().lower()
     if key in _NAMED_FREQUENCIES:
          return _NAMED_FREQUENCIES[key]

     match = _CUSTOM_PATTERN.match(key)
     if match:
          step = int(match.group(1))
          if step < 1:
               raise InvalidFrequency(f"Frequency step must be at least 1, got '{name}'")
          return Frequency(FrequencyUnit(match.group(2) + "s"), step)

     raise InvalidFrequency(f"Unknown payment frequency '{name}'")
