"""Order code generation.

Codes look like ``COD-21032025-0007``: a fixed prefix, the kitchen day as
DDMMYYYY and a four digit sequence number that restarts at 0001 every day.

The generator keeps one DailyCounter per process. Reading and advancing it
happens under a lock, so concurrent callers never receive the same number.
When the day changes the counter is replaced, never patched in place.
"""

import threading
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import date, datetime

import structlog

from pizzaparty.services.orders.exceptions import ExhaustedSequence
from pizzaparty.utils.datetime_utils import kitchen_today

logger = structlog.get_logger(__name__)

DATE_FORMAT = "%d%m%Y"
SEQUENCE_DIGITS = 4
MAX_SEQUENCE = 10**SEQUENCE_DIGITS - 1


@dataclass(frozen=True, slots=True)
class DailyCounter:
    """Next sequence number to issue for one kitchen day."""

    day: date
    next_value: int = 1

    def advance(self) -> "DailyCounter":
        return replace(self, next_value=self.next_value + 1)


@dataclass(frozen=True, slots=True)
class OrderCode:
    """Parsed order code."""

    prefix: str
    day: date
    number: int

    def __str__(self) -> str:
        return format_order_code(self.prefix, self.day, self.number)


def format_order_code(prefix: str, day: date, number: int) -> str:
    return f"{prefix}-{day.strftime(DATE_FORMAT)}-{number:0{SEQUENCE_DIGITS}d}"


def parse_order_code(code: str) -> OrderCode:
    """Split an order code into prefix, day and number.

    Raises:
        ValueError: If the code is not in PREFIX-DDMMYYYY-NNNN form
    """
    parts = code.rsplit("-", 2)
    if len(parts) != 3:
        raise ValueError(f"Malformed order code: {code!r}")
    prefix, day_part, number_part = parts
    if not prefix or len(day_part) != 8 or not day_part.isdigit():
        raise ValueError(f"Malformed order code: {code!r}")
    if len(number_part) != SEQUENCE_DIGITS or not number_part.isdigit():
        raise ValueError(f"Malformed order code: {code!r}")
    day = datetime.strptime(day_part, DATE_FORMAT).date()
    return OrderCode(prefix=prefix, day=day, number=int(number_part))


class OrderCodeGenerator:
    """Issues unique, day-scoped sequential order codes.

    Thread-safe; a single instance should be shared by the whole process.
    """

    def __init__(self, prefix: str = "COD", *, clock: Callable[[], date] = kitchen_today):
        self.prefix = prefix
        self._clock = clock
        self._lock = threading.Lock()
        self._counter: DailyCounter | None = None

    @property
    def counter(self) -> DailyCounter | None:
        """Snapshot of the current counter (None before the first code)."""
        return self._counter

    def next(self) -> str:
        """Issue the next code for today.

        Raises:
            ExhaustedSequence: If all numbers for today have been issued
        """
        with self._lock:
            today = self._clock()
            counter = self._counter
            if counter is None or counter.day != today:
                counter = DailyCounter(day=today)
            # Keep the (possibly fresh) counter so exhaustion sticks for the day
            self._counter = counter
            if counter.next_value > MAX_SEQUENCE:
                logger.error("Order code sequence exhausted", day=today.isoformat(), limit=MAX_SEQUENCE)
                raise ExhaustedSequence(f"No order codes left for {today.strftime(DATE_FORMAT)}")
            self._counter = counter.advance()
            number = counter.next_value

        return format_order_code(self.prefix, today, number)

    def fast_forward(self, code: str) -> None:
        """Move the counter past an already used code of the current day.

        Codes of other days or prefixes are ignored, and the counter never
        moves backwards.
        """
        observed = parse_order_code(code)
        if observed.prefix != self.prefix:
            return

        with self._lock:
            if observed.day != self._clock():
                return
            counter = self._counter
            if counter is None or counter.day != observed.day:
                counter = DailyCounter(day=observed.day)
            if observed.number >= counter.next_value:
                counter = DailyCounter(day=observed.day, next_value=observed.number + 1)
                logger.info("Order code counter fast-forwarded", code=code, next_value=counter.next_value)
            self._counter = counter
