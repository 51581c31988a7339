"""
Seedable source of raw random values backed by Faker
"""
import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any, List, Optional, Sequence, Tuple

from faker import Faker

logger = logging.getLogger(__name__)

# Seeded runs are anchored here unless a reference time is configured
SEEDED_REFERENCE_TIME = datetime(2025, 1, 1, tzinfo=timezone.utc)

Bucket = Tuple[float, float, float]


def as_datetime(value: Any) -> Optional[datetime]:
    """Normalise dates and naive datetimes to aware UTC datetimes"""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    if isinstance(value, str):
        return as_datetime(datetime.fromisoformat(value))
    return None


class ValueSource:
    """
    Wraps one Faker instance and its private Random so that a single seed
    drives every value drawn during a build
    """

    def __init__(self, seed: Optional[int] = None, locale: str = "en_US",
                 reference_time: Optional[datetime] = None):
        self.locale = locale
        self.faker = Faker(locale)
        self.reference_time = as_datetime(reference_time)
        self._seed: Optional[int] = None
        self._identity_state: Optional[List[int]] = None
        if seed is not None:
            self.seed(seed)

    @property
    def random(self):
        return self.faker.random

    @property
    def seeded(self) -> bool:
        return self._seed is not None

    def seed(self, seed: int):
        """Reseed the Faker instance and the shared Random"""
        self._seed = seed
        self.faker.seed_instance(seed)
        self._identity_state = None
        logger.debug(f"Value source seeded with {seed}")

    def now(self) -> datetime:
        if self.reference_time is not None:
            return self.reference_time
        if self.seeded:
            return SEEDED_REFERENCE_TIME
        return datetime.now(timezone.utc)

    # Numbers

    def uniform_int(self, low: int, high: int) -> int:
        if high < low:
            low, high = high, low
        return self.random.randint(int(low), int(high))

    def uniform_float(self, low: float, high: float, precision: int = 2) -> float:
        if high < low:
            low, high = high, low
        return round(self.random.uniform(low, high), precision)

    def chance(self, probability: float) -> bool:
        return self.random.random() < probability

    def weighted_bucket(self, buckets: Sequence[Bucket]) -> Tuple[float, float]:
        """
        Roulette selection over (low, high, weight) buckets

        Returns:
            The (low, high) range of the chosen bucket
        """
        total = sum(weight for _, _, weight in buckets)
        point = self.random.random() * total
        cumulative = 0.0
        for low, high, weight in buckets:
            cumulative += weight
            if point <= cumulative:
                return low, high
        low, high, _ = buckets[-1]
        return low, high

    # Collections

    def choice(self, items: Sequence[Any]) -> Any:
        return items[self.random.randrange(len(items))]

    def sample(self, items: Sequence[Any], count: int) -> List[Any]:
        count = max(0, min(count, len(items)))
        return self.random.sample(list(items), count)

    # Dates

    def date_between(self, start: Any, end: Any) -> datetime:
        start, end = as_datetime(start), as_datetime(end)
        if end < start:
            start, end = end, start
        span = (end - start).total_seconds()
        return start + timedelta(seconds=self.random.uniform(0, span))

    def past(self, days: float, refdate: Optional[datetime] = None) -> datetime:
        ref = as_datetime(refdate) or self.now()
        return self.date_between(ref - timedelta(days=days), ref)

    def future(self, days: float, refdate: Optional[datetime] = None) -> datetime:
        ref = as_datetime(refdate) or self.now()
        return self.date_between(ref, ref + timedelta(days=days))

    # Identifiers

    def identity_parts(self) -> Tuple[int, int, int]:
        """
        Machine id, process id and the next counter value for document
        identifiers; drawn once per seed so identifiers stay reproducible
        """
        if self._identity_state is None:
            self._identity_state = [
                self.random.getrandbits(24),
                self.random.getrandbits(16),
                self.random.getrandbits(24),
            ]
        machine, process, counter = self._identity_state
        self._identity_state[2] = (counter + 1) % 0x1000000
        return machine, process, counter
