"""
Pytest configuration and shared fixtures.
"""
import pytest
from datetime import date, timedelta
from typing import Optional, Tuple

from cyclesync.models.cycle import CycleInterval
from cyclesync.models.profile import Profile
from cyclesync.services.profile_store import ProfileStore
from cyclesync.utils.storage import InMemoryStorage, reset_storage


def make_profile(*intervals: Tuple[date, Optional[date]], name: str = "Test User") -> Profile:
    """Build a profile from (start, end) pairs, kept in the given order."""
    return Profile(
        id="u123",
        name=name,
        cycles=[CycleInterval(start_date=start, end_date=end) for start, end in intervals]
    )


@pytest.fixture
def storage() -> InMemoryStorage:
    """Create an empty in-memory storage backend."""
    return InMemoryStorage()


@pytest.fixture
def store(storage) -> ProfileStore:
    """Create a profile store writing to in-memory storage."""
    ids = iter(f"u{n}" for n in range(1000))
    return ProfileStore(storage, id_factory=lambda: next(ids))


@pytest.fixture
def regular_profile() -> Profile:
    """Create a profile with closed periods exactly 28 days apart."""
    return make_profile(*[
        (date(2024, 1, 1) + timedelta(days=i * 28), date(2024, 1, 5) + timedelta(days=i * 28))
        for i in range(4)
    ])


@pytest.fixture
def irregular_profile() -> Profile:
    """Create a profile with cycles of 24, 31 and 26 days."""
    return make_profile(
        (date(2024, 1, 1), date(2024, 1, 5)),
        (date(2024, 1, 25), date(2024, 1, 29)),  # 24 days
        (date(2024, 2, 25), date(2024, 2, 29)),  # 31 days
        (date(2024, 3, 22), date(2024, 3, 26)),  # 26 days
    )


@pytest.fixture
def history_profile() -> Profile:
    """Create a profile with two completed cycles and an ongoing period."""
    return make_profile(
        (date(2024, 1, 1), date(2024, 1, 5)),
        (date(2024, 3, 3), None),
        (date(2024, 1, 29), date(2024, 2, 2)),
    )


@pytest.fixture(autouse=True)
def clean_storage_singleton():
    """Make sure environment-driven storage is rebuilt for every test."""
    reset_storage()
    yield
    reset_storage()


@pytest.fixture
def profile_factory():
    """Provide the (start, end) profile builder."""
    return make_profile
