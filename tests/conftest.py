import pytest

from aggregator.services.cache import CacheManager
from aggregator.services.statistics import StatisticsAccumulator
from tests.helpers import SleepRecorder


@pytest.fixture
def cache():
    """Fresh result cache."""
    return CacheManager()


@pytest.fixture
def statistics():
    """Fresh statistics accumulator."""
    return StatisticsAccumulator()


@pytest.fixture
def sleep_recorder():
    """Records backoff delays instead of sleeping."""
    return SleepRecorder()
