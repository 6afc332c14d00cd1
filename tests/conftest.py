import pytest

from schedlib.business_calendar import reset_defaults
from schedlib.conventions import get_calendar


@pytest.fixture(autouse=True)
def _restore_defaults():
    yield
    reset_defaults()


@pytest.fixture
def weekend():
    return get_calendar("WEEKEND")
