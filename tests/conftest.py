import pytest

from priority_events.datatypes import SHARED_ORDER


@pytest.fixture(autouse=True)
def chronological_order():
    # the shared order is process-wide; start and finish every test chronological
    SHARED_ORDER.sort_chronologically()
    yield
    SHARED_ORDER.sort_chronologically()
