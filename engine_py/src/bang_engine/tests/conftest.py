import pytest

from bang_engine.tests.factories import make_room


@pytest.fixture
def room():
    """Four seated players, sheriff to act, nothing in hand."""
    return make_room()


@pytest.fixture
def big_room():
    return make_room(num_players=6)
