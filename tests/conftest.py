import pytest

from potential import Schedule


VILLAGE_Y0 = [10, 15, 20, 20, 10, 15, 15]
VILLAGE_Y1 = [15, 15, 30, 15, 20, 15, 30]


@pytest.fixture
def villages():
    """Seven villages with both potential outcomes known; true ATE is 5.0."""
    return Schedule.from_arrays(VILLAGE_Y0, VILLAGE_Y1)
