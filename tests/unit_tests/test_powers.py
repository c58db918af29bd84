import math

import pytest

from coordinator.constants import MIN_POT_EXPONENT
from coordinator.execution_layer.powers import estimate_pot


@pytest.mark.parametrize(
    "constraints, expected",
    [(0, 2), (1, 2), (4, 2), (5, 3), (256, 8), (257, 9), (500, 9), (512, 9), (513, 10)],
)
def test_estimate_pot(constraints, expected):
    assert estimate_pot(constraints) == expected


def test_estimate_pot_matches_ceil_log2():
    for constraints in range(1, 5000):
        expected = max(MIN_POT_EXPONENT, math.ceil(math.log2(constraints)))
        assert estimate_pot(constraints) == expected
        assert 2 ** estimate_pot(constraints) >= constraints


def test_estimate_pot_is_monotonic():
    previous = estimate_pot(0)
    for constraints in range(1, 70000, 7):
        current = estimate_pot(constraints)
        assert current >= previous
        previous = current


def test_estimate_pot_large_circuit():
    assert estimate_pot(2**28) == 28
    assert estimate_pot(2**28 + 1) == 29


def test_estimate_pot_rejects_negative():
    with pytest.raises(ValueError):
        estimate_pot(-1)
