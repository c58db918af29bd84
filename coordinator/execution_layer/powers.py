from coordinator.constants import MIN_POT_EXPONENT


def estimate_pot(constraints: int) -> int:
    """
    Estimate the smallest Powers of Tau exponent able to hold a circuit.

    Args:
        constraints (int): Number of constraints of the circuit.

    Returns:
        int: The smallest exponent `e >= MIN_POT_EXPONENT` with `2**e >= constraints`.
    """
    if constraints < 0:
        raise ValueError(f"Constraint count must be non-negative, got {constraints}")
    # (c - 1).bit_length() == ceil(log2(c)) for c >= 1, without float rounding
    return max(MIN_POT_EXPONENT, (constraints - 1).bit_length() if constraints else 0)
