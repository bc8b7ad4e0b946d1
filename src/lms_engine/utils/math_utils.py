def round_half_up_ratio(numerator: int, denominator: int) -> int:
    """
    Rounds numerator / denominator to the nearest integer, halves rounding up,
    using integer arithmetic only. Python's round() would round halves to even.
    Both arguments must be non-negative and the denominator positive.
    """
    if denominator <= 0:
        raise ValueError("denominator must be positive")
    return (2 * numerator + denominator) // (2 * denominator)


def percent_of(part: int, whole: int) -> int:
    """Whole-number percentage of part in whole; 0 when whole is 0."""
    if whole <= 0:
        return 0
    return round_half_up_ratio(100 * part, whole)
