"""Error signals raised by the Hi-Lo strategy engine."""


class EmptyStructureError(LookupError):
    """Raised when querying a tree or heap that holds no data yet."""


class InvalidRangeError(ValueError):
    """Raised when a strategy or analyzer receives an inverted range (low > high)."""

    def __init__(self, low: int, high: int) -> None:
        super().__init__(f"Invalid range: low ({low}) must be <= high ({high}).")
        self.low = low
        self.high = high


class DegenerateDistributionError(ArithmeticError):
    """Raised when a probability distribution has no mass left to normalize."""


def check_range(low: int, high: int) -> None:
    """Raise InvalidRangeError unless low <= high."""
    if low > high:
        raise InvalidRangeError(low, high)
