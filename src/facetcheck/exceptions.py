"""Exceptions and warnings specific to facetcheck."""

# ------------------------------------------------------------------------------
#                                   Exceptions
# ------------------------------------------------------------------------------


class FacetcheckError(Exception):
    """Base class for errors raised by facetcheck."""

    pass


class PreconditionError(FacetcheckError, ValueError):
    """
    Raised when a caller violates the precondition of an operation (zero
    normal vector, non-positive Gamma shape, non-positive sample count, etc.).
    """

    pass


# ------------------------------------------------------------------------------
#                                    Warnings
# ------------------------------------------------------------------------------


class MajorantViolationWarning(UserWarning):
    """
    Emitted when a sampled density exceeds the majorant supplied to a rejection
    sampler. Only issued when the ``check_majorant`` setting is enabled.
    """

    def __init__(self, max_ratio: float, count: int):
        super().__init__(max_ratio, count)
        self.max_ratio = max_ratio
        self.count = count

    def __str__(self):
        return (
            f"density exceeded majorant for {self.count} sample(s) "
            f"(max density / majorant = {self.max_ratio:.6g}); "
            "the acceptance rate is biased"
        )
