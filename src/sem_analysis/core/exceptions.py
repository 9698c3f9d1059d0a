"""
Error types raised by the estimation engine and the item parameter store.
"""


class ParseError(ValueError):
    """Malformed item parameters (missing or non-numeric thresholds)."""

    def __init__(
        self,
        message: str,
        row: int | None = None,
        column: int | None = None,
    ) -> None:
        self.row = row
        self.column = column
        location = ""
        if row is not None:
            location = f"row {row}"
            if column is not None:
                location += f", column {column}"
            location = f" ({location})"
        super().__init__(f"{message}{location}")


class DegenerateResponseError(Exception):
    """A response pattern has no interior root of the estimating equation.

    Attributes:
        bound: The boundary of the theta range the pattern points to, or
            None when the pattern carries no information at all.
    """

    def __init__(self, message: str, bound: float | None = None) -> None:
        self.bound = bound
        super().__init__(message)


class NonConvergenceError(Exception):
    """Root finding exceeded its iteration cap without meeting tolerance."""

    def __init__(self, n_iterations: int, tolerance: float) -> None:
        self.n_iterations = n_iterations
        self.tolerance = tolerance
        super().__init__(
            f"Root finding did not converge to tolerance {tolerance} "
            f"within {n_iterations} iterations"
        )


class UndefinedStandardError(Exception):
    """Information at the estimate is (near) zero, so the SE is undefined."""

    def __init__(self, information: float) -> None:
        self.information = information
        super().__init__(
            f"Standard error undefined: information {information:.3g} "
            "at the estimate is not positive"
        )


class ProjectRootNotFound(Exception):
    pass
