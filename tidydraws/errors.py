"""Exceptions and warnings raised by tidydraws."""


class TidyDrawsError(Exception):
    """Base class for all tidydraws errors."""


class UnknownParameter(TidyDrawsError, KeyError):
    """A requested parameter name matches nothing in the sample store."""

    def __str__(self) -> str:
        # KeyError quotes its message; keep it readable
        return str(self.args[0]) if self.args else ""


class IndexCardinalityMismatch(TidyDrawsError):
    """An index dimension disagrees with its recovered levels or another spec."""


class EmptySampleSet(TidyDrawsError):
    """A group has no samples left to summarize."""


class UnmatchedDraw(TidyDrawsError):
    """Two factor levels do not share the same draw identities."""


class InvalidProbability(TidyDrawsError, ValueError):
    """A coverage probability lies outside the open interval (0, 1)."""


class MissingValuesWarning(UserWarning):
    """Missing values were dropped before summarizing."""
