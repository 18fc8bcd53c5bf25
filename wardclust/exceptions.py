"""
Errors and warnings raised by the Ward clustering engine.
"""


class InvalidInputError(ValueError):
    """
    The observation matrix cannot be clustered.

    Raised before any clustering work starts when the dataset is empty, has
    rows of different length, or contains non-numeric or non-finite values.
    """


class DegenerateMergeError(RuntimeError):
    """
    A merge was requested with fewer than two live clusters.

    The merge loop stops as soon as one cluster remains, so this signals a
    broken internal invariant rather than a recoverable condition.
    """


class NumericInstabilityWarning(RuntimeWarning):
    """
    The Lance-Williams update produced a negative squared dissimilarity.

    The value is clamped to zero before it is stored.
    """


class NumericOverflowError(FloatingPointError):
    """
    The Lance-Williams update produced a non-finite squared dissimilarity.

    Unlike a small negative value this cannot be clamped, so the fit stops.
    """
