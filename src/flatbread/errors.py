"""Exceptions raised by the table model."""


class DataStructureError(ValueError):
    """Input violates a structural invariant (ragged axis labels, row/column count mismatch).

    Raised when a Data object is constructed or updated, never during layout.
    An empty dataset is valid and does not raise.
    """
