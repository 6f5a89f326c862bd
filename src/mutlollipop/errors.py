"""Exceptions raised when a lollipop plot cannot be drawn."""


class LollipopError(ValueError):
    """Base class for fatal plotting errors."""


class MissingGeneError(LollipopError):
    """No gene symbol was given."""


class ChangeColumnNotFoundError(LollipopError):
    """No protein change column could be resolved in the mutation table."""


class NoMutationsError(LollipopError):
    """The gene has no usable mutation records."""


class ProteinNotFoundError(LollipopError):
    """No protein structure matches the gene, transcript or protein ID."""
