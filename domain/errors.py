"""
Error taxonomy for the tower data model.

Construction and load failures surface as these exceptions. Contract
violations (dereferencing past-the-end or dangling references) are
programmer errors and are only guarded by assertions.
"""


class CaloError(Exception):
    """Base class for all tower data model errors."""


class InvalidArgument(CaloError, ValueError):
    """A required argument (e.g. the tower source) is missing."""


class SchemaError(CaloError):
    """A required branch or tree is missing from the tower source."""


class SourceError(CaloError):
    """The requested entry does not exist or could not be read."""
