"""Core diff subsystem exceptions."""


class DiffError(Exception):
    """Base class for instance diff errors."""


class FieldAccessError(DiffError):
    """A field could not be read from an instance at the expected level."""


class EqualityError(DiffError):
    """Two field values could not be compared for equality."""


AccessError = FieldAccessError
