"""Exceptions raised when an object fails validation on insertion.

Error taxonomy:
- StructuralError: the object references a handle that does not resolve
  inside the store it is inserted into.
- GeometricError: the object fails a type-specific consistency check.

Degenerate geometry during triangulation is not an error; it yields fewer
triangles instead.
"""


class ValidationError(ValueError):
    """Base class for objects rejected by a :class:`~brepcore.shape.Shape`."""

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class StructuralError(ValidationError):
    """An object references a missing, foreign or mistyped handle."""

    @property
    def handle(self):
        return self.details.get('handle')


class GeometricError(ValidationError):
    """An object fails a geometric consistency predicate."""

    @property
    def predicate(self):
        return self.details.get('predicate')


__all__ = ['ValidationError', 'StructuralError', 'GeometricError']
