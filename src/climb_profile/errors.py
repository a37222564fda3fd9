"""Exceptions raised while building and rendering a profile."""


class InvalidInputError(ValueError):
    """The track has no usable points."""


class PreconditionError(ValueError):
    """The renderer was handed data that does not satisfy its contract."""


class GeodesyError(ValueError):
    """A coordinate pair cannot be measured (NaN or out of range)."""
