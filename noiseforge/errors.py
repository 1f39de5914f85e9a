"""Request validation errors."""


class ValidationError(ValueError):
    """A noise request was rejected before generation started."""


class InvalidDimensions(ValidationError):
    pass


class InvalidFrequency(ValidationError):
    pass


class InvalidOctaves(ValidationError):
    pass


class InvalidNoiseKind(ValidationError):
    pass


class InvalidFractalParameters(ValidationError):
    pass
