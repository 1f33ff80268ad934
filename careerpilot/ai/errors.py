from __future__ import annotations


class GenerationError(RuntimeError):
    def __init__(self, message: str, *, code: str = "generation_failed"):
        super().__init__(message)
        self.code = code


class ConfigurationError(GenerationError):
    """A provider is unknown or has no usable credentials."""

    def __init__(self, message: str, *, code: str = "provider_unavailable"):
        super().__init__(message, code=code)


class NormalizationFailure(GenerationError):
    """Returned (not raised) by the normalizer when no strategy yields a valid result."""

    def __init__(self, message: str, *, strategies: tuple[str, ...] = ()):
        super().__init__(message, code="normalization_failed")
        self.strategies = strategies


class ValidationError(GenerationError):
    """The caller supplied missing or invalid request fields."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message, code="invalid_request")
