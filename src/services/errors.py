"""
Exceptions raised while generating an outfit.

The assembler converts every OutfitGenerationError into a failure
GenerationResult; anything else is a bug and reaches the HTTP boundary.
"""


class OutfitGenerationError(Exception):
    """Base class for expected outfit generation failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class OutfitValidationError(OutfitGenerationError):
    """Caller input is malformed or empty."""
    pass


class InvalidModelError(OutfitGenerationError):
    """Requested generation model is not a known identifier."""

    def __init__(self, model: str):
        super().__init__(f"Invalid model: {model}")
        self.model = model


class ModelNotImplementedError(OutfitGenerationError):
    """Requested generation model is known but has no implementation yet."""

    def __init__(self, model: str, supported: str):
        super().__init__(f"{model} not yet implemented. Use '{supported}'")
        self.model = model
        self.supported = supported


class DataAccessError(OutfitGenerationError):
    """The public catalog could not be reached or queried."""
    pass
