"""Errors raised by the menu generation pipeline."""


class MenuGenerationError(Exception):
    """Base class for menu generation failures."""


class PreconditionError(MenuGenerationError):
    """Required user data (the questionnaire) is missing."""


class GenerationUnavailableError(MenuGenerationError):
    """No generation service credential is configured."""


class GenerationFailedError(MenuGenerationError):
    """The generation service call failed or timed out."""


class MalformedGenerationError(MenuGenerationError):
    """Generated text could not be parsed into a valid menu."""


class PersistenceError(MenuGenerationError):
    """The generated menu could not be written to the store."""


class FallbackExhaustionError(MenuGenerationError):
    """No catalog meal survived preference and exclusion filtering."""
