"""
Exceptions for programming and setup errors.

Expected gameplay failures (can't afford, stat already maxed, duplicate
trick) are never raised; they come back as result objects.
"""


class PetPalError(Exception):
    """Base class for all PetPal errors."""


class SetupError(PetPalError):
    """Invalid player setup (pet name, owner name, species, budget)."""


class ConfigError(PetPalError):
    """Game tuning configuration could not be loaded or is invalid."""


class SessionEndedError(PetPalError):
    """An action was attempted on a session that has already ended."""
