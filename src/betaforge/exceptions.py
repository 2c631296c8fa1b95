"""Exceptions raised by betaforge."""

from __future__ import annotations


class BetaForgeError(Exception):
    """Base class for all betaforge errors."""
    pass


class ConfigurationError(BetaForgeError):
    """Invalid or inconsistent configuration."""
    pass


class MissingOption(ConfigurationError):
    """A required option is absent and has no default."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Required option '{key}' is missing")


class DomainError(BetaForgeError):
    """Energy or grid outside the domain the calculation supports."""
    pass


class EmptySpectrum(BetaForgeError):
    """Spectrum too short to integrate."""
    pass


class ResourceError(BetaForgeError):
    """An external data resource could not be read."""
    pass
