"""Custom exceptions for terrain synthesis."""


class TerrainError(Exception):
    """Base exception for terrain errors."""

    pass


class InvalidConfigError(TerrainError, ValueError):
    """Raised when an input would make the computation ill-defined."""

    pass


class ConfigNotFoundError(TerrainError, FileNotFoundError):
    """Raised when a named config file cannot be located."""

    pass
