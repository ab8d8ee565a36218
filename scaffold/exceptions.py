"""Scaffold exceptions."""


class ScaffoldError(Exception):
    """Base class for errors raised by the scaffold itself."""


class ConfigError(ScaffoldError):
    """Server construction was given an invalid configuration."""


class ContextReleasedError(ScaffoldError):
    """A request context was used after its handler returned."""
