from __future__ import annotations


class WhoAmIError(Exception):
    """Base class for failures raised by the biography services."""


class ConfigurationError(WhoAmIError):
    """A required credential or setting is missing."""


class LoadError(WhoAmIError):
    """The corpus documents could not be loaded."""


class EngineError(WhoAmIError):
    """The language model call failed or returned an unusable reply."""


class SynthesisError(WhoAmIError):
    """Speech generation failed for an otherwise valid narrative."""
