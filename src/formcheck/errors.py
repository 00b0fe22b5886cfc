"""Formcheck exception hierarchy.

Validation failures are never raised. They are recorded as data on the
engine (field -> rule name). Exceptions are reserved for misconfiguration.
"""


class FormcheckError(Exception):
    """Base for all formcheck-specific errors."""


class ConfigurationError(FormcheckError):
    """Raised when engine configuration is invalid.

    Raised by ``EngineConfig`` for bad settings, and by ``RuleEngine`` for
    rule registration mistakes when strict mode is on.
    """
