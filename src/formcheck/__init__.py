"""Formcheck — rule-based validation for submitted form data.

Rule chains are written as short expressions, applied field by field, and
failures are kept as data: one failed rule name per field, invalid fields
reset to defaults.

Basic usage::

    from formcheck import RuleEngine

    engine = RuleEngine({"email": " ana@example.com ", "tags": ["a", ""]})
    engine.add_rules("email", "required|email")
    engine.add_rules("tags", "required|count:1-3")
    engine.ignore_invalid("tags")
    engine.validate()

    engine.has_errors()   # False
    engine.values["tags"] # ["a"]
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "EngineConfig",
    "FormcheckError",
    "RuleEngine",
    "RuleFailure",
    "ValidationResult",
    "validate",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import formcheck`` fast while providing a clean top-level API.
    """
    if name == "EngineConfig":
        from formcheck.config import EngineConfig

        return EngineConfig

    if name in ("RuleEngine", "RuleFailure", "ValidationResult", "validate"):
        from formcheck import validation as _validation

        return getattr(_validation, name)

    if name in ("ConfigurationError", "FormcheckError"):
        from formcheck import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
