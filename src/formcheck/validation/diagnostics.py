"""Configuration diagnostics emitted while rules are registered.

Diagnostics never stop registration: the offending rule is skipped and the
rest of the chain is added. They go to the ``formcheck.validation`` logger
and, when one is given, to a caller-supplied sink::

    seen = []
    engine = RuleEngine(form, on_diagnostic=lambda code, detail: seen.append(code))
"""

from collections.abc import Callable
from enum import Enum


class Diagnostic(Enum):
    """Why a rule registration was rejected."""

    MISSING_FIELD = "missing_field"
    MISSING_RULES = "missing_rules"
    MISSING_PATTERN = "missing_pattern"
    INVALID_PATTERN = "invalid_pattern"
    UNKNOWN_RULE = "unknown_rule"
    ADD_RULE_SEPARATELY = "add_rule_separately"


type DiagnosticSink = Callable[[Diagnostic, str], None]
