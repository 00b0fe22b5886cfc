"""Form validation — rule expressions, per-field errors, reset to defaults.

Usage::

    from formcheck.validation import RuleEngine

    def register(request):
        engine = RuleEngine(request.form)
        engine.add_rules("email", "required|email")
        engine.add_rules("password", "required|length:>=8")
        engine.add_rules("password_again", "required|match:password")
        engine.validate()
        if engine.has_errors():
            return render("register.html", form=engine.values, errors=engine.get_errors())

For a one-off check there is ``validate()``::

    result = validate(form, {"title": "required|length:<=200"})
    if not result:
        ...
"""

from collections.abc import Mapping

from formcheck.config import EngineConfig
from formcheck.validation.counting import CountExpression, count_check, parse_count_expression
from formcheck.validation.diagnostics import Diagnostic, DiagnosticSink
from formcheck.validation.engine import RuleEngine
from formcheck.validation.result import RuleFailure, ValidationResult
from formcheck.validation.rules import Rule, RuleContext, get_rule, rule, valid_rules
from formcheck.values import FormValue

__all__ = [
    "CountExpression",
    "Diagnostic",
    "DiagnosticSink",
    "Rule",
    "RuleContext",
    "RuleEngine",
    "RuleFailure",
    "ValidationResult",
    "count_check",
    "get_rule",
    "parse_count_expression",
    "rule",
    "valid_rules",
    "validate",
]


def validate(
    data: object,
    rules: Mapping[str, str],
    *,
    patterns: Mapping[str, str] | None = None,
    defaults: Mapping[str, FormValue] | None = None,
    reset_invalid: bool = True,
    config: EngineConfig | None = None,
) -> ValidationResult:
    """Validate data against rule expressions in one call.

    Args:
        data: Any mapping of field names to values, or a multi-value
            mapping such as parsed form data.
        rules: Field -> rule expression (``"required|length:3-20"``).
        patterns: Field -> regex, added after that field's other rules.
        defaults: Field -> value used when an invalid field is reset.
        reset_invalid: Reset invalid fields in ``result.data``.
        config: Engine configuration.

    Returns:
        A ``ValidationResult`` with ``.data`` (values after resets) and
        ``.errors`` (field -> failed rule).

    Example::

        result = validate(form, {
            "title": "required|length:<=200",
            "tags": "count:1-5",
        })
        if not result:
            # result.errors == {"title": "required"}
            ...
    """
    engine = RuleEngine(data, config)
    for field, expression in rules.items():
        engine.add_rules(field, expression)
    for field, pattern in (patterns or {}).items():
        engine.add_regex_rule(field, pattern)
    return engine.validate(reset_invalid, defaults)
