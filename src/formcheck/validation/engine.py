"""RuleEngine — per-request form validation state.

One engine is built per submitted form, configured with rule chains,
validated once, then queried::

    engine = RuleEngine(form)
    engine.add_rules("email", "required|email")
    engine.add_rules("age", "numeric:integer:positive")
    engine.add_regex_rule("code", r"^[A-Z]{3}-\\d{4}$")

    result = engine.validate(defaults={"age": "18"})
    if engine.has_error("email"):
        ...

Rules run in registration order, field by field. The first failing rule
records the field's error and ends that field's chain. Invalid fields are
reset to their default (or an empty value of the same shape) unless the
caller asks otherwise.

Engines are not shared between requests; nothing here locks.
"""

import html
import logging
import re
from collections.abc import Callable, Iterable, Mapping

from formcheck.config import EngineConfig
from formcheck.errors import ConfigurationError
from formcheck.validation import rules as builtin_rules
from formcheck.validation.diagnostics import Diagnostic, DiagnosticSink
from formcheck.validation.result import RuleFailure, ValidationResult
from formcheck.validation.rules import Rule, RuleContext, RuleOptions
from formcheck.values import (
    DEFAULT_TRIM_CHARACTERS,
    FormValue,
    as_field_list,
    empty_like,
    is_sequence,
    map_scalars,
    normalize_form,
)

_log = logging.getLogger("formcheck.validation")

_RULE_SEPARATOR = "|"
_OPTIONS_SEPARATOR = ":"


class RuleEngine:
    """Validates one form's values against per-field rule chains.

    Attributes:
        values: Field -> submitted value. Rewritten in place by trimming,
            sanitizing, and resets.
        rules: Field -> ordered rule name -> options.
        errors: Field -> name of the rule (or manual label) that failed it.
        reset_values: Field -> value written back when invalid fields reset.
        defaults: Field -> default value, set via ``validate(defaults=...)``.
    """

    def __init__(
        self,
        form: object = None,
        config: EngineConfig | None = None,
        *,
        on_diagnostic: DiagnosticSink | None = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.values: dict[str, FormValue] = normalize_form(form)
        self.rules: dict[str, dict[str, RuleOptions]] = {}
        self.errors: dict[str, str] = {}
        self.reset_values: dict[str, FormValue] = {}
        self.defaults: dict[str, FormValue] = {}
        self.ignore_invalid_fields: set[str] = set()
        self.ignored_error_fields: set[str] = set()
        self._debug = self.config.debug
        self._on_diagnostic = on_diagnostic

        if self.config.trim:
            self.trim_spaces()

    # -- Registration -------------------------------------------------------

    def debugging(self, state: bool = False) -> None:
        """Log configuration diagnostics at WARNING (True) or DEBUG (False)."""
        self._debug = bool(state)

    def add_rules(self, field: str, rules: str) -> bool:
        """Add ``|``-separated rules to *field*'s chain.

        Each rule is ``name`` or ``name:options``; everything after the
        first ``:`` is handed to the rule as-is. Unknown rules and ``regex``
        are skipped with a diagnostic; the rest are still added.

        Returns False only when *field* or *rules* is empty.
        """
        if not self._check_inputs(field, rules, Diagnostic.MISSING_RULES):
            return False

        for entry in rules.split(_RULE_SEPARATOR):
            name, _, options = entry.partition(_OPTIONS_SEPARATOR)
            name = name.lower()
            if name == "regex":
                self._diagnose(Diagnostic.ADD_RULE_SEPARATELY, f"{field}: use add_regex_rule()")
                continue
            if builtin_rules.get_rule(name) is None:
                self._diagnose(Diagnostic.UNKNOWN_RULE, f"{field}: {name!r}")
                continue
            self.rules.setdefault(field, {})[name] = options

        return True

    def add_regex_rule(self, field: str, pattern: str | re.Pattern[str]) -> bool:
        """Add a ``regex`` rule to *field*'s chain.

        Kept apart from ``add_rules`` because a pattern may itself contain
        ``|`` or ``:``. Returns False when *field* or *pattern* is empty or
        the pattern does not compile.
        """
        if not self._check_inputs(field, pattern, Diagnostic.MISSING_PATTERN):
            return False

        if isinstance(pattern, str):
            try:
                re.compile(pattern)
            except re.error as exc:
                self._diagnose(Diagnostic.INVALID_PATTERN, f"{field}: {exc}")
                return False

        self.rules.setdefault(field, {})["regex"] = pattern
        return True

    def _check_inputs(self, field: str, argument: object, missing: Diagnostic) -> bool:
        ok = True
        if not field:
            self._diagnose(Diagnostic.MISSING_FIELD)
            ok = False
        if not argument:
            self._diagnose(missing, field or "")
            ok = False
        return ok

    def _diagnose(self, code: Diagnostic, detail: str = "") -> None:
        level = logging.WARNING if self._debug else logging.DEBUG
        _log.log(level, "%s : %s", code.name, detail)
        if self._on_diagnostic is not None:
            self._on_diagnostic(code, detail)
        if self.config.strict:
            msg = f"{code.name}: {detail}" if detail else code.name
            raise ConfigurationError(msg)

    # -- Validation ---------------------------------------------------------

    def validate(
        self,
        reset_invalid: bool = True,
        defaults: Mapping[str, FormValue] | None = None,
    ) -> ValidationResult:
        """Run every rule chain and record failures.

        Args:
            reset_invalid: Overwrite each invalid field with its reset value.
            defaults: Field -> default. Replaces earlier defaults when
                non-empty.

        Returns:
            A ``ValidationResult`` snapshot of the values and the
            non-ignored failures.
        """
        if defaults:
            self.defaults = dict(defaults)

        context = RuleContext(values=self.values, charset=self.config.charset)

        for field, chain in self.rules.items():
            for name, options in chain.items():
                if field in self.errors:
                    break

                if name == "required" and field not in self.values:
                    self.values[field] = ""

                if field not in self.values:
                    continue

                check = builtin_rules.get_rule(name)
                value = self.values[field]

                if is_sequence(value) and name != "count":
                    self._check_elements(field, check, options, context)
                elif not check(value, options, context):
                    self._fail(field, name)

        if reset_invalid:
            self.values.update(self.reset_values)

        _log.debug("Validated %d field(s), %d error(s)", len(self.rules), len(self.errors))
        return ValidationResult(data=dict(self.values), failures=tuple(self.failures()))

    def _check_elements(self, field: str, check: Rule, options: RuleOptions, context: RuleContext) -> None:
        """Apply one rule to each element of a multi-value field.

        An empty list is checked as ``[""]`` so the rule still runs once.
        """
        elements = self.values[field]
        if not elements:
            elements.append("")

        ignore = field in self.ignore_invalid_fields
        kept: list[FormValue] = []
        for element in elements:
            if check(element, options, context):
                kept.append(element)
            elif ignore:
                continue
            else:
                self._fail(field, check.name)
                return

        if ignore:
            self.values[field] = kept
            if not kept:
                self._fail(field, check.name)

    def _fail(self, field: str, name: str) -> None:
        self.errors[field] = name
        self.reset_values[field] = self._default_for(field)

    def _default_for(self, field: str) -> FormValue:
        if field in self.defaults:
            return self.defaults[field]
        return empty_like(self.values.get(field))

    # -- Queries ------------------------------------------------------------

    def has_error(self, field: str) -> bool:
        """True if *field* has an error, ignored or not."""
        return bool(self.errors.get(field))

    def has_errors(self) -> bool:
        """True if any field outside the ignore list has an error."""
        return bool(self.get_errors())

    def get_errors(self) -> dict[str, str]:
        """Field -> error, leaving out ignored fields."""
        return {field: error for field, error in self.errors.items() if field not in self.ignored_error_fields}

    def failures(self) -> list[RuleFailure]:
        """Non-ignored errors as ``RuleFailure`` records."""
        return [RuleFailure(field, error) for field, error in self.get_errors().items()]

    # -- Manual adjustments -------------------------------------------------

    def add_error(self, field: str, error: str) -> bool:
        """Force an error onto *field* (for checks outside the rule grammar)."""
        self.errors[field] = error
        return True

    def set_to_default(self, field: str) -> bool:
        """Overwrite *field* with its default, or an empty value of its shape."""
        self.values[field] = self._default_for(field)
        return True

    def ignore_invalid(self, fields: str | Iterable[str]) -> bool:
        """Drop failing elements of these multi-value fields instead of failing them.

        Fields whose current value is not a list are left alone.
        """
        for field in as_field_list(fields):
            if is_sequence(self.values.get(field)):
                self.ignore_invalid_fields.add(field)
        return True

    def ignore_errors(self, fields: str | Iterable[str]) -> bool:
        """Leave these fields out of ``has_errors()`` and ``get_errors()``."""
        self.ignored_error_fields.update(as_field_list(fields))
        return True

    def html_sanitize(self, fields: str | Iterable[str] | None = None) -> bool:
        """HTML-escape the values of *fields* (all fields by default)."""
        self._map_fields(fields, html.escape)
        return True

    def trim_spaces(
        self,
        fields: str | Iterable[str] | None = None,
        characters: str = DEFAULT_TRIM_CHARACTERS,
    ) -> bool:
        """Strip *characters* from both ends of the values of *fields*."""
        self._map_fields(fields, lambda text: text.strip(characters))
        return True

    def _map_fields(self, fields: str | Iterable[str] | None, fn: Callable[[str], str]) -> None:
        names = list(self.values) if fields is None else as_field_list(fields)
        for field in names:
            if field in self.values:
                self.values[field] = map_scalars(self.values[field], fn)

    # -- Introspection ------------------------------------------------------

    @staticmethod
    def valid_rules() -> list[str]:
        """Rule names accepted by ``add_rules``, sorted."""
        return builtin_rules.valid_rules()
