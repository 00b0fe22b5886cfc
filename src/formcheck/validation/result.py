"""Validation result — immutable snapshot of a validation pass."""

from dataclasses import dataclass

from formcheck.values import FormValue


@dataclass(frozen=True, slots=True)
class RuleFailure:
    """A field that failed, and the rule (or manual error label) that failed it."""

    field: str
    rule: str


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """The outcome of ``RuleEngine.validate()``.

    ``is_valid`` is True when there are no (non-ignored) failures.
    The result is falsy when invalid, so you can write::

        result = engine.validate()
        if not result:
            return render_form(values=result.data, errors=result.errors)

    ``data`` holds every field value after invalid fields were reset.

    ``errors`` maps field names to the name of the rule that failed::

        {"email": "required", "age": "numeric"}
    """

    data: dict[str, FormValue]
    failures: tuple[RuleFailure, ...] = ()

    @property
    def errors(self) -> dict[str, str]:
        """Field -> failed rule name."""
        return {failure.field: failure.rule for failure in self.failures}

    @property
    def is_valid(self) -> bool:
        """True if validation passed with no errors."""
        return not self.failures

    def __bool__(self) -> bool:
        """Falsy when invalid, enabling the ``if not result:`` pattern."""
        return self.is_valid
