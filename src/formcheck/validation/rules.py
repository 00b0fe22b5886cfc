"""Built-in validation rules for formcheck.

Each rule is a check function registered under a name::

    @rule("even")
    def even(value: FormValue, options: str, context: RuleContext) -> bool:
        '''Return True if valid.'''
        return value.isdigit() and int(value) % 2 == 0

The options string is whatever followed the first ``:`` in the rule
expression (``length:3-5`` gives ``"3-5"``). Each rule owns the syntax of
its own options.

Every rule except ``required`` lets the empty value through; ``required``
is the only gate against emptiness. Rules that only make sense on text
reject a nested list element outright.
"""

import itertools
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import date

from formcheck.validation.counting import count_check
from formcheck.validation.dates import format_date, normalize_day_first, parse_date
from formcheck.values import FormValue, is_blank, is_sequence

type RuleOptions = str | re.Pattern[str]
type RuleCheck = Callable[[FormValue, RuleOptions, RuleContext], bool]


@dataclass(frozen=True, slots=True)
class RuleContext:
    """What a check may read besides its own value.

    ``values`` is the engine's live value map, so cross-field rules see the
    current (possibly already reset) value of the other field.
    """

    values: Mapping[str, FormValue]
    charset: str = "UTF-8"

    def lookup(self, field: str) -> FormValue | None:
        """Current value of *field*, or None when it was not submitted."""
        return self.values.get(field)


@dataclass(frozen=True, slots=True)
class Rule:
    """A registered check plus how it treats blank and list values."""

    name: str
    check: RuleCheck
    allow_blank: bool = True
    scalar_only: bool = True

    def __call__(self, value: FormValue, options: RuleOptions, context: RuleContext) -> bool:
        if self.allow_blank and is_blank(value):
            return True
        if self.scalar_only and is_sequence(value):
            return False
        return self.check(value, options, context)


_RULES: dict[str, Rule] = {}


def rule(name: str, *, allow_blank: bool = True, scalar_only: bool = True) -> Callable[[RuleCheck], RuleCheck]:
    """Register a check function under *name*."""

    def register(check: RuleCheck) -> RuleCheck:
        _RULES[name] = Rule(name, check, allow_blank=allow_blank, scalar_only=scalar_only)
        return check

    return register


def get_rule(name: str) -> Rule | None:
    """Look up a registered rule by name."""
    return _RULES.get(name)


def valid_rules() -> list[str]:
    """Names usable in a rule expression, sorted. ``regex`` has its own path."""
    return sorted(name for name in _RULES if name != "regex")


# ---------------------------------------------------------------------------
# Presence
# ---------------------------------------------------------------------------


@rule("required", allow_blank=False, scalar_only=False)
def required(value: FormValue, options: RuleOptions, context: RuleContext) -> bool:
    """Value must be non-empty. ``"0"`` and an empty list count as empty."""
    return value not in (None, "", "0", b"", [])


# ---------------------------------------------------------------------------
# Cross-field
# ---------------------------------------------------------------------------


@rule("match", scalar_only=False)
def match(value: FormValue, other_field: RuleOptions, context: RuleContext) -> bool:
    """Value must equal the current value of another field."""
    other = context.lookup(other_field)
    return other is not None and value == other


@rule("distinct", scalar_only=False)
def distinct(value: FormValue, other_fields: RuleOptions, context: RuleContext) -> bool:
    """Value must differ from every listed field (comma-separated)."""
    names = [name for name in other_fields.split(",") if name]
    return not any(match(value, name, context) for name in names)


# ---------------------------------------------------------------------------
# Format
# ---------------------------------------------------------------------------


@rule("regex")
def regex(value: FormValue, pattern: RuleOptions, context: RuleContext) -> bool:
    """Value must match the pattern (search semantics)."""
    return re.search(pattern, value) is not None


@rule("length")
def length(value: FormValue, expression: RuleOptions, context: RuleContext) -> bool:
    """Character count must satisfy a count expression (``3-5``, ``<=10``)."""
    if isinstance(value, bytes):
        value = value.decode(context.charset, errors="replace")
    return count_check(len(value), expression)


_CHAR_SETS = {
    "space": r"\x20",
    "dash": r"\x2D\x5F",
    "digit": r"\x30-\x39",
    "symbol": r"\x21-\x2F\x3A-\x40\x5B-\x60\x7B-\x7E",
    "alpha": r"\x41-\x5A\x61-\x7A",
}
_PRINTABLE_RE = re.compile(r"[\x20-\x7E]+")


@rule("chars")
def chars(value: FormValue, options: RuleOptions, context: RuleContext) -> bool:
    """Every character must come from the named sets (``alpha:digit``).

    Without options any printable ASCII character is allowed.
    """
    if not options:
        return _PRINTABLE_RE.fullmatch(value) is not None
    allowed = "".join(_CHAR_SETS[name] for name in options.split(":") if name in _CHAR_SETS)
    if not allowed:
        return False
    return re.fullmatch(f"[{allowed}]+", value) is not None


# Same acceptance as PHP's is_numeric()
_NUMERIC_RE = re.compile(r"[ \t\n\r\v\f]*[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?[ \t\n\r\v\f]*")
_INTEGER_RE = re.compile(r"-?[0-9]+")
_FLOAT_RE = re.compile(r"-?[0-9]*\.[0-9]+")


@rule("numeric")
def numeric(value: FormValue, options: RuleOptions, context: RuleContext) -> bool:
    """Value must be a number matching every flag given.

    Flags: ``integer`` or ``float`` (type), ``positive`` or ``negative``
    (sign, zero allowed), ``nonzero``.
    """
    if not _NUMERIC_RE.fullmatch(value):
        return False

    kind = "any"
    sign = "any"
    nonzero = False
    for flag in options.split(":") if options else ():
        if flag in ("integer", "float"):
            kind = flag
        elif flag in ("positive", "negative"):
            sign = flag
        elif flag == "nonzero":
            nonzero = True

    if kind == "integer" and not _INTEGER_RE.fullmatch(value):
        return False
    if kind == "float" and not _FLOAT_RE.fullmatch(value):
        return False

    number = float(value)
    if sign == "positive" and number < 0:
        return False
    if sign == "negative" and number > 0:
        return False
    return not (nonzero and number == 0)


_EMAIL_SHAPE_RE = re.compile(r"[^@]{1,64}@[^@]{4,253}")
_EMAIL_LOCAL_RE = re.compile(r"(?:[a-zA-Z0-9\-!#$%&'*+/=?^_`{|}~]\.?)*[a-zA-Z0-9\-!#$%&'*+/=?^_`{|}~]")
_EMAIL_DOTTED_RE = re.compile(r".+\..{2,}")
# Labels are atomic so a long non-matching domain fails in linear time
_EMAIL_DOMAIN_RE = re.compile(
    r"\[(?:(?:25[0-5]|2[0-4][0-9]|1[0-9][0-9]|[1-9]?[0-9])\.){3}"
    r"(?:25[0-5]|2[0-4][0-9]|1[0-9][0-9]|[1-9]?[0-9])\]"
    r"|(?:(?>[a-zA-Z0-9](?:[a-zA-Z0-9-]*[a-zA-Z0-9])?)\.?)*"
    r"(?>[a-zA-Z0-9](?:[a-zA-Z0-9-]*[a-zA-Z0-9])?)"
)


@rule("email")
def email(value: FormValue, options: RuleOptions, context: RuleContext) -> bool:
    """Value must be an email address.

    The local part and the domain are checked separately; the domain must
    contain a dot and also be either host labels or a bracketed IPv4
    literal.
    """
    if not _EMAIL_SHAPE_RE.fullmatch(value):
        return False
    local_part, domain_part = value.split("@")
    return (
        _EMAIL_LOCAL_RE.fullmatch(local_part) is not None
        and _EMAIL_DOTTED_RE.fullmatch(domain_part) is not None
        and _EMAIL_DOMAIN_RE.fullmatch(domain_part) is not None
    )


_PHONE_PRESETS = {
    "ro": "0[237][0-9]{8}",
    "ro-landline": "0[23][0-9]{8}",
    "ro-mobile": "07[0-9]{8}",
}
_PHONE_TEMPLATE_RE = re.compile(r"[0-9N]+", re.IGNORECASE)


def phone_pattern(template: str) -> str:
    """Regex for a phone preset or a digit template (``07NNNNNNNN``).

    ``N`` stands for any digit. Returns ``""`` when *template* is neither.
    """
    if template in _PHONE_PRESETS:
        return _PHONE_PRESETS[template]
    if not _PHONE_TEMPLATE_RE.fullmatch(template):
        return ""
    parts: list[str] = []
    for wildcard, run in itertools.groupby(template, key=lambda char: char in "Nn"):
        chunk = "".join(run)
        parts.append(f"[0-9]{{{len(chunk)}}}" if wildcard else chunk)
    return "".join(parts)


@rule("phone")
def phone(value: FormValue, template: RuleOptions, context: RuleContext) -> bool:
    """Value must be a phone number in the given format.

    Without a usable format: at least 3 characters, a positive integer.
    """
    pattern = phone_pattern(template)
    if pattern:
        return re.fullmatch(pattern, value) is not None
    return len(value) >= 3 and numeric(value, "integer:positive", context)


_CNP_RE = re.compile(
    r"[1-9][0-9]{2}(?:0[1-9]|1[012])(?:0[1-9]|[12][0-9]|3[01])"
    r"(?:0[1-9]|[123][0-9]|4[0-6]|5[12])[0-9]{3}[0-9]"
)
_CNP_WEIGHTS = (2, 7, 9, 1, 4, 6, 3, 5, 8, 2, 7, 9)
# Birth century by sex/century digit; 7-9 (residents, foreigners) carry none
_CNP_CENTURIES = {"1": 1900, "2": 1900, "3": 1800, "4": 1800, "5": 2000, "6": 2000}


@rule("cnp")
def cnp(value: FormValue, options: RuleOptions, context: RuleContext) -> bool:
    """Value must be a Romanian personal numeric code (CNP).

    Checks the layout, that the encoded birth date exists, and the control
    digit.
    """
    if not _CNP_RE.fullmatch(value):
        return False

    year = _CNP_CENTURIES.get(value[0], 1900) + int(value[1:3])
    try:
        date(year, int(value[3:5]), int(value[5:7]))
    except ValueError:
        return False

    remainder = sum(int(digit) * weight for digit, weight in zip(value, _CNP_WEIGHTS)) % 11
    expected = 1 if remainder == 10 else remainder
    return int(value[12]) == expected


_BASE64_RE = re.compile(r"(?:[a-z0-9+/]{4})*(?:[a-z0-9+/]{2}==|[a-z0-9+/]{3}=|[a-z0-9+/]{4})", re.IGNORECASE)


@rule("base64")
def base64(value: FormValue, options: RuleOptions, context: RuleContext) -> bool:
    """Value must be padded base64."""
    return _BASE64_RE.fullmatch(value) is not None


@rule("date")
def date_(value: FormValue, fmt: RuleOptions, context: RuleContext) -> bool:
    """Value must be a real date written exactly in the given format (``d/m/Y``)."""
    if not fmt:
        return False
    source, source_fmt = normalize_day_first(value, fmt)
    try:
        moment = parse_date(source, source_fmt)
    except ValueError:
        return False
    return format_date(moment, fmt) == value


# ---------------------------------------------------------------------------
# Choice
# ---------------------------------------------------------------------------


@rule("value")
def value_(value: FormValue, allowed: RuleOptions, context: RuleContext) -> bool:
    """Value must equal the option, or be one of a comma-separated list."""
    if "," in allowed:
        return value in allowed.split(",")
    return value == allowed


@rule("count", scalar_only=False)
def count(value: FormValue, expression: RuleOptions, context: RuleContext) -> bool:
    """Number of submitted values must satisfy a count expression."""
    if is_sequence(value):
        total = len(value)
    else:
        total = 0 if is_blank(value) else 1
    return count_check(total, expression)
