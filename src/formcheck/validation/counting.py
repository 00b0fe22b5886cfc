"""Count expressions — the small grammar shared by ``length`` and ``count``.

Three forms are accepted::

    "5"      exactly 5
    "<=10"   comparison against a bound (<, <=, >, >=)
    "3-5"    inclusive range

Anything else fails closed: ``count_check`` returns False.
"""

import operator
import re
from collections.abc import Callable
from dataclasses import dataclass

_EXACT_RE = re.compile(r"[0-9]+")
_COMPARISON_RE = re.compile(r"(>=?|<=?)([0-9]+)")
_RANGE_RE = re.compile(r"([0-9]+)-([0-9]+)")

_OPERATORS: dict[str, Callable[[int, int], bool]] = {
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


@dataclass(frozen=True, slots=True)
class CountExpression:
    """A parsed count expression: ``low <= n <= high`` or ``n <op> bound``."""

    op: str
    low: int
    high: int | None = None

    def matches(self, count: int) -> bool:
        if self.op == "==":
            return count == self.low
        if self.op == "range":
            return self.low <= count <= self.high
        return _OPERATORS[self.op](count, self.low)


def parse_count_expression(expression: str) -> CountExpression | None:
    """Parse *expression*, or return None when it fits none of the forms."""
    try:
        return _parse(expression)
    except ValueError:
        # Bounds too long for int()
        return None


def _parse(expression: str) -> CountExpression | None:
    if _EXACT_RE.fullmatch(expression):
        return CountExpression("==", int(expression))

    match = _COMPARISON_RE.fullmatch(expression)
    if match:
        return CountExpression(match.group(1), int(match.group(2)))

    match = _RANGE_RE.fullmatch(expression)
    if match:
        return CountExpression("range", int(match.group(1)), int(match.group(2)))

    return None


def count_check(count: int, expression: str) -> bool:
    """True if *count* satisfies *expression*.

    Example::

        count_check(5, "3-5")    # True
        count_check(9, ">=10")   # False
        count_check(1, "one")    # False, not an expression
    """
    parsed = parse_count_expression(expression)
    if parsed is None:
        return False
    return parsed.matches(count)
