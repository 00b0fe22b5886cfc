"""Tests for formcheck.validation.rules — the built-in rule checks."""

import re

import pytest

from formcheck.validation.rules import RuleContext, get_rule, phone_pattern, valid_rules
from formcheck.values import FormValue


def check(
    name: str,
    value: FormValue | bytes,
    options: str | re.Pattern[str] = "",
    values: dict[str, FormValue] | None = None,
    charset: str = "UTF-8",
) -> bool:
    rule = get_rule(name)
    assert rule is not None
    return rule(value, options, RuleContext(values=values or {}, charset=charset))


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class TestRegistry:
    def test_valid_rules_sorted_without_regex(self) -> None:
        assert valid_rules() == [
            "base64",
            "chars",
            "cnp",
            "count",
            "date",
            "distinct",
            "email",
            "length",
            "match",
            "numeric",
            "phone",
            "required",
            "value",
        ]

    def test_regex_is_registered(self) -> None:
        assert get_rule("regex") is not None

    def test_unknown_rule(self) -> None:
        assert get_rule("nope") is None


@pytest.mark.parametrize("name", [name for name in [*valid_rules(), "regex"] if name != "required"])
def test_blank_value_passes_every_optional_rule(name: str) -> None:
    assert check(name, "", "anything") is True


class TestNestedElement:
    def test_text_rule_rejects_list(self) -> None:
        assert check("email", ["user@example.com"]) is False

    def test_required_accepts_list(self) -> None:
        assert check("required", ["a"]) is True


# ---------------------------------------------------------------------------
# Individual rules
# ---------------------------------------------------------------------------


class TestRequired:
    def test_empty_string(self) -> None:
        assert check("required", "") is False

    def test_zero_string_is_empty(self) -> None:
        assert check("required", "0") is False

    def test_empty_list(self) -> None:
        assert check("required", []) is False

    def test_valid(self) -> None:
        assert check("required", "hello") is True


class TestMatch:
    def test_equal(self) -> None:
        assert check("match", "s3cret", "password", {"password": "s3cret"}) is True

    def test_different(self) -> None:
        assert check("match", "other", "password", {"password": "s3cret"}) is False

    def test_missing_other_field(self) -> None:
        assert check("match", "x", "password") is False


class TestDistinct:
    values = {"first": "a", "second": "b"}

    def test_differs_from_all(self) -> None:
        assert check("distinct", "c", "first,second", self.values) is True

    def test_equals_one(self) -> None:
        assert check("distinct", "b", "first,second", self.values) is False

    def test_single_field(self) -> None:
        assert check("distinct", "a", "first", self.values) is False

    def test_empty_names_skipped(self) -> None:
        assert check("distinct", "a", ",first,", self.values) is False
        assert check("distinct", "z", ",,", self.values) is True


class TestRegex:
    def test_search_semantics(self) -> None:
        assert check("regex", "abc123", r"\d+") is True

    def test_no_match(self) -> None:
        assert check("regex", "abc", r"^\d+$") is False

    def test_compiled_pattern_keeps_flags(self) -> None:
        assert check("regex", "abc", re.compile("^A", re.IGNORECASE)) is True


class TestLength:
    def test_unicode_characters(self) -> None:
        assert check("length", "héllo", "5") is True

    def test_bytes_decoded_with_charset(self) -> None:
        assert check("length", "héllo".encode("latin-1"), "5", charset="latin-1") is True

    def test_too_long(self) -> None:
        assert check("length", "abcdef", "<=5") is False

    def test_bad_expression_fails(self) -> None:
        assert check("length", "abc", "three") is False


class TestChars:
    def test_alpha_and_space(self) -> None:
        assert check("chars", "hello world", "alpha:space") is True

    def test_dash_not_allowed(self) -> None:
        assert check("chars", "hello-world", "alpha") is False

    def test_dash_digit(self) -> None:
        assert check("chars", "hello_world-1", "alpha:dash:digit") is True

    def test_symbols(self) -> None:
        assert check("chars", "a!b", "alpha:symbol") is True

    def test_default_printable_ascii(self) -> None:
        assert check("chars", "Any text, 100%!") is True

    def test_default_rejects_control_and_non_ascii(self) -> None:
        assert check("chars", "tab\there") is False
        assert check("chars", "héllo") is False

    def test_only_unknown_sets(self) -> None:
        assert check("chars", "abc", "unknown") is False


class TestNumeric:
    def test_any_number(self) -> None:
        assert check("numeric", "42") is True
        assert check("numeric", "1e3") is True
        assert check("numeric", ".5") is True

    def test_not_a_number(self) -> None:
        assert check("numeric", "abc") is False
        assert check("numeric", "4 2") is False

    def test_integer(self) -> None:
        assert check("numeric", "-7", "integer") is True
        assert check("numeric", "3.14", "integer") is False

    def test_float(self) -> None:
        assert check("numeric", "3.14", "float") is True
        assert check("numeric", "42", "float") is False

    def test_sign_allows_zero(self) -> None:
        assert check("numeric", "-5", "positive") is False
        assert check("numeric", "0", "positive") is True
        assert check("numeric", "0", "negative") is True
        assert check("numeric", "3", "negative") is False

    def test_nonzero(self) -> None:
        assert check("numeric", "0", "nonzero") is False
        assert check("numeric", "0.0", "float:nonzero") is False

    def test_flags_combine(self) -> None:
        assert check("numeric", "-2.5", "float:negative:nonzero") is True
        assert check("numeric", "2.5", "float:negative:nonzero") is False


class TestEmail:
    def test_valid(self) -> None:
        assert check("email", "user@example.com") is True

    def test_valid_with_dots(self) -> None:
        assert check("email", "first.last@sub.domain.org") is True

    def test_ipv4_literal(self) -> None:
        assert check("email", "user@[192.168.0.1]") is True

    def test_missing_at(self) -> None:
        assert check("email", "userexample.com") is False

    def test_domain_without_dot(self) -> None:
        assert check("email", "user@localhost") is False

    def test_two_ats(self) -> None:
        assert check("email", "a@b@example.com") is False

    def test_bad_local_part(self) -> None:
        assert check("email", "user..name@example.com") is False
        assert check("email", ".user@example.com") is False

    def test_bad_domain_label(self) -> None:
        assert check("email", "user@exa_mple.com") is False

    def test_local_part_too_long(self) -> None:
        assert check("email", "x" * 65 + "@example.com") is False

    def test_long_invalid_domain_fails_fast(self) -> None:
        assert check("email", "user@" + "a" * 200 + "_.com") is False


class TestPhone:
    def test_wildcard_template(self) -> None:
        assert check("phone", "0712345678", "07NNNNNNNN") is True

    def test_wildcard_wrong_length(self) -> None:
        assert check("phone", "071234567", "07NNNNNNNN") is False

    def test_wildcard_wrong_prefix(self) -> None:
        assert check("phone", "08123456789", "07NNNNNNNN") is False

    def test_lowercase_wildcard(self) -> None:
        assert check("phone", "0712345678", "07nnnnnnnn") is True

    def test_presets(self) -> None:
        assert check("phone", "0212345678", "ro") is True
        assert check("phone", "0812345678", "ro") is False
        assert check("phone", "0312345678", "ro-landline") is True
        assert check("phone", "0712345678", "ro-landline") is False
        assert check("phone", "0712345678", "ro-mobile") is True
        assert check("phone", "0212345678", "ro-mobile") is False

    def test_fallback_positive_integer(self) -> None:
        assert check("phone", "123") is True
        assert check("phone", "12") is False
        assert check("phone", "-123") is False
        assert check("phone", "12a", "+40") is False

    def test_pattern_building(self) -> None:
        assert phone_pattern("07NNN1NN") == "07[0-9]{3}1[0-9]{2}"
        assert phone_pattern("+40NNN") == ""


class TestCnp:
    def test_valid(self) -> None:
        assert check("cnp", "1850101400017") is True

    def test_wrong_control_digit(self) -> None:
        assert check("cnp", "1850101400018") is False

    def test_remainder_ten_maps_to_one(self) -> None:
        assert check("cnp", "1850101400211") is True

    def test_leap_day_follows_century(self) -> None:
        # 1900 is not a leap year, 2000 is
        assert check("cnp", "1000229400011") is False
        assert check("cnp", "5000229400019") is True

    def test_wrong_length(self) -> None:
        assert check("cnp", "185010140001") is False

    def test_unknown_county(self) -> None:
        assert check("cnp", "1850101470017") is False


class TestBase64:
    def test_padded(self) -> None:
        assert check("base64", "aGVsbG8=") is True
        assert check("base64", "AB==") is True

    def test_full_blocks(self) -> None:
        assert check("base64", "aGVs") is True

    def test_missing_padding(self) -> None:
        assert check("base64", "aGVsbG8") is False

    def test_bad_characters(self) -> None:
        assert check("base64", "aGVs!G8=") is False


class TestDate:
    def test_day_first_slashes(self) -> None:
        assert check("date", "23/05/2012", "d/m/Y") is True

    def test_impossible_date(self) -> None:
        assert check("date", "31/02/2012", "d/m/Y") is False

    def test_iso(self) -> None:
        assert check("date", "2012-05-23", "Y-m-d") is True
        assert check("date", "2012-5-23", "Y-m-d") is False

    def test_round_trip_must_be_exact(self) -> None:
        assert check("date", "5/3/2012", "j/n/Y") is True
        assert check("date", "05/03/2012", "j/n/Y") is False

    def test_month_first(self) -> None:
        assert check("date", "12/25/2012", "m/d/Y") is True
        assert check("date", "25/12/2012", "m/d/Y") is False

    def test_weekday_must_agree(self) -> None:
        assert check("date", "Wed, 23 May 2012", "D, d M Y") is True
        assert check("date", "Thu, 23 May 2012", "D, d M Y") is False

    def test_time(self) -> None:
        assert check("date", "2:30 pm", "g:i a") is True
        assert check("date", "25:00", "H:i") is False

    def test_no_format(self) -> None:
        assert check("date", "23/05/2012") is False

    def test_ordinal_suffix(self) -> None:
        assert check("date", "1st January 2020", "jS F Y") is True
        assert check("date", "22nd March 2020", "jS F Y") is True
        assert check("date", "1S January 2020", "jS F Y") is False
        assert check("date", "1th January 2020", "jS F Y") is False

    def test_month_length_and_leap_year(self) -> None:
        assert check("date", "2020-02-29 29 1", "Y-m-d t L") is True
        assert check("date", "2021-02-28 29 0", "Y-m-d t L") is False
        assert check("date", "2021-01-01 1", "Y-m-d L") is False

    def test_iso_week(self) -> None:
        assert check("date", "2020-W53", r"o-\WW") is True
        assert check("date", "2021-W53", r"o-\WW") is False

    def test_unsupported_format_fails_closed(self) -> None:
        assert check("date", "2020-01-01 UTC", "Y-m-d T") is False
        assert check("date", "2020-01-01 e", "Y-m-d e") is False

    @pytest.mark.parametrize("value", ["99999999999999999999", "-99999999999999999"])
    def test_epoch_out_of_range_fails(self, value: str) -> None:
        assert check("date", value, "U") is False


class TestValue:
    def test_single(self) -> None:
        assert check("value", "red", "red") is True
        assert check("value", "blue", "red") is False

    def test_list(self) -> None:
        assert check("value", "green", "red,green,blue") is True
        assert check("value", "purple", "red,green,blue") is False


class TestCount:
    def test_list(self) -> None:
        assert check("count", ["a", "b", "c"], "3-5") is True
        assert check("count", ["a"], "3-5") is False

    def test_scalar_counts_as_one(self) -> None:
        assert check("count", "single", "1") is True

    def test_empty_list(self) -> None:
        assert check("count", [], "0") is True
        assert check("count", [], ">=1") is False
