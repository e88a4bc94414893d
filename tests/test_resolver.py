"""
Tests for the field resolver.

Tests generation, internal fields, required enforcement and coercion.
"""
from datetime import datetime, timedelta, timezone

import pytest

from datamgr.errors import FieldError, FieldErrorKind
from datamgr.pipeline import FieldValue, generate_timestamp, parse_bool, resolve_field
from datamgr.schemas import (
    DEFAULT_TIMESTAMP_FORMAT,
    RFC3339_FORMAT,
    FieldSpec,
    FieldType,
    GenerateStrategy,
)


def _timestamp_field(**kwargs) -> FieldSpec:
    kwargs.setdefault("format", DEFAULT_TIMESTAMP_FORMAT)
    return FieldSpec(name="at", generate=GenerateStrategy.TIMESTAMP, **kwargs)


# =============================================================================
# Generation
# =============================================================================


class TestGeneratedFields:
    """Tests for timestamp generation."""

    def test_timestamp_uses_field_format(self, fixed_now):
        value = resolve_field(_timestamp_field(), {}, now=fixed_now)
        assert value == FieldValue.string("20240305.140709.123456")

    def test_timestamp_matches_layout_without_now(self):
        value = resolve_field(_timestamp_field(), {})
        parsed = datetime.strptime(value.value, DEFAULT_TIMESTAMP_FORMAT)
        now = datetime.now(timezone.utc).replace(tzinfo=None)
        assert abs(parsed - now) < timedelta(minutes=1)

    def test_empty_format_falls_back_to_rfc3339(self, fixed_now):
        value = resolve_field(_timestamp_field(format=""), {}, now=fixed_now)
        assert value.value == "2024-03-05T14:07:09Z"
        datetime.strptime(value.value, RFC3339_FORMAT)

    def test_timestamp_is_rendered_in_utc(self):
        local = datetime(2024, 3, 5, 16, 7, 9, tzinfo=timezone(timedelta(hours=2)))
        assert generate_timestamp("%H:%M", local) == "14:07"

    def test_submitted_input_is_ignored(self, fixed_now):
        form = {"field.at": ["not a timestamp"]}
        value = resolve_field(_timestamp_field(), form, now=fixed_now)
        assert value.value == "20240305.140709.123456"

    def test_required_generated_field_without_input(self, fixed_now):
        value = resolve_field(_timestamp_field(required=True), {}, now=fixed_now)
        assert value.value == "20240305.140709.123456"

    def test_values_differ_across_instants(self, fixed_now):
        spec = _timestamp_field()
        first = resolve_field(spec, {}, now=fixed_now)
        second = resolve_field(spec, {}, now=fixed_now + timedelta(seconds=1))
        assert first != second

    def test_generated_bool_field_yields_string(self, fixed_now):
        value = resolve_field(_timestamp_field(type=FieldType.BOOL), {}, now=fixed_now)
        assert value.kind is FieldType.STRING


# =============================================================================
# Internal Fields
# =============================================================================


class TestInternalFields:
    """Tests for fields never read from request input."""

    def test_internal_field_ignores_input(self):
        spec = FieldSpec(name="role", internal=True, value=FieldValue.string("user"))
        value = resolve_field(spec, {"field.role": ["admin"]})
        assert value == FieldValue.string("user")

    def test_internal_without_value_is_zero(self):
        spec = FieldSpec(name="flag", type=FieldType.BOOL, internal=True)
        assert resolve_field(spec, {"field.flag": ["true"]}) == FieldValue.boolean(False)

    def test_internal_required_is_not_enforced(self):
        spec = FieldSpec(name="role", internal=True, required=True)
        assert resolve_field(spec, {}) == FieldValue.string("")


# =============================================================================
# Missing Input
# =============================================================================


class TestMissingInput:
    """Tests for fields that were not submitted."""

    def test_required_field_missing(self):
        spec = FieldSpec(name="name", required=True)
        with pytest.raises(FieldError) as exc_info:
            resolve_field(spec, {})

        assert exc_info.value.kind is FieldErrorKind.MISSING_REQUIRED
        assert exc_info.value.field_name == "name"
        assert "field.name" in str(exc_info.value)
        assert exc_info.value.status_code == 400

    def test_required_field_with_empty_list(self):
        spec = FieldSpec(name="name", required=True)
        with pytest.raises(FieldError):
            resolve_field(spec, {"field.name": []})

    def test_optional_string_is_empty(self):
        assert resolve_field(FieldSpec(name="note"), {}) == FieldValue.string("")

    def test_optional_bool_is_false(self):
        spec = FieldSpec(name="ok", type=FieldType.BOOL)
        assert resolve_field(spec, {}) == FieldValue.boolean(False)

    def test_optional_uses_configured_value(self):
        spec = FieldSpec(name="lang", value=FieldValue.string("en"))
        assert resolve_field(spec, {}) == FieldValue.string("en")

    def test_other_keys_are_not_used(self):
        spec = FieldSpec(name="name", required=True)
        with pytest.raises(FieldError):
            resolve_field(spec, {"name": ["alice"], "field.other": ["x"]})


# =============================================================================
# Coercion
# =============================================================================


class TestCoercion:
    """Tests for type coercion of submitted values."""

    def test_string_taken_verbatim(self):
        value = resolve_field(FieldSpec(name="name"), {"field.name": ["  Alice  "]})
        assert value == FieldValue.string("  Alice  ")

    def test_submitted_overrides_configured_value(self):
        spec = FieldSpec(name="lang", value=FieldValue.string("en"))
        assert resolve_field(spec, {"field.lang": ["fr"]}).value == "fr"

    def test_last_value_wins(self):
        value = resolve_field(FieldSpec(name="name"), {"field.name": ["bob", "alice"]})
        assert value.value == "alice"

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("true", True),
            ("false", False),
            ("True", True),
            ("FALSE", False),
            ("1", True),
            ("0", False),
            ("t", True),
            ("f", False),
            ("yes", True),
            ("no", False),
            ("on", True),
            ("off", False),
        ],
    )
    def test_bool_variants(self, text, expected):
        spec = FieldSpec(name="ok", type=FieldType.BOOL)
        assert resolve_field(spec, {"field.ok": [text]}) == FieldValue.boolean(expected)

    def test_bool_last_value_wins(self):
        spec = FieldSpec(name="ok", type=FieldType.BOOL)
        assert resolve_field(spec, {"field.ok": ["false", "true"]}).value is True

    def test_invalid_bool(self):
        spec = FieldSpec(name="ok", type=FieldType.BOOL)
        with pytest.raises(FieldError) as exc_info:
            resolve_field(spec, {"field.ok": ["notabool"]})

        assert exc_info.value.kind is FieldErrorKind.TYPE_COERCION
        assert "field.ok" in str(exc_info.value)
        assert "notabool" in str(exc_info.value)

    def test_invalid_last_value_fails_even_if_earlier_valid(self):
        spec = FieldSpec(name="ok", type=FieldType.BOOL)
        with pytest.raises(FieldError):
            resolve_field(spec, {"field.ok": ["true", "notabool"]})


class TestParseBool:
    def test_rejects_empty(self):
        with pytest.raises(ValueError):
            parse_bool("")

    def test_rejects_word(self):
        with pytest.raises(ValueError):
            parse_bool("maybe")
