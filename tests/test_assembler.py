"""
Tests for record assembly and field values.
"""
import pytest

from datamgr.errors import FieldErrorKind, RecordError
from datamgr.pipeline import FieldValue, Record, assemble_record
from datamgr.schemas import FieldType


class TestAssembleRecord:
    """Tests for assemble_record."""

    def test_every_field_resolved(self, signup_route, fixed_now):
        record = assemble_record(signup_route, {"field.name": ["alice"]}, now=fixed_now)

        assert record.to_dict() == {
            "name": "alice",
            "newsletter": False,
            "joined_at": "20240305.140709.123456",
            "source": "web",
        }

    def test_bool_field_coerced(self, signup_route):
        form = {"field.name": ["alice"], "field.newsletter": ["yes"]}
        record = assemble_record(signup_route, form)
        assert record.get("newsletter") == FieldValue.boolean(True)

    def test_undeclared_keys_ignored(self, signup_route):
        form = {"field.name": ["alice"], "field.admin": ["true"], "callback": ["/x"]}
        record = assemble_record(signup_route, form)
        assert "admin" not in record
        assert "callback" not in record

    def test_missing_required_rejected(self, signup_route):
        with pytest.raises(RecordError) as exc_info:
            assemble_record(signup_route, {})

        assert exc_info.value.field_names == {"name"}
        assert exc_info.value.status_code == 400
        assert "field.name" in str(exc_info.value)

    def test_all_errors_collected(self, signup_route):
        """Resolution continues after the first failing field."""
        with pytest.raises(RecordError) as exc_info:
            assemble_record(signup_route, {"field.newsletter": ["notabool"]})

        error = exc_info.value
        assert error.field_names == {"name", "newsletter"}
        assert {e.kind for e in error.field_errors} == {
            FieldErrorKind.MISSING_REQUIRED,
            FieldErrorKind.TYPE_COERCION,
        }
        message = str(error)
        assert message.startswith("2 errors occurred:")
        assert "field.name" in message
        assert "field.newsletter" in message


class TestFieldValue:
    """Tests for the two-case field value."""

    def test_zero_values(self):
        assert FieldValue.zero(FieldType.STRING).value == ""
        assert FieldValue.zero(FieldType.BOOL).value is False

    def test_kind_must_match_payload(self):
        with pytest.raises(TypeError):
            FieldValue(FieldType.BOOL, "true")
        with pytest.raises(TypeError):
            FieldValue(FieldType.STRING, True)

    def test_is_immutable(self):
        value = FieldValue.string("a")
        with pytest.raises(Exception):  # frozen dataclass
            value.value = "b"


class TestRecord:
    def test_from_plain_round_trip(self):
        record = Record.from_plain({"name": "alice", "ok": True})
        assert record.get("ok") == FieldValue.boolean(True)
        assert record.to_dict() == {"name": "alice", "ok": True}

    def test_preserves_field_order(self):
        record = Record()
        record.set("b", FieldValue.string("2"))
        record.set("a", FieldValue.string("1"))
        assert list(record) == ["b", "a"]
        assert len(record) == 2
