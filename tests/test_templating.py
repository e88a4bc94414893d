"""
Tests for output path templating.
"""
import pytest
from jinja2 import TemplateSyntaxError

from datamgr.errors import TemplateError
from datamgr.pipeline import Record, compile_template, render_path
from datamgr.schemas import FileSpec


def _file_spec(source: str) -> FileSpec:
    return FileSpec(name=source, template=compile_template(source))


class TestRenderPath:
    """Tests for render_path."""

    def test_field_accessor(self):
        spec = _file_spec('out/{{ field("name") }}.yaml')
        record = Record.from_plain({"name": "alice"})
        assert render_path(spec, record) == "out/alice.yaml"

    def test_whole_record_accessor(self):
        spec = _file_spec('{{ field()["team"] }}/{{ field().name }}.yaml')
        record = Record.from_plain({"name": "alice", "team": "red"})
        assert render_path(spec, record) == "red/alice.yaml"

    def test_bool_renders_lowercase(self):
        spec = _file_spec('{{ field("ok") }}.yaml')
        assert render_path(spec, Record.from_plain({"ok": True})) == "true.yaml"

    def test_filters_available(self):
        spec = _file_spec('{{ field("name") | lower | replace(" ", "_") }}.yaml')
        record = Record.from_plain({"name": "Alice Smith"})
        assert render_path(spec, record) == "alice_smith.yaml"

    def test_static_template(self):
        spec = _file_spec("out/static.yaml")
        assert render_path(spec, Record()) == "out/static.yaml"

    def test_template_shared_across_records(self):
        """The compiled template is bound per call, never mutated."""
        spec = _file_spec('{{ field("name") }}.yaml')
        first = render_path(spec, Record.from_plain({"name": "alice"}))
        second = render_path(spec, Record.from_plain({"name": "bob"}))
        assert (first, second) == ("alice.yaml", "bob.yaml")


class TestRenderErrors:
    """Rendering failures are schema defects."""

    def test_unknown_field(self):
        spec = _file_spec('{{ field("missing") }}.yaml')
        with pytest.raises(TemplateError) as exc_info:
            render_path(spec, Record.from_plain({"name": "alice"}))

        assert exc_info.value.status_code == 500
        assert "misconfiguration" in exc_info.value.public_message
        assert "missing" in str(exc_info.value)

    def test_unknown_function(self):
        spec = _file_spec('{{ nope("name") }}.yaml')
        with pytest.raises(TemplateError):
            render_path(spec, Record())

    def test_unknown_variable(self):
        spec = _file_spec("{{ name }}.yaml")
        with pytest.raises(TemplateError):
            render_path(spec, Record.from_plain({"name": "alice"}))

    def test_sandbox_blocks_internals(self):
        spec = _file_spec("{{ field.__init__.__globals__ }}")
        with pytest.raises(TemplateError):
            render_path(spec, Record())

    def test_empty_result(self):
        spec = _file_spec('{{ field("name") }}')
        with pytest.raises(TemplateError):
            render_path(spec, Record.from_plain({"name": ""}))


class TestCompileTemplate:
    def test_syntax_error(self):
        with pytest.raises(TemplateSyntaxError):
            compile_template("{{ field(")
