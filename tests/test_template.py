"""
Тесты скомпилированного шаблона и публичных точек входа.
"""

import io
import threading

import pytest

from zstache import (
    MissingVariableError,
    ParseError,
    StaticProvider,
    TagType,
    Template,
    TemplateOptions,
    compile_template,
    parse_string,
    parse_string_partials,
    render,
    tool_version,
)


class TestEntryPoints:

    def test_compile_and_render(self):
        tmpl = compile_template("Hello {{name}}!")

        assert isinstance(tmpl, Template)
        assert tmpl.render({"name": "World"}) == "Hello World!"

    def test_parse_string(self):
        assert parse_string("{{a}}").render({"a": 1}) == "1"

    def test_parse_string_partials(self):
        tmpl = parse_string_partials("<{{>p}}>", {"p": "{{a}}"})

        assert tmpl.render({"a": "x"}) == "<x>"

    def test_one_shot_render(self):
        assert render("{{a}}-{{b}}", {"a": 1}, {"b": 2}) == "1-2"

    def test_one_shot_render_with_partials_and_options(self):
        options = TemplateOptions(error_on_missing=True)

        with pytest.raises(MissingVariableError):
            render("{{>p}}", {}, partials={"p": "{{missing}}"}, options=options)

    def test_compile_error(self):
        with pytest.raises(ParseError) as exc:
            compile_template("line one\n{{#a}}\n")

        assert exc.value.line == 2

    def test_incomplete_delimiter_tag_is_ignored(self):
        assert render("{{=<%=}}x{{y}}", {"y": 1}) == "x1"

    def test_render_without_contexts(self):
        assert compile_template("[{{a}}]").render() == "[]"

    def test_contexts_innermost_first(self):
        tmpl = compile_template("{{v}}")

        assert tmpl.render({"v": "inner"}, {"v": "outer"}) == "inner"
        assert tmpl.render({}, {"v": "outer"}) == "outer"


class TestRenderTo:

    def test_writes_into_sink(self):
        out = io.StringIO()
        compile_template("a{{b}}c").render_to(out, {"b": "-"})

        assert out.getvalue() == "a-c"

    def test_appends_to_existing_content(self):
        out = io.StringIO()
        out.write("prefix:")
        compile_template("{{x}}").render_to(out, {"x": 1})

        assert out.getvalue() == "prefix:1"

    def test_error_propagates_from_sink_render(self):
        tmpl = compile_template("{{x}}").with_error_on_missing()

        with pytest.raises(MissingVariableError):
            tmpl.render_to(io.StringIO(), {})


class TestLayout:

    def test_render_in_layout(self):
        layout = compile_template("<body>{{{content}}}</body>")
        page = compile_template("<p>{{title}}</p>")

        assert page.render_in_layout(layout, {"title": "Hi"}) == "<body><p>Hi</p></body>"

    def test_layout_sees_outer_contexts(self):
        layout = compile_template("<title>{{title}}</title>{{{content}}}")
        page = compile_template("[{{title}}]")

        assert page.render_in_layout(layout, {"title": "T"}) == "<title>T</title>[T]"

    def test_content_is_escaped_by_double_braces(self):
        layout = compile_template("{{content}}")
        page = compile_template("<b>")

        assert page.render_in_layout(layout) == "&lt;b&gt;"

    def test_content_shadows_context_field(self):
        layout = compile_template("{{{content}}}")
        page = compile_template("{{content}}!")

        assert page.render_in_layout(layout, {"content": "data"}) == "data!"

    def test_render_to_in_layout(self):
        out = io.StringIO()
        layout = compile_template("[{{{content}}}]")
        compile_template("{{a}}").render_to_in_layout(out, layout, {"a": "x"})

        assert out.getvalue() == "[x]"


class TestTags:

    def test_top_level_tags(self):
        tmpl = compile_template("text {{a}} {{{b}}} {{#s}}{{c}}{{/s}}{{^i}}{{/i}}{{>p}}{{! note }}")
        tags = tmpl.tags()

        assert [(t.tag_type, t.name) for t in tags] == [
            (TagType.VARIABLE, "a"),
            (TagType.VARIABLE, "b"),
            (TagType.SECTION, "s"),
            (TagType.INVERTED_SECTION, "i"),
            (TagType.PARTIAL, "p"),
        ]

    def test_section_tags_are_nested(self):
        section = compile_template("{{#s}}x{{a}}{{#t}}{{b}}{{/t}}{{/s}}").tags()[0]
        inner = section.tags()

        assert [t.name for t in inner] == ["a", "t"]
        assert [t.name for t in inner[1].tags()] == ["b"]

    def test_partial_tags_are_empty(self):
        partial = compile_template("{{>p}}", {"p": "{{a}}"}).tags()[0]

        assert partial.tags() == ()

    def test_variable_tags_is_an_error(self):
        variable = compile_template("{{a}}").tags()[0]

        with pytest.raises(TypeError):
            variable.tags()

    def test_tag_type_names(self):
        assert str(TagType.INVERTED_SECTION) == "InvertedSection"
        assert str(TagType.VARIABLE) == "Variable"

    def test_text_only_template(self):
        assert compile_template("just text").tags() == ()


class TestErrorOnMissing:

    def test_default_is_lenient(self):
        tmpl = compile_template("[{{x}}]")

        assert tmpl.error_on_missing is False
        assert tmpl.render({}) == "[]"

    def test_with_error_on_missing_returns_copy(self):
        tmpl = compile_template("[{{x}}]")
        strict = tmpl.with_error_on_missing()

        assert strict is not tmpl
        assert strict.error_on_missing is True
        assert tmpl.error_on_missing is False
        with pytest.raises(MissingVariableError, match='Missing variable "x"'):
            strict.render({})

    def test_can_be_disabled_again(self):
        strict = compile_template("[{{x}}]").with_error_on_missing()

        assert strict.with_error_on_missing(False).render({}) == "[]"

    def test_section_names_never_raise(self):
        strict = compile_template("{{#s}}a{{/s}}{{^s}}b{{/s}}").with_error_on_missing()

        assert strict.render({}) == "b"


class TestReuse:

    def test_rendering_is_repeatable(self):
        tmpl = compile_template("{{#items}}{{.}},{{/items}}")
        data = {"items": [1, 2, 3]}

        assert tmpl.render(data) == tmpl.render(data) == "1,2,3,"

    def test_tree_is_not_mutated(self):
        tmpl = compile_template("{{#a}}{{b}}{{/a}}{{>p}}", StaticProvider({"p": "{{c}}"}))
        before = tmpl.nodes

        tmpl.render({"a": [{"b": 1}], "c": 2})

        assert tmpl.nodes == before

    def test_concurrent_renders(self):
        tmpl = compile_template("{{#items}}<{{n}}>{{/items}}")
        results = {}

        def worker(i: int) -> None:
            data = {"items": [{"n": i}] * 50}
            results[i] = tmpl.render(data)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        for i in range(8):
            assert results[i] == f"<{i}>" * 50

    def test_delimiters_after_parse(self):
        assert compile_template("{{=<% %>=}}").delimiters == ("<%", "%>")
        assert compile_template("x").delimiters == ("{{", "}}")


class TestVersion:

    def test_tool_version_is_string(self):
        assert isinstance(tool_version(), str)
        assert tool_version()

    def test_package_exposes_version(self):
        import zstache

        assert zstache.__version__ == tool_version()

    def test_uninstalled_tree_reports_unknown_version(self, monkeypatch):
        from importlib import metadata

        from zstache import version

        def not_installed(name):
            raise metadata.PackageNotFoundError(name)

        monkeypatch.setattr(version.metadata, "version", not_installed)
        version.tool_version.cache_clear()
        try:
            assert version.tool_version() == version.UNKNOWN_VERSION
        finally:
            version.tool_version.cache_clear()
