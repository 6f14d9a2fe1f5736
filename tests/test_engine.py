"""Tests for the interpolation engine."""

import pytest

from interpol import (
    EvaluationError,
    Interpolator,
    NestingError,
    RecycleError,
    RenderConfig,
    UnmatchedDelimiterError,
    interpolate,
    interpolate_data,
    interpolate_lines,
    trim_segments,
)

GREETING = "hello"


def test_interpolate_with_explicit_environment():
    assert interpolate("{x + 1}", {"x": 5}) == "6"


def test_interpolate_uses_caller_scope():
    name = "world"
    assert interpolate("{GREETING} {name}!") == "hello world!"


def test_bindings_shadow_environment():
    assert interpolate("{x}", {"x": 1}, x=2) == "2"


def test_interpolate_data_searches_data_first():
    y = 1
    x = 100
    assert interpolate_data({"x": 5}, "{x + y}") == "6"


def test_interpolate_does_not_leak_assignments():
    env = {"x": 0}
    assert interpolate("{(x := 1)}{x}", env) == "11"
    assert env == {"x": 0}


def test_unmatched_open_marker_fails_without_output():
    with pytest.raises(UnmatchedDelimiterError):
        interpolate("{abc", {})


@pytest.mark.parametrize("template", ["", "no markers here", "tabs\tand\nnewlines"])
def test_identity_without_markers(template):
    assert interpolate(template, {}) == template


def test_custom_markers():
    config = RenderConfig(open="<<", close=">>")
    assert interpolate("<<x>> {not code}", {"x": 1}, config=config) == "1 {not code}"


def test_nested_configuration():
    assert Interpolator(nested=True).render("{ {'a': 1}['a'] }", {}) == "1"
    with pytest.raises(NestingError):
        Interpolator().render("{ {'a': 1}['a'] }", {})


def test_separator_and_na_configuration():
    interpolator = Interpolator(separator=", ", na="missing")
    assert interpolator.render("{[1, None]}", {}) == "1, missing"


def test_overrides_apply_on_top_of_config():
    interpolator = Interpolator(RenderConfig(separator=","), na="-")
    assert interpolator.config.separator == ","
    assert interpolator.config.na == "-"


def test_jinja_evaluator_configuration():
    interpolator = Interpolator(evaluator="jinja")
    assert interpolator.render("{items | join(', ')}", {"items": ["a", "b"]}) == "a, b"


def test_trim_removes_blank_edges_and_common_indent():
    template = "\n    a {x}\n      b\n    c\n    "
    assert Interpolator(trim=True).render(template, {"x": 1}) == "a 1\n  b\nc"
    assert Interpolator().render(template, {"x": 1}) == "\n    a 1\n      b\n    c\n    "


def test_trim_single_line():
    assert Interpolator(trim=True).render("  hi {x}  ", {"x": 1}) == "hi 1"


def test_trim_counts_indent_before_expressions():
    template = "\n  {a}\n    {b}\n"
    assert Interpolator(trim=True).render(template, {"a": 1, "b": 2}) == "1\n  2"


def test_trim_segments_without_literals():
    segments = Interpolator().segments("{a}{b}")
    assert trim_segments(segments) == segments


def test_interpolate_lines_recycles():
    assert interpolate_lines("{n}: {range(n)}", n=2) == ["2: 0", "2: 1"]
    assert interpolate_lines("x{[]}", {}) == []


def test_render_lines_policies():
    template = "{range(2)}{range(3)}"
    assert Interpolator().render_lines(template, {}) == ["00", "11", "02"]
    with pytest.raises(RecycleError):
        Interpolator(recycle="strict").render_lines(template, {})


def test_transformer_may_render_nested_templates():
    inner = Interpolator()

    def expand(code, environment):
        return inner.render(environment[code], environment)

    outer = Interpolator(transformer=expand)
    env = {"tpl": "{a}-{b}", "a": 1, "b": 2}
    assert outer.render("<{tpl}>", env) == "<1-2>"


def test_caller_scope_visible_in_generator_expressions():
    factor = 2
    assert interpolate("{sum(factor * i for i in range(3))}") == "6"


def test_doubled_close_after_code_is_escaped():
    """`}}` inside a block is always an escaped brace in the code."""
    assert Interpolator().segments("{{{x}}}")[1].code == "x}"
    with pytest.raises(EvaluationError):
        interpolate("{{{x}}}", {"x": 5})
