"""Tests for render configuration."""

import pytest
from pydantic import ValidationError

from interpol import PythonEvaluator, RenderConfig, load_render_config


def test_defaults():
    config = RenderConfig()
    assert config.open == "{"
    assert config.close == "}"
    assert config.transformer is None
    assert config.evaluator == "python"
    assert config.separator == ""
    assert config.na == "NA"
    assert config.trim is False
    assert config.nested is False
    assert config.recycle == "cycle"


@pytest.mark.parametrize(
    "overrides",
    [
        {"open": ""},
        {"close": ""},
        {"open": "%", "close": "%", "nested": True},
        {"evaluator": "lua"},
        {"evaluator": object()},
        {"recycle": "sometimes"},
        {"transformer": "not callable"},
    ],
)
def test_invalid_configs_are_rejected(overrides):
    with pytest.raises(ValidationError):
        RenderConfig(**overrides)


def test_evaluator_instances_are_accepted():
    evaluator = PythonEvaluator()
    assert RenderConfig(evaluator=evaluator).evaluator is evaluator


def test_config_is_frozen():
    config = RenderConfig()
    with pytest.raises(ValidationError):
        config.open = "<"


def test_merged_validates_overrides():
    config = RenderConfig(separator=",")
    merged = config.merged(na="-")
    assert merged.separator == ","
    assert merged.na == "-"
    assert config.na == "NA"
    with pytest.raises(ValidationError):
        config.merged(open="")


def test_load_render_config(tmp_path):
    path = tmp_path / "interpol.yaml"
    path.write_text(
        "open: '<<'\n"
        "close: '>>'\n"
        "separator: ', '\n"
        "evaluator: jinja\n"
        "trim: true\n"
    )

    config = load_render_config(path)
    assert config.open == "<<"
    assert config.close == ">>"
    assert config.separator == ", "
    assert config.evaluator == "jinja"
    assert config.trim is True


def test_load_empty_render_config(tmp_path):
    path = tmp_path / "interpol.yaml"
    path.write_text("")
    assert load_render_config(path) == RenderConfig()


def test_load_missing_render_config(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_render_config(tmp_path / "missing.yaml")
