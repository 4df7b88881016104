import logging

import pytest

from curvelab.config import LOG_FORMAT, Settings, build_store, configure_logging


def test_defaults():
    s = Settings.from_env({})
    assert s.palette == "Plotly"
    assert s.curve_samples == 600
    assert s.pad_factor == 1.0


def test_from_env_overrides():
    s = Settings.from_env({
        "CURVELAB_PALETTE": "Greys",
        "CURVELAB_CURVE_SAMPLES": "100",
        "CURVELAB_PAD_FACTOR": "0.25",
        "CURVELAB_LOG_LEVEL": "debug",
    })
    assert s.curve_samples == 100
    assert s.pad_factor == 0.25
    store = build_store(s)
    store.add_points("A", [1], [1])
    assert store.get_trace_object("A").color == "#111111"


@pytest.mark.parametrize("env", [
    {"CURVELAB_PALETTE": "Rainbow"},
    {"CURVELAB_CURVE_SAMPLES": "many"},
    {"CURVELAB_PAD_FACTOR": "-1"},
    {"CURVELAB_DEFAULT_DEGREE": "0"},
    {"CURVELAB_DEFAULT_DEGREE": "13"},
    {"CURVELAB_THEME": "Neon"},
    {"CURVELAB_LOG_LEVEL": "LOUD"},
])
def test_invalid_env(env):
    with pytest.raises(ValueError, match="CURVELAB_"):
        Settings.from_env(env)


def test_configure_logging_sets_root_level_and_format(monkeypatch):
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", root.level)

    configure_logging("warning")

    assert root.level == logging.WARNING
    assert len(root.handlers) == 1
    assert root.handlers[0].formatter._fmt == LOG_FORMAT
