from __future__ import annotations

import pytest

from vicmd.runtime import EngineOptions, InputExhausted, VectorInput
from vicmd.runtime import telemetry


def test_options_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VICMD_MAX_COUNT", "10")
    monkeypatch.setenv("VICMD_WORD_CHARS", "a-z")
    monkeypatch.setenv("VICMD_REPEAT_KEEPS_COUNT", "off")

    options = EngineOptions.from_env()

    assert options.max_count == 10
    assert options.word_chars == "a-z"
    assert options.repeat_keeps_count is False
    assert options.clamp_count(50) == 10
    assert options.clamp_count(None) is None


def test_options_validation() -> None:
    with pytest.raises(ValueError):
        EngineOptions(max_count=0)
    with pytest.raises(ValueError):
        EngineOptions(word_chars="")


def test_env_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("VICMD_SAMPLE_FLAG", raising=False)
    assert telemetry.env_flag("SAMPLE_FLAG", True) is True

    monkeypatch.setenv("VICMD_SAMPLE_FLAG", "Yes")
    assert telemetry.env_flag("SAMPLE_FLAG", False) is True


def test_configure_rejects_config_and_preset() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(config=object(), preset="quiet")
    with pytest.raises(ValueError):
        telemetry.configure(preset="verbose")
    telemetry.configure(preset="quiet")


def test_span_reraises_failures() -> None:
    with pytest.raises(KeyError):
        with telemetry.span("test::span", component=True, metadata={"key": "x"}):
            raise KeyError("boom")


def test_vector_input_splits_strings() -> None:
    source = VectorInput(["ab", "c"])

    assert len(source) == 3
    assert [source.next() for _ in range(3)] == ["a", "b", "c"]
    assert not source
    with pytest.raises(InputExhausted):
        source.next()
