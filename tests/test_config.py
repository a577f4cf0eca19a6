"""Configuration resolution: defaults, environment, overrides, and scopes."""

from __future__ import annotations

import asyncio

import pytest

from aleph import config as aleph_config
from aleph.config import (
    FrozenConfig,
    Settings,
    config_scope,
    current_config,
    load_env,
    resolve_config,
)
from aleph.errors import ConfigurationError

pytestmark = pytest.mark.unit


def test_defaults() -> None:
    cfg = resolve_config()
    assert cfg == FrozenConfig(
        multi_failure_header="Multiple failures:",
        multi_failure_indent=" ",
        json_lenient=True,
    )


def test_settings_schema_matches_frozen_config() -> None:
    assert set(Settings.model_fields) == set(FrozenConfig.__dataclass_fields__)


def test_frozen_config_is_immutable() -> None:
    cfg = resolve_config()
    with pytest.raises(AttributeError):
        cfg.json_lenient = False  # type: ignore[misc]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("false", False), ("0", False), ("no", False), ("TRUE", True), (" yes ", True)],
)
def test_env_bool_coercion(monkeypatch, raw, expected) -> None:
    monkeypatch.setenv("ALEPH_JSON_LENIENT", raw)
    assert resolve_config().json_lenient is expected


def test_env_strings_pass_through(monkeypatch) -> None:
    monkeypatch.setenv("ALEPH_MULTI_FAILURE_HEADER", "Errors:")
    assert resolve_config().multi_failure_header == "Errors:"


def test_unknown_env_variables_are_ignored(monkeypatch) -> None:
    monkeypatch.setenv("ALEPH_NOT_A_FIELD", "1")
    assert "not_a_field" not in load_env()
    resolve_config()


def test_overrides_beat_environment(monkeypatch) -> None:
    monkeypatch.setenv("ALEPH_JSON_LENIENT", "true")
    assert resolve_config({"json_lenient": False}).json_lenient is False


def test_non_whitespace_indent_is_rejected() -> None:
    with pytest.raises(ConfigurationError) as exc:
        resolve_config({"multi_failure_indent": "->"})
    assert "multi_failure_indent" in str(exc.value)
    assert "only whitespace" in str(exc.value)
    assert exc.value.hint == (
        "Check the ALEPH_MULTI_FAILURE_INDENT environment variable or override."
    )


def test_empty_header_is_rejected() -> None:
    with pytest.raises(ConfigurationError, match="multi_failure_header"):
        resolve_config({"multi_failure_header": ""})


def test_unknown_override_is_rejected() -> None:
    with pytest.raises(ConfigurationError, match="bogus"):
        resolve_config({"bogus": 1})


def test_dotenv_is_consulted(monkeypatch) -> None:
    calls: list[object] = []
    monkeypatch.setattr(aleph_config, "_DOTENV_LOADED", False)
    monkeypatch.setattr("dotenv.load_dotenv", lambda *a, **k: calls.append(a) or False)

    resolve_config()
    resolve_config()

    assert len(calls) == 1


def test_current_config_ignores_environment_outside_scope(monkeypatch) -> None:
    monkeypatch.setenv("ALEPH_JSON_LENIENT", "false")
    monkeypatch.setenv("ALEPH_MULTI_FAILURE_INDENT", "x")
    calls: list[object] = []
    monkeypatch.setattr(aleph_config, "_DOTENV_LOADED", False)
    monkeypatch.setattr("dotenv.load_dotenv", lambda *a, **k: calls.append(a) or False)

    cfg = current_config()

    assert cfg == FrozenConfig(**Settings().model_dump())
    assert cfg.json_lenient is True
    assert calls == []


def test_explicit_scope_honours_environment(monkeypatch) -> None:
    monkeypatch.setenv("ALEPH_JSON_LENIENT", "false")
    with config_scope(resolve_config()):
        assert current_config().json_lenient is False
    assert current_config().json_lenient is True


class TestConfigScope:
    def test_scope_applies_and_restores(self):
        before = current_config()
        with config_scope(json_lenient=False) as cfg:
            assert current_config() is cfg
            assert cfg.json_lenient is False
        assert current_config() == before

    def test_scope_accepts_frozen_config(self):
        cfg = resolve_config({"multi_failure_indent": "\t"})
        with config_scope(cfg) as active:
            assert active is cfg

    def test_scope_merges_mapping_and_kwargs(self):
        with config_scope({"multi_failure_indent": "  "}, json_lenient=False) as cfg:
            assert cfg.multi_failure_indent == "  "
            assert cfg.json_lenient is False

    def test_nested_scopes(self):
        with config_scope(multi_failure_header="outer"):
            with config_scope(multi_failure_header="inner"):
                assert current_config().multi_failure_header == "inner"
            assert current_config().multi_failure_header == "outer"

    def test_scope_restores_after_exception(self):
        with pytest.raises(RuntimeError):
            with config_scope(json_lenient=False):
                raise RuntimeError("boom")
        assert current_config().json_lenient is True

    def test_invalid_scope_raises_before_entering(self):
        with pytest.raises(ConfigurationError):
            with config_scope(multi_failure_indent="x"):
                pass
        assert current_config().multi_failure_indent == " "

    @pytest.mark.asyncio
    async def test_scopes_are_task_local(self):
        seen: dict[str, bool] = {}
        entered = asyncio.Event()
        release = asyncio.Event()

        async def strict():
            with config_scope(json_lenient=False):
                entered.set()
                await release.wait()
                seen["strict"] = current_config().json_lenient

        async def default():
            await entered.wait()
            seen["default"] = current_config().json_lenient
            release.set()

        await asyncio.gather(strict(), default())
        assert seen == {"strict": False, "default": True}
