from __future__ import annotations

import pytest

from pychip8.utils import debug as debug_module
from pychip8.utils import debug_enabled, debug_log, reload_categories


@pytest.fixture
def categories(monkeypatch):
    def apply(value: str | None) -> None:
        if value is None:
            monkeypatch.delenv(debug_module.ENV_VARIABLE, raising=False)
        else:
            monkeypatch.setenv(debug_module.ENV_VARIABLE, value)
        reload_categories()

    yield apply
    monkeypatch.delenv(debug_module.ENV_VARIABLE, raising=False)
    reload_categories()


def test_disabled_without_environment(categories, capsys):
    categories(None)

    assert not debug_enabled()
    assert not debug_enabled("cpu")
    debug_log("cpu", "hidden")
    assert capsys.readouterr().out == ""


def test_selected_categories(categories, capsys):
    categories(" CPU , input ")

    assert debug_enabled("cpu")
    assert debug_enabled("input")
    assert not debug_enabled("audio")

    debug_log("cpu", "pc=%03X", 0x200)
    debug_log("audio", "hidden")
    assert capsys.readouterr().out == "[CHIP8][cpu] pc=200\n"


def test_all_enables_everything(categories):
    categories("all")

    assert debug_enabled("perf")
    assert debug_enabled("trace")


def test_bad_format_arguments_are_appended(categories, capsys):
    categories("cpu")

    debug_log("cpu", "no placeholders", 1)

    assert capsys.readouterr().out == "[CHIP8][cpu] no placeholders (1,)\n"
