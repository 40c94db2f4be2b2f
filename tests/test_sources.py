"""Tests for environment variable sources."""

import os

import pytest

from envbind import OS, DotEnvSource, FuncSource, Map, MultiSource, Source


def lookup(key):
    return {"FOO": "1", "BAR": "2", "BAZ": "3"}.get(key)


def test_map():
    source = Map({"FOO": "1", "EMPTY": ""})
    assert source.lookup("FOO") == "1"
    assert source.lookup("EMPTY") == ""
    assert source.lookup("MISSING") is None
    assert isinstance(source, Source)


def test_func_source():
    source = FuncSource(lookup)
    assert source.lookup("BAZ") == "3"
    assert source.lookup("QUX") is None


def test_os(monkeypatch):
    monkeypatch.setenv("ENVBIND_TEST_VAR", "value")
    monkeypatch.delenv("ENVBIND_TEST_UNSET", raising=False)
    assert OS.lookup("ENVBIND_TEST_VAR") == "value"
    assert OS.lookup("ENVBIND_TEST_UNSET") is None


def test_multi_source_last_wins(monkeypatch):
    monkeypatch.setenv("FOO", "50")
    monkeypatch.setenv("LOREM", "100")

    source = MultiSource(FuncSource(lookup), Map({"FOO": "10", "BAR": "20", "BAZ": "30"}), OS)

    for _ in range(3):
        assert source.lookup("FOO") == "50"
        assert source.lookup("BAR") == "20"
        assert source.lookup("BAZ") == "30"
        assert source.lookup("LOREM") == "100"


def test_multi_source_order_matters():
    first, second = Map({"FOO": "first"}), Map({"FOO": "second"})
    assert MultiSource(first, second).lookup("FOO") == "second"
    assert MultiSource(second, first).lookup("FOO") == "first"


def test_multi_source_empty_value_is_found():
    assert MultiSource(Map({"FOO": "1"}), Map({"FOO": ""})).lookup("FOO") == ""
    assert MultiSource().lookup("FOO") is None


def test_dotenv_source(tmp_path, monkeypatch):
    monkeypatch.delenv("ENVBIND_DOTENV_FOO", raising=False)
    path = tmp_path / ".env"
    path.write_text(
        "ENVBIND_DOTENV_FOO=1\n"
        'QUOTED="two words"\n'
        "# comment\n"
        "export EXPORTED=yes\n"
        "NO_VALUE\n",
        encoding="utf-8",
    )

    source = DotEnvSource(path)
    assert source.lookup("ENVBIND_DOTENV_FOO") == "1"
    assert source.lookup("QUOTED") == "two words"
    assert source.lookup("EXPORTED") == "yes"
    assert source.lookup("NO_VALUE") is None
    assert source.lookup("MISSING") is None
    assert "ENVBIND_DOTENV_FOO" not in os.environ


def test_dotenv_source_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        DotEnvSource(tmp_path / "missing.env")
