"""Tests for configs declared under postponed annotations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

import pytest

from envbind import InvalidArgumentError, Map, load, var


@dataclass
class Server:
    host: str = var("HOST", value="localhost")
    ports: List[int] = var("PORTS", default="80", default_factory=list)


@dataclass
class App:
    server: Server = var("SERVER_", default_factory=Server)


def test_module_level_classes_resolve():
    app = App()
    load(app, Map({"SERVER_HOST": "example.com"}))
    assert app.server.host == "example.com"
    assert app.server.ports == [80]


def test_unresolvable_local_annotations():
    @dataclass
    class DB:
        port: int = var("PORT", value=0)

    @dataclass
    class Config:
        db: DB = field(default_factory=DB)

    with pytest.raises(InvalidArgumentError, match="Config"):
        load(Config(), Map({"PORT": "1"}))
