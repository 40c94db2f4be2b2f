"""Tests for loading environment variables into pydantic models."""

from datetime import timedelta
from typing import List

import numpy as np
import pytest
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError

from envbind import InvalidArgumentError, Map, NotSetError, Options, load, model_var
from envbind.fields import describe


class Database(BaseModel):
    host: str = model_var("HOST,required", value="", desc="database host")
    port: int = model_var("PORT", value=5432, desc="database port")


class Settings(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    db: Database = Field(default_factory=Database, json_schema_extra={"env": "DB"})
    debug: bool = Field(False, json_schema_extra={"env": "DEBUG"}, description="debug mode")
    workers: np.uint8 = model_var("WORKERS", value=np.uint8(4))
    timeouts: List[timedelta] = model_var("TIMEOUTS", default="1s 5s", default_factory=list)
    name: str = "unbound"

    _secret: str = PrivateAttr("hidden")


class FrozenSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    debug: bool = model_var("DEBUG", value=False)


def test_load_model():
    settings = Settings()
    variables = load(
        settings,
        Map({"DB_HOST": "db", "DB_PORT": "6543", "DEBUG": "true", "WORKERS": "16", "NAME": "x"}),
        Options(name_sep="_"),
    )

    assert settings.db.host == "db"
    assert settings.db.port == 6543
    assert settings.debug is True
    assert settings.workers == np.uint8(16)
    assert settings.timeouts == [timedelta(seconds=1), timedelta(seconds=5)]
    assert settings.name == "unbound"
    assert settings._secret == "hidden"
    assert [v.name for v in variables] == ["DB_HOST", "DB_PORT", "DEBUG", "WORKERS", "TIMEOUTS"]


def test_model_descriptions():
    variables = load(Settings(), Map({"DB_HOST": "db"}), Options(name_sep="_"))
    descriptions = {v.name: v.desc for v in variables}
    assert descriptions["DB_HOST"] == "database host"
    assert descriptions["DEBUG"] == "debug mode"
    assert descriptions["WORKERS"] == ""


def test_model_missing_required():
    settings = Settings()
    with pytest.raises(NotSetError) as exc:
        load(settings, Map(), Options(name_sep="_"))
    assert exc.value.names == ["DB_HOST"]
    assert settings.db.port == 5432


def test_model_width_overflow():
    with pytest.raises(ValueError):
        load(Settings(), Map({"DB_HOST": "db", "WORKERS": "256"}), Options(name_sep="_"))


def test_frozen_model_is_invalid():
    with pytest.raises(InvalidArgumentError):
        load(FrozenSettings(), Map({"DEBUG": "true"}))


def test_model_class_is_invalid():
    with pytest.raises(InvalidArgumentError):
        load(Settings, Map())


def test_describe_model():
    specs = describe(Database)
    assert [spec.name for spec in specs] == ["host", "port"]
    assert specs[0].tag("env") == "HOST,required"
    assert specs[0].tag("desc") == "database host"
    assert specs[1].tag("default") is None
    assert describe(Database) is specs


def test_env_default_is_not_the_model_default():
    class Ports(BaseModel):
        ports: List[int] = model_var("PORTS", default="80 443")

    with pytest.raises(ValidationError):
        Ports()

    class DefaultPorts(BaseModel):
        ports: List[int] = model_var("PORTS", default="80 443", default_factory=list)

    cfg = DefaultPorts()
    assert cfg.ports == []
    load(cfg, Map())
    assert cfg.ports == [80, 443]
