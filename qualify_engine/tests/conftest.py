"""Shared fixtures for qualification engine tests."""

from __future__ import annotations

import os

import pytest

from qualify_engine.config import QualifierConfig
from qualify_engine.telemetry.profiling import get_collector


@pytest.fixture()
def config() -> QualifierConfig:
    return QualifierConfig(dbname="PRODDB", schemaname="SALES")


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep SQLQ_* variables and any local .env file out of every test."""
    for key in list(os.environ):
        if key.upper().startswith("SQLQ_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    get_collector().clear()
