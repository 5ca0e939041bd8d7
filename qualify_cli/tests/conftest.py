"""Shared fixtures for CLI tests."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import pytest

from qualify_engine.config import QualifierConfig
from qualify_engine.telemetry.profiling import get_collector


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Run every test in an empty directory without SQLQ_* variables.

    The root logger is restored afterwards because the process command
    installs its own handler.
    """
    for key in list(os.environ):
        if key.upper().startswith("SQLQ_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    get_collector().clear()

    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture()
def config() -> QualifierConfig:
    return QualifierConfig(dbname="PRODDB", schemaname="SALES")


@pytest.fixture()
def sql_file(tmp_path: Path) -> Path:
    path = tmp_path / "deploy.sql"
    path.write_text(
        "-- release 42\n"
        "CREATE TABLE orders (\n"
        "  id INT\n"
        ");\n"
        "INSERT INTO orders SELECT * FROM FINDB.s.src\n",
        encoding="utf-8",
    )
    return path
