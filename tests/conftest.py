"""Shared fixtures for the ru2kk test suite."""

from __future__ import annotations

import pytest

from ru2kk.configuration import Ru2kkConfig, clear_settings_cache


@pytest.fixture
def isolated_settings(tmp_path, monkeypatch):
    """Run with an empty home directory, working directory and environment."""

    home = tmp_path / "home"
    home.mkdir()
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(workdir)
    for key in Ru2kkConfig.model_fields:
        monkeypatch.delenv(key, raising=False)
    clear_settings_cache()
    yield workdir
    clear_settings_cache()
