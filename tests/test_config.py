"""
Tests for the environment-specific configuration overrides.
"""

import importlib

import pytest

import configs.config_local


@pytest.fixture
def reload_local(monkeypatch):
    def _reload(value=None):
        if value is None:
            monkeypatch.delenv("DELETE_UPLOADS_AFTER_PROCESSING", raising=False)
        else:
            monkeypatch.setenv("DELETE_UPLOADS_AFTER_PROCESSING", value)
        return importlib.reload(configs.config_local)

    yield _reload
    monkeypatch.undo()
    importlib.reload(configs.config_local)


def test_development_keeps_uploads_by_default(reload_local):
    assert reload_local().DELETE_UPLOADS_AFTER_PROCESSING is False


@pytest.mark.parametrize("value, expected", [("true", True), ("1", True), ("no", False)])
def test_development_honours_delete_uploads_env(reload_local, value, expected):
    assert reload_local(value).DELETE_UPLOADS_AFTER_PROCESSING is expected
