"""Tests for smallwork.config.AppConfig."""

from dataclasses import replace

import pytest

from smallwork.config import AppConfig


class TestAppConfig:
    def test_defaults(self) -> None:
        cfg = AppConfig()
        assert cfg.debug is False
        assert cfg.template_dir == "templates"
        assert cfg.autoescape is True

    def test_frozen(self) -> None:
        cfg = AppConfig()
        with pytest.raises(AttributeError):
            cfg.debug = True  # type: ignore[misc]

    def test_replace(self) -> None:
        cfg = replace(AppConfig(), debug=True)
        assert cfg.debug is True
        assert cfg.template_dir == "templates"
