"""Tests for configuration loading and saving."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from deskboard.config import DEFAULT_API_URL, DeskboardConfig
from deskboard.constants import BOARD_PAGE_SIZE, WARRANTY_EXPIRING_DAYS

if TYPE_CHECKING:
    from pathlib import Path

pytestmark = pytest.mark.unit


class TestLoad:
    def test_missing_file_gives_defaults(self, tmp_path: Path):
        config = DeskboardConfig.load(tmp_path / "missing.toml")

        assert config.api.base_url == DEFAULT_API_URL
        assert config.board.page_size == BOARD_PAGE_SIZE
        assert config.warranty.expiring_days == WARRANTY_EXPIRING_DAYS

    def test_reads_toml(self, tmp_path: Path):
        path = tmp_path / "config.toml"
        path.write_text(
            '[api]\nbase_url = "https://desk.example.com/api/"\ntimeout = 3.5\n'
            "[warranty]\nexpiring_days = 30\n"
        )

        config = DeskboardConfig.load(path)

        assert config.api.base_url == "https://desk.example.com/api"
        assert config.api.timeout == 3.5
        assert config.warranty.expiring_days == 30

    def test_env_overrides_api_url(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("DESKBOARD_API_URL", "http://override:9000/api/")

        config = DeskboardConfig.load(tmp_path / "missing.toml")

        assert config.api.base_url == "http://override:9000/api"

    def test_env_override_can_be_skipped(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ):
        monkeypatch.setenv("DESKBOARD_API_URL", "http://override:9000/api")

        config = DeskboardConfig.load(tmp_path / "missing.toml", env=False)

        assert config.api.base_url == DEFAULT_API_URL

    def test_default_path_uses_config_dir(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("DESKBOARD_CONFIG_DIR", str(tmp_path / "cfg"))
        monkeypatch.setenv("DESKBOARD_DATA_DIR", str(tmp_path / "data"))
        (tmp_path / "cfg").mkdir()
        (tmp_path / "cfg" / "config.toml").write_text("[board]\nlist_page_size = 25\n")

        config = DeskboardConfig.load()

        assert config.board.list_page_size == 25
        assert (tmp_path / "data").is_dir()


async def test_save_round_trip(tmp_path: Path):
    config = DeskboardConfig.model_validate(
        {
            "api": {"base_url": "https://desk.example.com/api", "headers": {"X-Team": "ops"}},
            "warranty": {"expiring_days": 7},
        }
    )
    path = tmp_path / "nested" / "config.toml"

    await config.save(path)

    assert DeskboardConfig.load(path) == config


async def test_save_overwrites_without_leftovers(tmp_path: Path):
    path = tmp_path / "config.toml"

    await DeskboardConfig().save(path)
    await DeskboardConfig.model_validate({"board": {"page_size": 50}}).save(path)

    assert DeskboardConfig.load(path).board.page_size == 50
    assert [p.name for p in tmp_path.iterdir()] == ["config.toml"]
