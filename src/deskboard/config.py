"""Configuration loader for deskboard."""

from __future__ import annotations

import asyncio
import os
import tempfile
import tomllib
from pathlib import Path

import tomlkit
from pydantic import BaseModel, Field, field_validator

from deskboard.constants import BOARD_PAGE_SIZE, LIST_PAGE_SIZE, WARRANTY_EXPIRING_DAYS
from deskboard.paths import ensure_directories, get_config_path


def _replace_file(path: Path, content: str) -> None:
    """Write ``content`` next to ``path`` and rename it into place."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        "w", encoding="utf-8", dir=path.parent, prefix=f".{path.name}.", delete=False
    ) as handle:
        handle.write(content)
    try:
        os.replace(handle.name, path)
    except OSError:
        Path(handle.name).unlink(missing_ok=True)
        raise


DEFAULT_API_URL = "http://localhost:8000/api"
API_URL_ENV_VAR = "DESKBOARD_API_URL"


class ApiConfig(BaseModel):
    """Connection settings for the issue-tracker REST API."""

    base_url: str = Field(default=DEFAULT_API_URL, description="API root, e.g. https://desk/api")
    timeout: float = Field(default=10.0, description="Per-request timeout in seconds")
    headers: dict[str, str] = Field(
        default_factory=dict,
        description="Extra headers sent with every request",
    )

    @field_validator("base_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


class BoardConfig(BaseModel):
    """Board and list sizing."""

    page_size: int = Field(
        default=BOARD_PAGE_SIZE,
        ge=1,
        description="Issues fetched for the board (all matching issues)",
    )
    list_page_size: int = Field(
        default=LIST_PAGE_SIZE, ge=1, description="Issues per page in list views"
    )


class WarrantyConfig(BaseModel):
    """Warranty classification thresholds."""

    expiring_days: int = Field(
        default=WARRANTY_EXPIRING_DAYS,
        ge=0,
        description="Days before the due date a warranty counts as expiring",
    )


class DeskboardConfig(BaseModel):
    """Root configuration model."""

    api: ApiConfig = Field(default_factory=ApiConfig)
    board: BoardConfig = Field(default_factory=BoardConfig)
    warranty: WarrantyConfig = Field(default_factory=WarrantyConfig)

    @classmethod
    def load(cls, config_path: Path | None = None, *, env: bool = True) -> DeskboardConfig:
        """Load configuration from TOML file or use defaults.

        ``DESKBOARD_API_URL`` overrides ``api.base_url`` from the file unless
        ``env`` is False. Without ``config_path`` the standard directories are
        created first.
        """
        if config_path is None:
            ensure_directories()
            config_path = get_config_path()

        if config_path.exists():
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
            config = cls.model_validate(data)
        else:
            config = cls()

        env_url = os.environ.get(API_URL_ENV_VAR) if env else None
        if env_url:
            config.api = config.api.model_copy(update={"base_url": env_url.rstrip("/")})
        return config

    async def save(self, path: Path) -> None:
        """Serialize current config to TOML file.

        Args:
            path: Path to write config file (created if missing)
        """
        doc = tomlkit.document()
        for section_name in ("api", "board", "warranty"):
            section = getattr(self, section_name)
            table = tomlkit.table()
            for key, value in section.model_dump().items():
                if value is not None and value != {}:
                    table[key] = value
            doc[section_name] = table

        content = tomlkit.dumps(doc)
        await asyncio.to_thread(_replace_file, path, content)
