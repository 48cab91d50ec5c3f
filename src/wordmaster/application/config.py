from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from wordmaster.domain.constants import DEFAULT_DAILY_GOAL, DEFAULT_FALLBACK_QUEUE_SIZE


def default_config_file() -> Path:
    return Path.home() / ".config/wordmaster/config.toml"


class AppConfig(BaseSettings):
    """
    Configuration model for wordmaster.
    Supports loading from:
    1. Environment variables (WORDMASTER_*)
    2. Config file (~/.config/wordmaster/config.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="WORDMASTER_",
        extra="ignore",
        validate_default=True,
    )

    # Paths
    data_dir: Path = Field(default_factory=lambda: Path.home() / ".config/wordmaster/data")

    # Study
    daily_goal: int = Field(default=DEFAULT_DAILY_GOAL, ge=1)
    fallback_queue_size: int = Field(default=DEFAULT_FALLBACK_QUEUE_SIZE, ge=0)
    timezone: str | None = None  # IANA name; None means the system local zone

    verbose: int = 0

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        toml_file = default_config_file()
        # Earlier sources win: CLI overrides, then env, then the file
        if toml_file.exists():
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (
            init_settings,
            env_settings,
        )

    @field_validator("data_dir", mode="before")
    @classmethod
    def resolve_dir(cls, v: Any) -> Path:
        return Path(v).expanduser().resolve()

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, v: str | None) -> str | None:
        if v is None:
            return None
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @property
    def words_path(self) -> Path:
        return self.data_dir / "words.json"

    @property
    def stats_path(self) -> Path:
        return self.data_dir / "stats.json"


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/wordmaster/config.toml (if exists)
    3. Environment variables (WORDMASTER_*)
    4. cli_overrides (passed from Typer)
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
