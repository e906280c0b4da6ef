from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from studylens.domain.constants import SESSION_RETENTION_DAYS


def config_dir() -> Path:
    return Path.home() / ".config/studylens"


class AppConfig(BaseSettings):
    """
    Configuration model for studylens.
    Supports loading from:
    1. Environment variables (STUDYLENS_*)
    2. Config file (~/.config/studylens/config.toml)
    3. Manual overrides (CLI / HTTP)
    """

    model_config = SettingsConfigDict(
        env_prefix="STUDYLENS_",
        extra="ignore",
    )

    # Paths
    data_file: Path = Field(default_factory=lambda: config_dir() / "study-data.json")
    sessions_file: Path = Field(default_factory=lambda: config_dir() / "study-sessions.json")
    goals_file: Path = Field(default_factory=lambda: config_dir() / "goals.json")
    report_dir: Path = Field(default_factory=Path.cwd)

    # Engine
    session_retention_days: int = Field(default=SESSION_RETENTION_DAYS, ge=1)

    verbose: int = 1  # 0 warnings, 1 info, 2+ debug; each CLI -v adds one

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

        toml_file = config_dir() / "config.toml"

        # Overrides win, then environment, then the config file.
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

    @field_validator("data_file", "sessions_file", "goals_file", "report_dir", mode="before")
    @classmethod
    def expand_path(cls, v: Any) -> Path:
        return Path(v).expanduser()


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/studylens/config.toml (if exists)
    3. Environment variables (STUDYLENS_*)
    4. cli_overrides (None values are ignored)
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
