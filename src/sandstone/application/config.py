from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from sandstone.domain.constants import DEFAULT_UPCOMING_DAYS


class AppConfig(BaseSettings):
    """
    Configuration model for sandstone.
    Supports loading from:
    1. Environment variables (SANDSTONE_*)
    2. Config file (~/.config/sandstone/config.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="SANDSTONE_",
        extra="ignore",
    )

    # Paths
    deck_path: Path | None = None
    log_dir: Path = Field(default_factory=lambda: Path.home() / ".config/sandstone/logs")

    # Scheduling
    strict_ratings: bool = False
    default_mode: Literal["standard", "cram", "review", "learn", "custom"] = "standard"
    upcoming_days: int = Field(default=DEFAULT_UPCOMING_DAYS, ge=1)
    shuffle_seed: int | None = None

    verbose: int = 1

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

        # First existing config file wins
        toml_file = next((f for f in _config_files() if f.exists()), None)

        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("deck_path", mode="before")
    @classmethod
    def resolve_deck_path(cls, v: Any) -> Path | None:
        if v is None:
            return None
        return Path(v).expanduser().resolve()


def _config_files() -> list[Path]:
    # Re-evaluated on each call so a patched HOME is honoured
    return [
        Path.home() / ".config/sandstone/config.toml",
        Path.home() / ".sandstone.toml",
    ]


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/sandstone/config.toml (if exists)
    3. Environment variables (SANDSTONE_*)
    4. cli_overrides (passed from Typer)
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
