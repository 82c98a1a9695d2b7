"""Unified settings: CLI flags, env vars and ``pansync.toml`` in one object.

Priority (highest first): CLI flags, ``PANSYNC_*`` env vars (nested with
``__``), the TOML file of the resolved target, section defaults.
"""

from __future__ import annotations

import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any, Self

import click
from pydantic import Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    TomlConfigSettingsSource,
)

from pansync.config.discovery import Target, resolve_target
from pansync.config.models import (
    DatabaseConfig,
    ForwardingPolicy,
    SyncConfig,
    TerminusConfig,
)

# The TOML file being loaded; sources are built per class, not per instance.
_toml_file: ContextVar[Path | None] = ContextVar("pansync_toml_file", default=None)


class PansyncSettings(BaseSettings):
    """Frozen settings for one pansync invocation.

    Attributes:
        root: Absolute project root. Relative SQLite paths resolve against it.
        config_path: Absolute path of the config file in effect, or None.
        uri: Selects a ``[databases.<uri>]`` target instead of ``[database]``.
        db_url: Overrides the selected target's URL.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "PANSYNC_",
        "env_nested_delimiter": "__",
    }

    root: Path = Field(default_factory=lambda: Path.cwd().resolve())
    config_path: Path | None = None

    uri: str | None = None
    db_url: str | None = None
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    no_interact: bool = False

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    databases: dict[str, DatabaseConfig] = Field(default_factory=dict)
    terminus: TerminusConfig = Field(default_factory=TerminusConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)
    forwarding: ForwardingPolicy = Field(default_factory=ForwardingPolicy)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls, toml_file=_toml_file.get()),
        )

    @model_validator(mode="after")
    def _uri_has_database(self) -> Self:
        if self.uri and self.uri not in self.databases:
            msg = f"No [databases.{self.uri}] section for --uri '{self.uri}'"
            raise ValueError(msg)
        return self

    @property
    def target(self) -> Target:
        """Root and config file, as handed to sub-invocations."""
        return Target(root=self.root, config=self.config_path)

    def target_database(self) -> DatabaseConfig:
        """The database config for the current invocation target."""
        config = self.databases[self.uri] if self.uri else self.database
        if self.db_url:
            config = config.model_copy(update={"url": self.db_url})
        return config

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | Path | None = None,
        root: Path | None = None,
        **cli_flags: Any,
    ) -> PansyncSettings:
        """Resolve the target, load its TOML, and apply *cli_flags* on top.

        Raises:
            click.ClickException: the config file is not valid TOML.
        """
        target = resolve_target(config_path, root)
        # Unset flags must not shadow PANSYNC_* env vars.
        flags = {key: value for key, value in cli_flags.items() if value is not None}

        token = _toml_file.set(target.config)
        try:
            return cls(root=target.root, config_path=target.config, **flags)
        except tomllib.TOMLDecodeError as exc:
            raise click.ClickException(f"Invalid TOML in {target.config}: {exc}") from exc
        finally:
            _toml_file.reset(token)
