"""Layered configuration loader for ru2kk.

Sources are merged in order, later layers winning: a YAML file in the user
configuration directory, a local ``config.yaml``, a local ``.env`` file and
finally the process environment. Every setting has a default, so running
with no sources at all is valid.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

import yaml
from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .errors import TranslationProviderConfigurationError
from .structures import DEFAULT_USER_AGENT, GOOGLE_WEB_ENDPOINT, PipelineOptions

APP_NAME = "ru2kk"
CONFIG_FILE_NAME = "config.yaml"


class Ru2kkConfig(BaseModel):
    """Schema describing all supported configuration options."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    RU2KK_INPUT: str = Field(default="index.html", description="Default input document.")
    RU2KK_OUTPUT: Optional[str] = Field(
        default=None,
        description="Default output document; derived from the input when unset.",
    )
    RU2KK_CONCURRENCY: int = Field(default=4, ge=1)
    RU2KK_TIMEOUT: float = Field(default=20.0, gt=0)
    RU2KK_SOURCE_LANGUAGE: str = Field(default="ru", min_length=1)
    RU2KK_TARGET_LANGUAGE: str = Field(default="kk", min_length=1)
    RU2KK_ENDPOINT: str = Field(default=GOOGLE_WEB_ENDPOINT, min_length=1)
    RU2KK_USER_AGENT: str = Field(default=DEFAULT_USER_AGENT, min_length=1)
    RU2KK_PROVIDER: str = Field(default="google")
    RU2KK_DEBUG_PROVIDER: bool = Field(default=False)

    @model_validator(mode="before")
    @classmethod
    def _normalise_provider(cls, data: Any) -> Any:
        if isinstance(data, dict):
            raw_value = data.get("RU2KK_PROVIDER")
            if isinstance(raw_value, str):
                data["RU2KK_PROVIDER"] = raw_value.strip().lower().replace("_", "-")
        return data

    def pipeline_options(self) -> PipelineOptions:
        return PipelineOptions(
            concurrency=self.RU2KK_CONCURRENCY,
            timeout_seconds=self.RU2KK_TIMEOUT,
            source_language=self.RU2KK_SOURCE_LANGUAGE,
            target_language=self.RU2KK_TARGET_LANGUAGE,
            endpoint=self.RU2KK_ENDPOINT,
            user_agent=self.RU2KK_USER_AGENT,
        )


def _allowed_keys() -> set[str]:
    return set(Ru2kkConfig.model_fields.keys())


@lru_cache(maxsize=4)
def _load_settings(app_dir: Path) -> Ru2kkConfig:
    """Load configuration layers once per directory and cache the result."""

    combined: dict[str, Any] = {}
    for path in _discover_yaml_paths(app_dir):
        combined.update(_read_yaml(path))
    _merge_env_sources(combined, app_dir=app_dir)

    try:
        return Ru2kkConfig.model_validate(combined)
    except ValidationError as exc:
        raise TranslationProviderConfigurationError(
            _format_validation_errors(exc.errors())
        ) from exc


def _discover_yaml_paths(app_dir: Path) -> list[Path]:
    candidates = [
        Path.home() / ".config" / APP_NAME / CONFIG_FILE_NAME,
        app_dir / CONFIG_FILE_NAME,
    ]
    return [path for path in candidates if path.is_file()]


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            parsed = yaml.safe_load(handle)
    except (OSError, yaml.YAMLError) as exc:
        raise TranslationProviderConfigurationError(
            f"Configuration file {path} could not be read: {exc}"
        ) from exc
    if parsed is None:
        return {}
    if not isinstance(parsed, Mapping):
        raise TranslationProviderConfigurationError(
            f"Invalid configuration file {path}: expected a mapping at the root."
        )
    allowed = _allowed_keys()
    return {key: value for key, value in parsed.items() if key in allowed}


def _merge_env_sources(target: dict[str, Any], *, app_dir: Path) -> None:
    """Merge .env and process environment variables into the target mapping."""

    allowed = _allowed_keys()

    def merge_values(values: Mapping[str, Optional[str]]) -> None:
        for key, value in sorted(values.items()):
            if value is None or key not in allowed:
                continue
            target[key] = value

    dotenv_path = app_dir / ".env"
    if dotenv_path.exists():
        merge_values(dotenv_values(dotenv_path))

    merge_values(dict(os.environ))


def _format_validation_errors(entries: Sequence[Mapping[str, Any]]) -> str:
    details: list[str] = []
    for entry in entries:
        location = ".".join(str(part) for part in entry.get("loc") or ())
        message = str(entry.get("msg") or "Invalid value")
        prefix = f"{location}: " if location else ""
        details.append(f"- {prefix}{message}")
    return "Configuration validation errors detected:\n" + "\n".join(details)


def get_settings(app_dir: Path | None = None) -> Ru2kkConfig:
    """Return the validated settings for the given (or current) directory."""

    return _load_settings((app_dir or Path.cwd()).resolve())


def clear_settings_cache() -> None:
    _load_settings.cache_clear()
