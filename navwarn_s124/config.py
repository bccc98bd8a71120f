"""Deployment settings.

Values come from (lowest to highest precedence):
  1. the defaults below
  2. an optional YAML file (``--config`` on the command line)
  3. ``NAVWARN_S124_<FIELD>`` environment variables, a ``.env`` file included

Example YAML::

    country: DK
    production_agency: Danish Maritime Authority
    languages: [en, da]
    time_zone: Europe/Copenhagen
"""

from __future__ import annotations

import logging
import os
from datetime import tzinfo as TzInfo
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import dotenv
import yaml
from dateutil import tz
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import ValidationError as PydanticValidationError

from .errors import ConfigurationError
from .language import normalize_language

logger = logging.getLogger(__name__)

ENV_PREFIX = "NAVWARN_S124_"


class Settings(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    country: str = "DK"
    production_agency: str = "Danish Maritime Authority"
    organisation: str = "DMA"
    languages: List[str] = ["en", "da"]
    default_language: str = "en"
    time_zone: str = "UTC"
    dataset_id_prefix: str = "urn:mrn:test:s124:"

    @field_validator("country")
    @classmethod
    def _country_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("country must not be blank")
        return value.strip()

    @field_validator("time_zone")
    @classmethod
    def _known_time_zone(cls, value: str) -> str:
        if tz.gettz(value) is None:
            raise ValueError(f"unknown time zone: {value}")
        return value

    @property
    def tzinfo(self) -> TzInfo:
        return tz.gettz(self.time_zone)

    def resolve_language(self, lang: Optional[str]) -> str:
        """Return ``lang`` if it is a configured language, else the default."""
        wanted = normalize_language(lang)
        if wanted and wanted in [normalize_language(code) for code in self.languages]:
            return wanted
        return self.default_language


def _env_overrides() -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for name in Settings.model_fields:
        raw = os.getenv(ENV_PREFIX + name.upper())
        if raw is None:
            continue
        if name == "languages":
            overrides[name] = [part.strip() for part in raw.split(",") if part.strip()]
        else:
            overrides[name] = raw
    return overrides


def load_settings(path: Optional[Union[str, Path]] = None) -> Settings:
    dotenv.load_dotenv(dotenv.find_dotenv(usecwd=True))
    data: Dict[str, Any] = {}
    if path is not None:
        path = Path(path)
        try:
            with path.open("r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Cannot read settings from {path}: {e}") from e
        if loaded is not None and not isinstance(loaded, dict):
            raise ConfigurationError(f"Settings file {path} must contain a mapping")
        data.update(loaded or {})
        logger.info("Loaded settings: %s", path.name)
    data.update(_env_overrides())
    try:
        return Settings(**data)
    except PydanticValidationError as e:
        raise ConfigurationError(str(e)) from e
