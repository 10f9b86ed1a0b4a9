"""Persisted host settings (model source and last loaded versions)."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path

import yaml

from ..models import ModelSourceConfig

logger = logging.getLogger(__name__)


@dataclass
class HostSettings:
    """
    User-editable settings stored as YAML.

    Only the model-related subset of the application's settings lives
    here. Unknown keys in the file are ignored.
    """

    local_model_path: str | None = None
    use_releases: bool = False
    release_repo: str = ""
    release_tag: str | None = None
    manifest_asset_name: str = "manifest.yaml"
    manifest_url: str | None = None
    confidence_threshold: float = 0.8
    last_loaded_model_version: int | None = None
    last_loaded_app_version: str | None = None

    def to_source_config(self) -> ModelSourceConfig:
        """
        Model source part of the settings.

        Blank or null values fall back to the defaults; YAML scalars such
        as `release_tag: 2` are read as text.
        """
        return ModelSourceConfig(
            local_model_path=_text(self.local_model_path),
            use_releases=bool(self.use_releases),
            release_repo=_text(self.release_repo) or "",
            release_tag=_text(self.release_tag),
            manifest_asset_name=_text(self.manifest_asset_name) or "manifest.yaml",
            manifest_url=_text(self.manifest_url),
        )

    def record_loaded_versions(self, model_version: int, app_version: str) -> bool:
        """
        Remember which model/app versions were last loaded together.

        Returns:
            True if either value changed and settings should be saved
        """
        if (
            self.last_loaded_model_version == model_version
            and self.last_loaded_app_version == app_version
        ):
            return False

        self.last_loaded_model_version = model_version
        self.last_loaded_app_version = app_version
        return True

    @classmethod
    def from_dict(cls, data: dict) -> HostSettings:
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def load(cls, path: Path) -> HostSettings:
        """
        Read settings from YAML.

        A missing or empty file yields defaults.

        Raises:
            ValueError: If the file is not a YAML mapping
        """
        if not path.exists():
            logger.info(f"No settings at {path}, using defaults")
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f)

        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError(f"Settings file {path} must contain a mapping")
        return cls.from_dict(data)

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.safe_dump(self.to_dict(), f, sort_keys=False)
        logger.info(f"Saved settings to {path}")


def _text(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
