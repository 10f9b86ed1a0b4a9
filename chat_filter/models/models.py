"""Data models for model acquisition module."""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

import yaml

from ..classifier.categories import MessageCategory, classify_message
from .errors import InvalidManifestError, ManifestParseError

if TYPE_CHECKING:
    from ..classifier.models import Classifier

DIGEST_SIZE = 32  # SHA-256
SENTINEL_VERSION = 0  # local override, never persisted as a release

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def _normalise_key(key: Any) -> str:
    """ModelUrl, modelUrl, MODEL_URL and model-url all become model_url."""
    text = _CAMEL_BOUNDARY.sub("_", str(key).strip())
    return text.replace("-", "_").lower()


class LoadStatus(Enum):
    """Current phase of a model load."""

    UNINITIALISED = "uninitialised"
    PREPARING = "preparing"
    DOWNLOADING_MANIFEST = "downloading_manifest"
    DOWNLOADING_MODEL = "downloading_model"
    INITIALISING = "initialising"
    INITIALISED = "initialised"
    WAITING = "waiting"

    @property
    def description(self) -> str:
        """Human-readable status for settings screens."""
        return _STATUS_DESCRIPTIONS[self]


_STATUS_DESCRIPTIONS = {
    LoadStatus.UNINITIALISED: "Uninitialised",
    LoadStatus.PREPARING: "Preparing to update model",
    LoadStatus.DOWNLOADING_MANIFEST: "Downloading model manifest",
    LoadStatus.DOWNLOADING_MODEL: "Downloading model",
    LoadStatus.INITIALISING: "Initialising model and classifier",
    LoadStatus.INITIALISED: "Initialised",
    LoadStatus.WAITING: "Waiting for model source configuration",
}


@dataclass(frozen=True)
class ModelSourceConfig:
    """
    Where the model should come from.

    Supplied by the host's settings store. Exactly one remote path is
    active: release lookups when use_releases is set, the direct
    manifest URL otherwise.
    """

    local_model_path: str | None = None
    use_releases: bool = False
    release_repo: str = ""
    release_tag: str | None = None  # None means latest
    manifest_asset_name: str = "manifest.yaml"
    manifest_url: str | None = None

    @property
    def has_remote_source(self) -> bool:
        """True when a remote manifest source is selected."""
        return self.use_releases or bool(
            self.manifest_url and self.manifest_url.strip()
        )


@dataclass(frozen=True)
class Manifest:
    """
    Versioned descriptor of a published model.

    model_hash is the base64 text exactly as published; use ``digest``
    to get the raw 32 bytes for comparison.
    """

    version: int
    model_url: str
    model_hash: str
    report_url: str

    @property
    def digest(self) -> bytes:
        """
        Decode model_hash into raw SHA-256 bytes.

        Raises:
            InvalidManifestError: If model_hash is not base64 of 32 bytes
        """
        try:
            # YAML block scalars and wrapped lines leave whitespace behind
            compact = "".join(self.model_hash.split())
            raw = base64.b64decode(compact, validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidManifestError(f"model_hash is not valid base64: {e}") from e

        if len(raw) != DIGEST_SIZE:
            raise InvalidManifestError(
                f"model_hash decodes to {len(raw)} bytes, expected {DIGEST_SIZE}"
            )
        return raw

    @property
    def is_sentinel(self) -> bool:
        """True for manifests synthesised from a local override."""
        return self.version == SENTINEL_VERSION

    @classmethod
    def from_dict(cls, data: dict) -> Manifest:
        """
        Create from a mapping with loosely-named keys.

        Keys are matched case-insensitively using underscored names.
        Unknown keys are ignored.

        Raises:
            ManifestParseError: If a required field is missing or malformed
        """
        fields = {_normalise_key(k): v for k, v in data.items()}

        missing = [
            name
            for name in ("version", "model_url", "model_hash", "report_url")
            if fields.get(name) is None
        ]
        if missing:
            raise ManifestParseError(f"Manifest missing fields: {missing}")

        version = fields["version"]
        if isinstance(version, bool) or not isinstance(version, int):
            try:
                version = int(str(version))
            except ValueError as e:
                raise ManifestParseError(f"Invalid manifest version: {version!r}") from e

        return cls(
            version=version,
            model_url=str(fields["model_url"]),
            model_hash=str(fields["model_hash"]),
            report_url=str(fields["report_url"]),
        )

    @classmethod
    def from_yaml(cls, text: str) -> Manifest:
        """
        Parse manifest source text.

        Raises:
            ManifestParseError: If text is not a YAML mapping with the
                required fields
        """
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ManifestParseError(f"Invalid manifest YAML: {e}") from e

        if not isinstance(data, dict):
            raise ManifestParseError(
                f"Manifest must be a mapping, got {type(data).__name__}"
            )
        return cls.from_dict(data)

    @classmethod
    def for_local_override(cls, path: str, model_hash: str) -> Manifest:
        """Synthesise the sentinel manifest for a local model file."""
        return cls(
            version=SENTINEL_VERSION,
            model_url="file://" + path.replace("\\", "/"),
            model_hash=model_hash,
            report_url="https://example.invalid",
        )


@dataclass(frozen=True)
class FetchedManifest:
    """A remote manifest together with the exact text it was parsed from."""

    manifest: Manifest
    source: str


@dataclass
class LoadedModel:
    """
    An activated model.

    Owned by whoever called the loader. Call ``release`` before
    dropping it in favour of a newer load.
    """

    version: int
    report_url: str
    classifier: Classifier

    @property
    def is_local_override(self) -> bool:
        return self.version == SENTINEL_VERSION

    def classify_message(
        self, channel: int, message: str
    ) -> tuple[MessageCategory, float]:
        """Classify a message into an application category."""
        return classify_message(self.classifier, channel, message)

    def release(self) -> None:
        """Free inference resources held by the classifier."""
        self.classifier.release()
