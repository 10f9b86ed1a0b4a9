"""Model acquisition module: resolve, download, verify and cache classifier models."""

from .cache import ArtifactCache, ArtifactKind
from .downloader import ModelDownloader
from .errors import (
    CacheError,
    HashMismatchError,
    InvalidManifestError,
    InvalidRepositoryError,
    ManifestAssetNotFoundError,
    ManifestFetchError,
    ManifestParseError,
    ModelDownloadError,
    ModelError,
    ReleaseAssetsMissingError,
    ReleaseLookupError,
    ReleaseNotFoundError,
    SourceNotConfiguredError,
)
from .factory import create_model_loader
from .http import FetchConfig, HttpFetcher
from .loader import ModelLoader
from .manifest import ManifestResolver
from .models import (
    SENTINEL_VERSION,
    FetchedManifest,
    LoadedModel,
    LoadStatus,
    Manifest,
    ModelSourceConfig,
)
from .state import LoaderState
from .verifier import IntegrityVerifier

__all__ = [
    # Factory (main entry point)
    "create_model_loader",
    # Errors
    "ModelError",
    "SourceNotConfiguredError",
    "ManifestFetchError",
    "ManifestParseError",
    "InvalidManifestError",
    "ReleaseLookupError",
    "InvalidRepositoryError",
    "ReleaseNotFoundError",
    "ReleaseAssetsMissingError",
    "ManifestAssetNotFoundError",
    "ModelDownloadError",
    "HashMismatchError",
    "CacheError",
    # Models
    "SENTINEL_VERSION",
    "Manifest",
    "FetchedManifest",
    "LoadedModel",
    "LoadStatus",
    "ModelSourceConfig",
    # Config
    "FetchConfig",
    # Components (for advanced usage/testing)
    "ArtifactCache",
    "ArtifactKind",
    "HttpFetcher",
    "IntegrityVerifier",
    "LoaderState",
    "ManifestResolver",
    "ModelDownloader",
    "ModelLoader",
]
