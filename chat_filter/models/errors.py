"""Custom exceptions for model acquisition module."""


class ModelError(Exception):
    """Base exception for model-related errors."""

    pass


# --- Configuration errors ---


class SourceNotConfiguredError(ModelError):
    """
    Raised when no manifest source is configured.

    This can happen when:
    - Release lookups are disabled and no manifest URL is set
    - Settings were reset and the user has not picked a source yet
    """

    pass


# --- Manifest errors ---


class ManifestFetchError(ModelError):
    """
    Raised when the manifest text cannot be downloaded.

    This can happen when:
    - Network/connection error or timeout
    - DNS failure
    - Server returned a non-2xx status
    """

    pass


class ManifestParseError(ModelError):
    """
    Raised when manifest text cannot be parsed into a Manifest.

    This can happen when:
    - Text is not valid YAML
    - Document is not a mapping
    - Required field missing or has the wrong type
    """

    pass


class InvalidManifestError(ModelError):
    """
    Raised when a parsed manifest cannot be used for verification.

    This can happen when:
    - model_hash is not valid base64
    - model_hash does not decode to exactly 32 bytes
    """

    pass


# --- Release lookup errors ---


class ReleaseLookupError(ManifestFetchError):
    """Base exception for release-hosting API lookups."""

    pass


class InvalidRepositoryError(ReleaseLookupError):
    """
    Raised when the repository identifier is not "owner/repo".

    This can happen when:
    - Repository is empty
    - Repository has no separator or more than one
    """

    pass


class ReleaseNotFoundError(ReleaseLookupError):
    """
    Raised when the requested release does not exist.

    This can happen when:
    - Repository has no published releases
    - Configured tag does not exist
    """

    pass


class ReleaseAssetsMissingError(ReleaseLookupError):
    """
    Raised when the release response has no asset list.

    This can happen when:
    - API response shape changed
    - Response is not a JSON object
    """

    pass


class ManifestAssetNotFoundError(ReleaseLookupError):
    """
    Raised when the release has no usable manifest asset.

    This can happen when:
    - No asset name matches the configured manifest asset name
    - Matching asset has no browser_download_url
    """

    pass


# --- Download / verification errors ---


class ModelDownloadError(ModelError):
    """
    Raised when model download fails.

    This can happen when:
    - Network/connection error or timeout
    - Model URL returned a non-2xx status
    """

    pass


class HashMismatchError(ModelError):
    """
    Raised when model bytes don't match the manifest digest.

    This can happen when:
    - Wrong asset uploaded for the release
    - Corrupted or truncated download
    """

    pass


# --- Local I/O errors ---


class CacheError(ModelError):
    """
    Raised when a cache artifact cannot be read or written.

    This can happen when:
    - Cache directory is not writable
    - Disk is full
    """

    pass
