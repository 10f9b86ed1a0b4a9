"""
Command-line configuration for the model host.
"""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Any

from ..models import FetchConfig


def add_args(parser: argparse.ArgumentParser) -> None:
    """
    Add host arguments to the parser.

    Arguments can be overridden by environment variables.
    """

    parser.add_argument(
        "--settings",
        dest="settings_path",
        type=str,
        help="Path to the YAML settings file (model source, persisted versions).",
        default=os.environ.get("CHAT_FILTER_SETTINGS", "./chat_filter_settings.yaml"),
    )

    parser.add_argument(
        "--model.cache_path",
        dest="model_cache_path",
        type=str,
        help="Directory for the cached manifest and model.",
        default=os.environ.get("MODEL_CACHE_PATH", "./model_cache"),
    )

    parser.add_argument(
        "--http.timeout",
        dest="http_timeout",
        type=float,
        help="Timeout in seconds for each HTTP request.",
        default=float(os.environ.get("HTTP_TIMEOUT", "60")),
    )

    parser.add_argument(
        "--http.user_agent",
        dest="http_user_agent",
        type=str,
        help="User-Agent sent with every request.",
        default=os.environ.get("HTTP_USER_AGENT", FetchConfig.user_agent),
    )

    parser.add_argument(
        "--releases.api_url",
        dest="releases_api_url",
        type=str,
        help="Base URL of the releases API.",
        default=os.environ.get("RELEASES_API_URL", FetchConfig.releases_api_url),
    )

    parser.add_argument(
        "--model.max_retries",
        dest="model_max_retries",
        type=int,
        help="Model re-downloads allowed after a checksum mismatch.",
        default=int(os.environ.get("MODEL_MAX_RETRIES", "3")),
    )

    parser.add_argument(
        "--app_version",
        type=str,
        help="Application version persisted alongside the model version.",
        default=os.environ.get("APP_VERSION", "0.1.0"),
    )

    parser.add_argument(
        "--channel",
        type=int,
        help="Channel id passed to the classifier with each message.",
        default=int(os.environ.get("CHAT_CHANNEL", "0")),
    )

    parser.add_argument(
        "--message",
        dest="messages",
        action="append",
        help="Message to classify (repeatable). Reads stdin lines if omitted.",
        default=None,
    )

    parser.add_argument(
        "--log_level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level.",
        default=os.environ.get("LOG_LEVEL", "INFO"),
    )


def get_config(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse arguments and return configuration."""
    parser = argparse.ArgumentParser(
        description="Chat filter model host",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    add_args(parser)
    config = parser.parse_args(argv)

    # Convert paths to Path objects
    config.settings_path = Path(config.settings_path)
    config.model_cache_path = Path(config.model_cache_path)

    return config


def check_config(config: argparse.Namespace) -> None:
    """
    Validate configuration.

    Raises:
        ValueError: If configuration is invalid.
    """
    if config.http_timeout <= 0:
        raise ValueError("--http.timeout must be positive (or set HTTP_TIMEOUT env var)")

    if config.model_max_retries < 0:
        raise ValueError(
            "--model.max_retries must be >= 0 (or set MODEL_MAX_RETRIES env var)"
        )

    if not config.http_user_agent:
        raise ValueError("--http.user_agent is required (or set HTTP_USER_AGENT env var)")


def fetch_config_from(config: argparse.Namespace) -> FetchConfig:
    """Build the fetch config from parsed arguments."""
    return FetchConfig(
        user_agent=config.http_user_agent,
        timeout_seconds=config.http_timeout,
        releases_api_url=config.releases_api_url,
        max_retries=config.model_max_retries,
    )


def config_to_dict(config: argparse.Namespace) -> dict[str, Any]:
    """Convert config to dictionary for logging."""
    return {
        "settings_path": str(config.settings_path),
        "model_cache_path": str(config.model_cache_path),
        "http_timeout": config.http_timeout,
        "http_user_agent": config.http_user_agent,
        "releases_api_url": config.releases_api_url,
        "model_max_retries": config.model_max_retries,
        "app_version": config.app_version,
        "channel": config.channel,
        "log_level": config.log_level,
    }


def setup_logging(level: str) -> None:
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
