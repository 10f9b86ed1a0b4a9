"""
Host-application layer.

This package contains:
- ModelService: owns the active model, starts background loads
- HostSettings: persisted model source and last loaded versions
- Config: CLI argument parsing and logging setup

The acquisition pipeline itself is in chat_filter.models.
"""

from .config import (
    add_args,
    check_config,
    config_to_dict,
    fetch_config_from,
    get_config,
    setup_logging,
)
from .service import ModelService
from .settings import HostSettings

__all__ = [
    "HostSettings",
    "ModelService",
    "add_args",
    "check_config",
    "config_to_dict",
    "fetch_config_from",
    "get_config",
    "setup_logging",
]
