"""CLI runner: load the model once, then classify messages."""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Iterable

from ..models import create_model_loader
from .config import check_config, config_to_dict, fetch_config_from, get_config, setup_logging
from .service import ModelService
from .settings import HostSettings

logger = logging.getLogger(__name__)


def _messages(given: list[str] | None) -> Iterable[str]:
    if given:
        return given
    return (line.rstrip("\n") for line in sys.stdin)


async def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    config = get_config(argv)
    setup_logging(config.log_level)
    check_config(config)
    logger.debug(f"Config: {config_to_dict(config)}")

    settings = HostSettings.load(config.settings_path)
    loader = create_model_loader(
        config.model_cache_path, fetch_config=fetch_config_from(config)
    )
    service = ModelService(
        loader,
        settings,
        app_version=config.app_version,
        settings_path=config.settings_path,
    )

    service.initialise()
    model = await service.wait()

    print(f"status: {service.status.description}")
    if service.last_error:
        print(f"error: {service.last_error}")
    if model is None:
        return 1

    print(f"model version: {model.version}")
    try:
        for message in _messages(config.messages):
            if not message:
                continue
            result = service.classify_message(config.channel, message)
            if result is None:
                return 1
            category, confidence = result
            flag = "*" if category.is_flagged and service.passes_threshold(confidence) else " "
            print(f"{flag}{category.value}\t{confidence:.3f}\t{message}")
    finally:
        service.close()

    return 0


def cli() -> None:
    """Console script entry point."""
    sys.exit(asyncio.run(main()))
