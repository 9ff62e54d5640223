"""Helpers shared by CLI commands."""

import asyncio
import logging
from collections.abc import Coroutine
from pathlib import Path
from typing import Any, TypeVar

import typer

from sandstone.application.config import AppConfig, resolve_config
from sandstone.application.study_service import StudyService
from sandstone.domain.errors import (
    CardNotFoundError,
    DeckFileError,
    InvalidRatingError,
    SandstoneError,
)
from sandstone.infrastructure.adapters.yaml_deck import YamlDeckRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _resolve_with_overrides(**overrides: Any) -> AppConfig:
    """Resolve config with CLI overrides, dropping options the user left unset."""
    return resolve_config({k: v for k, v in overrides.items() if v is not None})


def _deck_path(config: AppConfig) -> Path:
    if config.deck_path is None:
        typer.secho(
            "No deck given. Pass a deck file or set 'deck_path' in config.", fg="red", err=True
        )
        raise typer.Exit(2)
    return config.deck_path


def _service(config: AppConfig) -> StudyService:
    return StudyService(YamlDeckRepository(_deck_path(config)), config)


def humanize_error(error: Exception) -> str:
    """Turn a domain error into a one-line message for the terminal."""
    if isinstance(error, CardNotFoundError):
        return f"Card not found: {error.card_id}. Run 'sandstone due' to list card IDs."
    if isinstance(error, InvalidRatingError):
        return (
            f"Invalid rating {error.quality!r}: "
            "use a whole number from 0 (blackout) to 5 (perfect)."
        )
    if isinstance(error, DeckFileError):
        return f"Deck error: {error}"
    return str(error)


def _run(coro: Coroutine[Any, Any, T]) -> T:
    """Run a service coroutine, reporting domain errors instead of tracebacks."""
    try:
        return asyncio.run(coro)
    except SandstoneError as e:
        logger.debug("Command failed", exc_info=True)
        typer.secho(humanize_error(e), fg="red", err=True)
        raise typer.Exit(1) from None
