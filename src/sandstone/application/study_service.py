"""
Study Service — Application layer orchestrator.

Loads cards through the CardRepository port, runs the pure scheduling
functions over them, and writes reviewed cards back.
"""

import logging
import random
from dataclasses import dataclass
from datetime import datetime

from sandstone.application.config import AppConfig
from sandstone.domain.flashcards.models import (
    Card,
    CardStats,
    DeckStats,
    StudyModeConfig,
    StudySession,
)
from sandstone.domain.flashcards.ports import CardRepository

from .scheduling import (
    aggregate_stats,
    apply_review,
    card_stats,
    filter_for_study_mode,
    get_due_cards,
    get_upcoming_reviews,
    record_review,
)

logger = logging.getLogger(__name__)


@dataclass
class ReviewOutcome:
    """Card state after a review, plus the updated session if one was passed."""

    card: Card
    session: StudySession | None = None


class StudyService:
    """
    Application service for reviewing and reporting on a deck.

    Depends on the CardRepository abstraction, not a concrete adapter.
    """

    def __init__(self, repo: CardRepository, config: AppConfig | None = None):
        """
        Args:
            repo: The repository (port) holding the deck's cards.
            config: Optional settings; strict_ratings and shuffle_seed are honoured.
        """
        self._repo = repo
        self._config = config

    @property
    def strict(self) -> bool:
        return bool(self._config and self._config.strict_ratings)

    async def review_card(
        self,
        card_id: str,
        quality: int,
        *,
        time_spent: int | None = None,
        session: StudySession | None = None,
        now: datetime | None = None,
    ) -> ReviewOutcome:
        """
        Apply a review to a stored card and persist the result.

        Raises:
            CardNotFoundError: If the card is not in the deck.
            InvalidRatingError: If strict ratings are enabled and quality is out of range.
        """
        card = await self._repo.get_card(card_id)
        updated = apply_review(card, quality, time_spent=time_spent, now=now, strict=self.strict)
        await self._repo.save_card(updated)

        logger.info(
            f"[review] {card_id} q={quality} interval {card.interval:g} -> {updated.interval:g} "
            f"ease {card.ease_factor:.2f} -> {updated.ease_factor:.2f}"
        )

        if session is not None:
            session = record_review(session, updated.review_history[-1].quality, time_spent or 0)
        return ReviewOutcome(card=updated, session=session)

    async def deck_stats(self, *, now: datetime | None = None) -> DeckStats:
        cards = await self._repo.list_cards()
        return aggregate_stats(cards, now=now)

    async def due_cards(self, *, now: datetime | None = None) -> list[Card]:
        cards = await self._repo.list_cards()
        return get_due_cards(cards, now=now)

    async def study_queue(
        self, mode_config: StudyModeConfig, seed: int | None = None
    ) -> list[Card]:
        """
        Select cards for a study session.

        A seed (argument first, then config) makes shuffled queues reproducible.
        """
        if seed is None and self._config is not None:
            seed = self._config.shuffle_seed
        cards = await self._repo.list_cards()
        queue = filter_for_study_mode(cards, mode_config, rng=random.Random(seed))
        logger.debug(f"[study] mode={mode_config.mode} selected {len(queue)}/{len(cards)} cards")
        return queue

    async def upcoming(self, days: int, *, now: datetime | None = None) -> dict[str, list[Card]]:
        cards = await self._repo.list_cards()
        return get_upcoming_reviews(cards, days, now=now)

    async def card_report(self, card_id: str) -> CardStats:
        card = await self._repo.get_card(card_id)
        return card_stats(card)
