"""In-memory card repository."""

from sandstone.domain.errors import CardNotFoundError
from sandstone.domain.flashcards.models import Card
from sandstone.domain.flashcards.ports import CardRepository


class InMemoryCardRepository(CardRepository):
    """
    Keeps cards in an insertion-ordered dict keyed by card id.
    """

    def __init__(self, cards: list[Card] | None = None):
        self._cards: dict[str, Card] = {card.id: card for card in cards or []}

    async def list_cards(self) -> list[Card]:
        return list(self._cards.values())

    async def get_card(self, card_id: str) -> Card:
        try:
            return self._cards[card_id]
        except KeyError:
            raise CardNotFoundError(card_id) from None

    async def save_card(self, card: Card) -> None:
        self._cards[card.id] = card
