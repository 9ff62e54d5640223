"""
Ports (interfaces) for card storage.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from .models import Card


class CardRepository(ABC):
    """
    Port for loading and saving a deck's cards.

    Implementations:
        - YamlDeckRepository: Reads and writes a YAML deck file.
        - InMemoryCardRepository: Keeps cards in a dict (tests).
    """

    @abstractmethod
    async def list_cards(self) -> list[Card]:
        """
        Return every card in the deck, in stored order.
        """
        pass

    @abstractmethod
    async def get_card(self, card_id: str) -> Card:
        """
        Fetch a single card.

        Raises:
            CardNotFoundError: If no card has the given id.
        """
        pass

    @abstractmethod
    async def save_card(self, card: Card) -> None:
        """
        Insert or replace a card, keyed by its id.
        """
        pass

    async def save_cards(self, cards: list[Card]) -> None:
        for card in cards:
            await self.save_card(card)
