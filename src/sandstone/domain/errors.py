"""Domain errors raised by Sandstone."""


class SandstoneError(Exception):
    """Base class for all Sandstone errors."""


class InvalidRatingError(SandstoneError, ValueError):
    """A review quality outside 0-5 (or not an integer) in strict mode."""

    def __init__(self, quality: object):
        self.quality = quality
        super().__init__(f"Quality rating must be an integer in [0, 5], got {quality!r}")


class CardNotFoundError(SandstoneError, KeyError):
    """The requested card does not exist in the deck."""

    def __init__(self, card_id: str):
        self.card_id = card_id
        super().__init__(card_id)

    def __str__(self) -> str:
        return f"Card not found: {self.card_id}"


class DeckFileError(SandstoneError):
    """The deck file is missing, unreadable, or malformed."""
