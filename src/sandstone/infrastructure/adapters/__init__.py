# Infrastructure Adapters Package
from .memory import InMemoryCardRepository
from .yaml_deck import YamlDeckRepository

__all__ = ["InMemoryCardRepository", "YamlDeckRepository"]
