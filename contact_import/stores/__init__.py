"""Contact store contract and reference implementations."""

from .base import ContactStore, UpsertClient  # noqa: F401
from .json_file import JsonFileContactStore  # noqa: F401
from .memory import InMemoryContactStore  # noqa: F401

__all__ = [
    "ContactStore",
    "InMemoryContactStore",
    "JsonFileContactStore",
    "UpsertClient",
]
