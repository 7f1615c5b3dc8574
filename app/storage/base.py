from __future__ import annotations

from abc import ABC, abstractmethod
from typing import BinaryIO


class StorageAdapter(ABC):
    @abstractmethod
    def put_file(self, key: str, fileobj: BinaryIO) -> str:
        """Write fileobj under key; returns the reference stored on the owning row."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key. Missing keys are not an error."""

    @abstractmethod
    def resolve_uri(self, key: str) -> str:
        """Public URL path for key."""
