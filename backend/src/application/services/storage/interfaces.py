"""
File Store Interface
Resume files addressed by generated unique names
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from domain.value_objects import OperationResult


@dataclass(frozen=True)
class StoredFile:
    """Metadata of a file written by the store"""

    file_name: str
    original_name: str
    size: int
    content_type: Optional[str]
    url: str


class IFileStore(ABC):
    """Resume storage contract

    Deleting a file that is already absent is a success, so the two
    deleters (status transition and cleanup) can race harmlessly.
    """

    @abstractmethod
    async def save(self, original_name: str, content: bytes, content_type: Optional[str] = None) -> StoredFile:
        """Validate and write a new file, never overwriting an existing one"""
        pass

    @abstractmethod
    def resolve(self, reference: str) -> Optional[Path]:
        """Path of an existing file for a url or bare name, None if missing"""
        pass

    @abstractmethod
    async def delete(self, reference: str) -> OperationResult[bool]:
        """Remove a file. value is True if removed, False if it was already gone"""
        pass
