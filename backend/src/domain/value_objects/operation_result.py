"""
Operation Result
Outcome of a best-effort side effect (file removal, chat creation)
"""
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """Either a value or an error, never raised by the producer"""

    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "OperationResult[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: str) -> "OperationResult[T]":
        return cls(ok=False, error=error)

    def __bool__(self) -> bool:
        return self.ok
