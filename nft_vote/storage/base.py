"""
Repository interfaces.

Services depend on these protocols, not on a concrete backend, so the
in-memory store can be swapped for the SQL store without touching call sites.
Every mutating method must be atomic with respect to concurrent callers.
"""

from datetime import datetime
from typing import Optional, Protocol, runtime_checkable

from ..models import User, Vote, VerificationCode


class DuplicateKeyError(Exception):
    """Raised by a backend that enforces a uniqueness constraint on insert."""


@runtime_checkable
class CodeRepository(Protocol):
    def save(self, record: VerificationCode) -> None:
        """Insert or replace the pending code for ``record.email``."""
        ...

    def get(self, email: str) -> Optional[VerificationCode]:
        ...

    def take(self, email: str, code_hash: str) -> bool:
        """
        Delete the pending code for ``email`` only if it still has ``code_hash``.

        Returns True for exactly one caller per issued code.
        """
        ...

    def record_failure(self, email: str) -> int:
        """Increment the wrong-attempt counter and return the new value (0 if no code)."""
        ...

    def delete_expired(self, now: datetime) -> int:
        ...


@runtime_checkable
class UserRepository(Protocol):
    def add(self, user: User) -> User:
        ...

    def get(self, user_id: str) -> Optional[User]:
        ...

    def get_by_email(self, email: str) -> Optional[User]:
        ...

    def get_by_wallet(self, wallet_address: str) -> Optional[User]:
        ...

    def count(self) -> int:
        ...

    def count_by_auth_method(self) -> dict[str, int]:
        ...


@runtime_checkable
class VoteRepository(Protocol):
    def put_if_absent(self, vote: Vote) -> bool:
        """Store ``vote`` unless its user already has one. Returns True if stored."""
        ...

    def get_by_user(self, user_id: str) -> Optional[Vote]:
        ...

    def count_by_option(self) -> dict[str, int]:
        ...

    def count(self) -> int:
        ...
