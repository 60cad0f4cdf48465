"""
In-memory repositories for a single-process deployment.

Each repository guards its maps with one lock; nothing survives a restart.
"""

import threading
from collections import Counter
from dataclasses import replace
from datetime import datetime
from typing import Optional

from ..models import User, Vote, VerificationCode


class InMemoryCodeRepository:
    def __init__(self):
        self._lock = threading.Lock()
        self._codes: dict[str, VerificationCode] = {}

    def save(self, record: VerificationCode) -> None:
        with self._lock:
            self._codes[record.email] = replace(record)

    def get(self, email: str) -> Optional[VerificationCode]:
        with self._lock:
            record = self._codes.get(email)
            return replace(record) if record else None

    def take(self, email: str, code_hash: str) -> bool:
        with self._lock:
            record = self._codes.get(email)
            if record is None or record.code_hash != code_hash:
                return False
            del self._codes[email]
            return True

    def record_failure(self, email: str) -> int:
        with self._lock:
            record = self._codes.get(email)
            if record is None:
                return 0
            record.attempts += 1
            return record.attempts

    def delete_expired(self, now: datetime) -> int:
        with self._lock:
            expired = [email for email, record in self._codes.items() if record.is_expired(now)]
            for email in expired:
                del self._codes[email]
            return len(expired)


class InMemoryUserRepository:
    def __init__(self):
        self._lock = threading.Lock()
        self._users: dict[str, User] = {}
        self._by_email: dict[str, str] = {}
        self._by_wallet: dict[str, str] = {}

    def add(self, user: User) -> User:
        # No collision check: a second user for the same email or wallet
        # takes over the index entry.
        with self._lock:
            self._users[user.id] = user
            if user.email:
                self._by_email[user.email] = user.id
            if user.wallet_address:
                self._by_wallet[user.wallet_address] = user.id
        return user

    def get(self, user_id: str) -> Optional[User]:
        with self._lock:
            return self._users.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            user_id = self._by_email.get(email)
            return self._users.get(user_id) if user_id else None

    def get_by_wallet(self, wallet_address: str) -> Optional[User]:
        with self._lock:
            user_id = self._by_wallet.get(wallet_address)
            return self._users.get(user_id) if user_id else None

    def count(self) -> int:
        with self._lock:
            return len(self._users)

    def count_by_auth_method(self) -> dict[str, int]:
        with self._lock:
            return dict(Counter(u.auth_method for u in self._users.values()))


class InMemoryVoteRepository:
    def __init__(self):
        self._lock = threading.Lock()
        self._by_user: dict[str, Vote] = {}

    def put_if_absent(self, vote: Vote) -> bool:
        with self._lock:
            if vote.user_id in self._by_user:
                return False
            self._by_user[vote.user_id] = vote
            return True

    def get_by_user(self, user_id: str) -> Optional[Vote]:
        with self._lock:
            return self._by_user.get(user_id)

    def count_by_option(self) -> dict[str, int]:
        with self._lock:
            return dict(Counter(v.option_id for v in self._by_user.values()))

    def count(self) -> int:
        with self._lock:
            return len(self._by_user)
