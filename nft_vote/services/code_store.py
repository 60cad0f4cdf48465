"""
Time-boxed, single-use one-time codes keyed by email.

Only a salted hash of each code is stored. Consumption goes through the
repository's compare-and-delete, so a code verifies successfully at most once
even when two requests race.
"""

import logging
import secrets
import string
from datetime import datetime, timedelta
from typing import Callable

from werkzeug.security import generate_password_hash, check_password_hash

from ..models import VerificationCode
from ..storage import CodeRepository

logger = logging.getLogger(__name__)


def generate_otp(length: int = 6) -> str:
    digits = string.digits
    return "".join(secrets.choice(digits) for _ in range(length))


def hash_otp(otp: str) -> str:
    return generate_password_hash(otp)


def verify_otp(otp: str, otp_hash: str) -> bool:
    return check_password_hash(otp_hash, otp)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class CodeStore:
    def __init__(
        self,
        repository: CodeRepository,
        ttl_seconds: int = 600,
        length: int = 6,
        max_attempts: int = 5,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self._repo = repository
        self._ttl = timedelta(seconds=ttl_seconds)
        self._length = length
        self._max_attempts = max_attempts
        self._clock = clock

    def issue(self, email: str) -> str:
        """Create a fresh code for ``email``, replacing any pending one."""
        now = self._clock()
        self.purge_expired(now)

        code = generate_otp(self._length)
        self._repo.save(VerificationCode(
            email=normalize_email(email),
            code_hash=hash_otp(code),
            expires_at=now + self._ttl,
        ))
        return code

    def verify(self, email: str, candidate: str) -> bool:
        key = normalize_email(email)
        record = self._repo.get(key)
        if record is None:
            return False

        if record.is_expired(self._clock()):
            self._repo.take(key, record.code_hash)
            logger.info("Expired verification code discarded for %s", key)
            return False

        if not candidate or not verify_otp(candidate.strip(), record.code_hash):
            attempts = self._repo.record_failure(key)
            if self._max_attempts and attempts >= self._max_attempts:
                self._repo.take(key, record.code_hash)
                logger.warning("Verification code for %s revoked after %d failed attempts", key, attempts)
            return False

        # Loses to a concurrent verification of the same code.
        return self._repo.take(key, record.code_hash)

    def purge_expired(self, now: datetime | None = None) -> int:
        removed = self._repo.delete_expired(now or self._clock())
        if removed:
            logger.debug("Purged %d expired verification codes", removed)
        return removed
