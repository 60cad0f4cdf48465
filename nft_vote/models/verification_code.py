from dataclasses import dataclass
from datetime import datetime


@dataclass
class VerificationCode:
    email: str
    code_hash: str
    expires_at: datetime
    attempts: int = 0

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or datetime.utcnow()) >= self.expires_at
