import secrets
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

AUTH_EMAIL = "email"
AUTH_WALLET = "wallet"
AUTH_METHODS = (AUTH_EMAIL, AUTH_WALLET)

ROLE_VOTER = "voter"
ROLE_ADMIN = "admin"
ROLES = (ROLE_VOTER, ROLE_ADMIN)


def generate_user_id() -> str:
    return f"user_{secrets.token_hex(8)}"


@dataclass
class User:
    auth_method: str
    id: str = field(default_factory=generate_user_id)
    email: Optional[str] = None
    wallet_address: Optional[str] = None
    role: str = ROLE_VOTER
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
