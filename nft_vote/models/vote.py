import secrets
from dataclasses import dataclass, field
from datetime import datetime


def generate_vote_id() -> str:
    return f"vote_{secrets.token_hex(8)}"


@dataclass(frozen=True)
class Vote:
    user_id: str
    option_id: str
    id: str = field(default_factory=generate_vote_id)
    created_at: datetime = field(default_factory=datetime.utcnow)
