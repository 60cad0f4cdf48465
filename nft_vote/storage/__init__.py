from dataclasses import dataclass

from .base import CodeRepository, UserRepository, VoteRepository, DuplicateKeyError  # noqa: F401
from .memory import InMemoryCodeRepository, InMemoryUserRepository, InMemoryVoteRepository

BACKENDS = ("memory", "sql")


@dataclass
class Repositories:
    codes: CodeRepository
    users: UserRepository
    votes: VoteRepository


def build_repositories(backend: str) -> Repositories:
    if backend == "memory":
        return Repositories(
            codes=InMemoryCodeRepository(),
            users=InMemoryUserRepository(),
            votes=InMemoryVoteRepository(),
        )
    if backend == "sql":
        from .sql import SQLCodeRepository, SQLUserRepository, SQLVoteRepository

        return Repositories(
            codes=SQLCodeRepository(),
            users=SQLUserRepository(),
            votes=SQLVoteRepository(),
        )
    raise ValueError(f"Unknown STORAGE_BACKEND {backend!r}; expected one of {BACKENDS}")
