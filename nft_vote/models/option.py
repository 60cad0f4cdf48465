from dataclasses import dataclass


@dataclass(frozen=True)
class VotingOption:
    """A fixed ballot choice. ``baseline`` is a seeded vote count added to recorded votes."""

    id: str
    title: str
    description: str = ""
    baseline: int = 0

    @classmethod
    def from_config(cls, raw: dict) -> "VotingOption":
        return cls(
            id=str(raw["id"]),
            title=raw["title"],
            description=raw.get("description", ""),
            baseline=int(raw.get("baseline", raw.get("votes", 0))),
        )
