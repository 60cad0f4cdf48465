"""
One vote per user over a fixed option set.

The duplicate check and the write are a single ``put_if_absent`` on the
repository, so concurrent casts for one user record exactly one vote.
Eligibility is the caller's job and must be settled before ``cast_vote``.
"""

import logging
from typing import Iterable, Optional

from ..exceptions import DuplicateVoteError, InvalidOptionError
from ..models import Vote, VotingOption
from ..storage import VoteRepository

logger = logging.getLogger(__name__)


class VoteLedger:
    def __init__(self, repository: VoteRepository, options: Iterable[VotingOption]):
        self._repo = repository
        self._options = list(options)
        self._by_id = {option.id: option for option in self._options}
        if len(self._by_id) != len(self._options):
            raise ValueError("Voting option ids must be unique")

    def options(self) -> list[VotingOption]:
        return list(self._options)

    def get_option(self, option_id) -> Optional[VotingOption]:
        return self._by_id.get(str(option_id))

    def has_voted(self, user_id: str) -> bool:
        return self._repo.get_by_user(user_id) is not None

    def get_vote(self, user_id: str) -> Optional[Vote]:
        return self._repo.get_by_user(user_id)

    def cast_vote(self, user_id: str, option_id) -> Vote:
        option = self.get_option(option_id)
        if option is None:
            raise InvalidOptionError(str(option_id))

        vote = Vote(user_id=user_id, option_id=option.id)
        if not self._repo.put_if_absent(vote):
            logger.info("Duplicate vote attempt by %s", user_id)
            raise DuplicateVoteError(user_id)

        logger.info("Vote recorded: user %s voted for option %s", user_id, option.id)
        return vote

    def results(self) -> list[dict]:
        counts = self._repo.count_by_option()
        return [
            {
                "id": option.id,
                "title": option.title,
                "description": option.description,
                "votes": option.baseline + counts.get(option.id, 0),
            }
            for option in self._options
        ]

    def totals(self) -> tuple[int, int]:
        """(total votes including seeded baselines, recorded votes)"""
        total = sum(row["votes"] for row in self.results())
        return total, self._repo.count()
