from .user import User  # noqa: F401
from .vote import Vote  # noqa: F401
from .option import VotingOption  # noqa: F401
from .verification_code import VerificationCode  # noqa: F401
from .eligibility import EligibilityResult  # noqa: F401

__all__ = [
    "User",
    "Vote",
    "VotingOption",
    "VerificationCode",
    "EligibilityResult",
]
