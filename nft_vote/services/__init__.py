"""
Service wiring.

``init_services`` builds the repositories and services for an app and stores
them on ``app.extensions``; request code reaches them through ``get_services``.
"""

from dataclasses import dataclass

from flask import current_app

from ..models import VotingOption
from ..storage import Repositories, build_repositories
from .code_store import CodeStore
from .eligibility import EligibilityService, build_eligibility_service
from .token_service import TokenService
from .user_directory import UserDirectory
from .vote_ledger import VoteLedger

EXTENSION_KEY = "nft_vote"


@dataclass
class Services:
    repositories: Repositories
    codes: CodeStore
    tokens: TokenService
    users: UserDirectory
    eligibility: EligibilityService
    ledger: VoteLedger


def init_services(app) -> Services:
    config = app.config
    repositories = build_repositories(config["STORAGE_BACKEND"])

    services = Services(
        repositories=repositories,
        codes=CodeStore(
            repositories.codes,
            ttl_seconds=config["OTP_TTL_SECONDS"],
            length=config["OTP_LENGTH"],
            max_attempts=config["OTP_MAX_ATTEMPTS"],
        ),
        tokens=TokenService(),
        users=UserDirectory(
            repositories.users,
            admin_emails=config.get("ADMIN_EMAILS", ()),
            admin_wallets=config.get("ADMIN_WALLETS", ()),
        ),
        eligibility=build_eligibility_service(config),
        ledger=VoteLedger(
            repositories.votes,
            [VotingOption.from_config(raw) for raw in config["VOTING_OPTIONS"]],
        ),
    )
    app.extensions[EXTENSION_KEY] = services
    return services


def get_services() -> Services:
    return current_app.extensions[EXTENSION_KEY]
