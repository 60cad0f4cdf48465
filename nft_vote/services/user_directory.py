import logging
import threading
from typing import Iterable, Optional

from ..models import User
from ..models.user import AUTH_EMAIL, AUTH_WALLET, ROLE_ADMIN, ROLE_VOTER
from ..storage import DuplicateKeyError, UserRepository
from .code_store import normalize_email

logger = logging.getLogger(__name__)


class UserDirectory:
    """Users keyed by id, with email and wallet lookups."""

    def __init__(
        self,
        repository: UserRepository,
        admin_emails: Iterable[str] = (),
        admin_wallets: Iterable[str] = (),
    ):
        self._repo = repository
        self._admin_emails = {normalize_email(e) for e in admin_emails}
        self._admin_wallets = set(admin_wallets)
        self._create_lock = threading.Lock()

    def role_for(self, email: Optional[str], wallet_address: Optional[str]) -> str:
        if email and normalize_email(email) in self._admin_emails:
            return ROLE_ADMIN
        if wallet_address and wallet_address in self._admin_wallets:
            return ROLE_ADMIN
        return ROLE_VOTER

    def create_user(
        self,
        auth_method: str,
        email: Optional[str] = None,
        wallet_address: Optional[str] = None,
        role: Optional[str] = None,
    ) -> User:
        """
        Store a new user. Does not look for an existing user with the same
        email or wallet first; use ``get_or_create`` for login flows.
        """
        email = normalize_email(email) if email else None
        user = User(
            auth_method=auth_method,
            email=email,
            wallet_address=wallet_address,
            role=role or self.role_for(email, wallet_address),
        )
        self._repo.add(user)
        logger.info("Created user %s via %s", user.id, auth_method)
        return user

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self._repo.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return self._repo.get_by_email(normalize_email(email))

    def get_by_wallet(self, wallet_address: str) -> Optional[User]:
        return self._repo.get_by_wallet(wallet_address)

    def get_or_create_by_email(self, email: str) -> User:
        return self._get_or_create(
            lambda: self.get_by_email(email),
            lambda: self.create_user(AUTH_EMAIL, email=email),
        )

    def get_or_create_by_wallet(self, wallet_address: str) -> User:
        return self._get_or_create(
            lambda: self.get_by_wallet(wallet_address),
            lambda: self.create_user(AUTH_WALLET, wallet_address=wallet_address),
        )

    def _get_or_create(self, lookup, create) -> User:
        with self._create_lock:
            user = lookup()
            if user is not None:
                return user
            try:
                return create()
            except DuplicateKeyError:
                # Another process created it first
                user = lookup()
                if user is None:
                    raise
                return user

    def count(self) -> int:
        return self._repo.count()

    def count_by_auth_method(self) -> dict[str, int]:
        counts = {AUTH_EMAIL: 0, AUTH_WALLET: 0}
        counts.update(self._repo.count_by_auth_method())
        return counts
