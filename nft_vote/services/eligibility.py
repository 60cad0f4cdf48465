"""
NFT ownership checks against external data sources.

Each checker answers for one user with a tri-state result:
an ``EligibilityResult`` with a positive count (eligible), one with a zero
count (confirmed not eligible), or ``None`` when the source could not answer.
``EligibilityService`` asks the applicable checkers in order and takes the
first answer. When nobody answers the user is not eligible.
"""

import logging
from typing import Any, Iterable, Optional, Sequence
from urllib.parse import quote

import requests

from ..models import EligibilityResult, User
from ..models.eligibility import (
    SOURCE_DEMO,
    SOURCE_FALLBACK,
    SOURCE_NONE,
    SOURCE_PRIMARY,
    SOURCE_PURCHASES,
)

logger = logging.getLogger(__name__)


class OwnershipChecker:
    """Base class for HTTP-backed ownership sources."""

    source = SOURCE_NONE
    name = "checker"
    page_size = 100
    max_pages = 50

    def __init__(
        self,
        policy_id: Optional[str],
        timeout: float = 8.0,
        session: Optional[requests.Session] = None,
    ):
        self.policy_id = policy_id
        self.timeout = timeout
        self._session = session or requests.Session()

    def applies(self, user: User) -> bool:
        raise NotImplementedError

    def configured(self) -> bool:
        return bool(self.policy_id)

    def check(self, user: User) -> Optional[EligibilityResult]:
        if not self.configured():
            logger.warning("%s is not configured; skipping", self.name)
            return None
        try:
            return self._check(user)
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            logger.error("%s returned an unexpected payload: %s", self.name, e)
            return None

    def _check(self, user: User) -> Optional[EligibilityResult]:
        raise NotImplementedError

    def _get_json(self, url: str, headers: Optional[dict] = None, params: Optional[dict] = None) -> Any:
        try:
            response = self._session.get(url, headers=headers, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("%s request failed: %s", self.name, e)
            return None

        if not response.ok:
            logger.error("%s API error: %s %s", self.name, response.status_code, response.reason)
            return None

        try:
            return response.json()
        except ValueError:
            logger.error("%s returned a non-JSON body", self.name)
            return None

    def _get_pages(self, url: str, page_params, headers: Optional[dict] = None) -> Optional[list]:
        """
        Collect a paginated list endpoint. A short page ends the listing.
        Any failed page, or more than ``max_pages`` pages, returns None.
        """
        items = []
        for n in range(self.max_pages):
            page = self._get_json(url, headers=headers, params=page_params(n))
            if page is None:
                return None
            if not isinstance(page, list):
                raise ValueError("list page expected")
            items.extend(page)
            if len(page) < self.page_size:
                return items

        logger.error("%s listing exceeded %d pages", self.name, self.max_pages)
        return None


class BlockfrostChecker(OwnershipChecker):
    """Primary chain indexer: sums policy assets across every page of the address's UTXOs."""

    source = SOURCE_PRIMARY
    name = "Blockfrost"

    def __init__(self, base_url: Optional[str], api_key: Optional[str], policy_id: Optional[str], **kwargs):
        super().__init__(policy_id, **kwargs)
        self.base_url = (base_url or "").rstrip("/")
        self.api_key = api_key

    def configured(self) -> bool:
        return bool(self.base_url and self.api_key and self.policy_id)

    def applies(self, user: User) -> bool:
        return bool(user.wallet_address)

    def _check(self, user: User) -> Optional[EligibilityResult]:
        utxos = self._get_pages(
            f"{self.base_url}/addresses/{quote(user.wallet_address)}/utxos",
            headers={"project_id": self.api_key, "Content-Type": "application/json"},
            page_params=lambda n: {"page": n + 1, "count": self.page_size},
        )
        if utxos is None:
            return None

        nft_count = 0
        assets = []
        for utxo in utxos:
            for amount in utxo.get("amount") or []:
                unit = amount.get("unit") or ""
                if unit.startswith(self.policy_id):
                    nft_count += int(amount["quantity"])
                    assets.append({"unit": unit, "quantity": amount["quantity"], "policyId": self.policy_id})

        return EligibilityResult(nft_count=nft_count, policy_id=self.policy_id, source=self.source, assets=assets)


class KoiosChecker(OwnershipChecker):
    """Free-tier chain indexer used when the primary cannot answer."""

    source = SOURCE_FALLBACK
    name = "Koios"
    page_size = 1000

    def __init__(self, base_url: Optional[str], policy_id: Optional[str], **kwargs):
        super().__init__(policy_id, **kwargs)
        self.base_url = (base_url or "").rstrip("/")

    def configured(self) -> bool:
        return bool(self.base_url and self.policy_id)

    def applies(self, user: User) -> bool:
        return bool(user.wallet_address)

    def _check(self, user: User) -> Optional[EligibilityResult]:
        assets = self._get_pages(
            f"{self.base_url}/address_assets",
            headers={"Content-Type": "application/json"},
            page_params=lambda n: {
                "_address": user.wallet_address,
                "offset": n * self.page_size,
                "limit": self.page_size,
            },
        )
        if assets is None:
            return None

        nft_count = 0
        matching = []
        for asset in assets:
            if asset.get("policy_id") == self.policy_id:
                nft_count += int(asset.get("quantity") or 0)
                matching.append(asset)

        return EligibilityResult(nft_count=nft_count, policy_id=self.policy_id, source=self.source, assets=matching)


class NmkrChecker(OwnershipChecker):
    """Purchase records looked up by email, for users without a wallet."""

    source = SOURCE_PURCHASES
    name = "NMKR"

    def __init__(self, base_url: Optional[str], api_key: Optional[str], policy_id: Optional[str], **kwargs):
        super().__init__(policy_id, **kwargs)
        self.base_url = (base_url or "").rstrip("/")
        self.api_key = api_key

    def configured(self) -> bool:
        return bool(self.base_url and self.api_key and self.policy_id)

    def applies(self, user: User) -> bool:
        return not user.wallet_address and bool(user.email)

    def _check(self, user: User) -> Optional[EligibilityResult]:
        customer = self._get_json(
            f"{self.base_url}/GetCustomerByEmail/{quote(user.email, safe='@')}",
            headers={"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"},
        )
        if customer is None:
            return None

        nft_count = 0
        matching = []
        for order in customer.get("orders") or []:
            for nft in order.get("nfts") or []:
                if nft.get("policyId") == self.policy_id:
                    nft_count += 1
                    matching.append(nft)

        return EligibilityResult(nft_count=nft_count, policy_id=self.policy_id, source=self.source, assets=matching)


class EligibilityService:
    def __init__(
        self,
        checkers: Sequence[OwnershipChecker],
        policy_id: Optional[str] = None,
        demo_mode: bool = False,
        demo_patterns: Iterable[str] = (),
    ):
        self.checkers = list(checkers)
        self.policy_id = policy_id
        self.demo_mode = demo_mode
        self.demo_patterns = [p.lower() for p in demo_patterns]

    def check(self, user: User) -> EligibilityResult:
        """First answering source wins. Never raises for upstream failures."""
        for checker in self.checkers:
            if not checker.applies(user):
                continue
            result = checker.check(user)
            if result is not None:
                logger.info(
                    "Eligibility for %s from %s: %d NFT(s)", user.id, checker.name, result.nft_count
                )
                return result

        if self._demo_allowed(user):
            logger.warning("All ownership sources unavailable; demo allowance granted to %s", user.id)
            return EligibilityResult(nft_count=1, policy_id=self.policy_id, source=SOURCE_DEMO)

        logger.warning("No ownership source could answer for %s; treating as not eligible", user.id)
        return EligibilityResult(nft_count=0, policy_id=self.policy_id, source=SOURCE_NONE)

    def _demo_allowed(self, user: User) -> bool:
        if not self.demo_mode or not user.email:
            return False
        email = user.email.lower()
        return any(pattern in email for pattern in self.demo_patterns)


def build_eligibility_service(config) -> EligibilityService:
    policy_id = config.get("TARGET_POLICY_ID")
    timeout = config.get("ORACLE_TIMEOUT_SECONDS", 8.0)
    session = requests.Session()

    checkers = [
        BlockfrostChecker(
            config.get("BLOCKFROST_BASE_URL"),
            config.get("BLOCKFROST_API_KEY"),
            policy_id,
            timeout=timeout,
            session=session,
        ),
        KoiosChecker(config.get("KOIOS_BASE_URL"), policy_id, timeout=timeout, session=session),
        NmkrChecker(
            config.get("NMKR_API_BASE_URL"),
            config.get("NMKR_API_KEY"),
            policy_id,
            timeout=timeout,
            session=session,
        ),
    ]
    if config.get("ELIGIBILITY_DEMO_MODE"):
        logger.warning("ELIGIBILITY_DEMO_MODE is enabled; do not run this in production")

    return EligibilityService(
        checkers,
        policy_id=policy_id,
        demo_mode=config.get("ELIGIBILITY_DEMO_MODE", False),
        demo_patterns=config.get("ELIGIBILITY_DEMO_PATTERNS", ()),
    )
