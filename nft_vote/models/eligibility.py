from dataclasses import dataclass, field
from typing import Any, Optional

SOURCE_PRIMARY = "primary-chain-indexer"
SOURCE_FALLBACK = "fallback-chain-indexer"
SOURCE_PURCHASES = "purchase-records"
SOURCE_NONE = "none"
SOURCE_DEMO = "demo-fixture"


@dataclass
class EligibilityResult:
    nft_count: int
    policy_id: Optional[str]
    source: str
    assets: list[dict[str, Any]] = field(default_factory=list)

    @property
    def eligible(self) -> bool:
        return self.nft_count > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "eligible": self.eligible,
            "nftCount": self.nft_count,
            "policyId": self.policy_id,
            "source": self.source,
            "assets": self.assets,
        }
