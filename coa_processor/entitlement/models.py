from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class DownloadOption(str, Enum):
    FREE = "free"
    ONE_TIME = "one_time"
    SUBSCRIPTION = "subscription"


@dataclass
class Account:
    """Download entitlement state for one user, as stored in ``users``."""

    user_id: str
    email: str | None = None
    subscription_status: str = "none"
    downloads_remaining: int = 0
    downloads_used_this_month: int = 0
    current_period_end: datetime | None = None

    @property
    def is_subscriber(self) -> bool:
        return self.subscription_status == "active"

    def available_credits(self, now: datetime) -> int:
        """Remaining credits, or zero once the billing period has lapsed."""
        if self.current_period_end is not None and self.current_period_end < now:
            return 0
        return max(self.downloads_remaining, 0)

    @classmethod
    def from_dict(cls, user_id: str, raw: dict[str, Any]) -> "Account":
        period_end = _parse_timestamp(raw.get("currentPeriodEnd"))
        return cls(
            user_id=user_id,
            email=raw.get("email"),
            subscription_status=str(raw.get("subscriptionStatus") or "none"),
            downloads_remaining=int(raw.get("downloadsRemaining") or 0),
            downloads_used_this_month=int(raw.get("downloadsUsedThisMonth") or 0),
            current_period_end=period_end,
        )


def _parse_timestamp(value: Any) -> datetime | None:
    """ISO-8601 with an optional ``Z`` suffix; naive values are taken as UTC."""
    if not value:
        return None
    parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
