from collections.abc import Callable
from datetime import datetime

from coa_processor.entitlement.exceptions import SubscriptionRequiredError
from coa_processor.entitlement.models import Account
from coa_processor.entitlement.policy import EntitlementPolicy, utc_now
from coa_processor.logging.logger import Log
from coa_processor.storage.repositories import AccountRepository

DOWNLOADS_PER_MONTH = 60


class CreditLedger:
    """Debits and renews subscriber download credits."""

    def __init__(
        self,
        accounts: AccountRepository,
        downloads_per_month: int = DOWNLOADS_PER_MONTH,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._accounts = accounts
        self._downloads_per_month = downloads_per_month
        self._clock = clock
        self._policy = EntitlementPolicy(clock=clock)

    def consume(self, user_id: str) -> Account:
        """Use one credit and return the updated account.

        Raises:
            SubscriptionRequiredError: if the user is not an active subscriber.
            NoCreditsError: if no credits are left.
        """
        account = self._policy.ensure_credit(self._accounts.find(user_id))
        account.downloads_remaining -= 1
        account.downloads_used_this_month += 1
        self._accounts.update_usage(account, updated_at=self._clock())
        Log.info(
            f"Download credit used, {account.downloads_remaining} remaining",
            user_id=user_id,
        )
        return account

    def renew(self, user_id: str) -> Account:
        """Reset the monthly allowance for an active subscriber.

        Raises:
            SubscriptionRequiredError: if the user is not an active subscriber.
        """
        account = self._accounts.find(user_id)
        if account is None or not account.is_subscriber:
            raise SubscriptionRequiredError("Active subscription required")
        account.downloads_remaining = self._downloads_per_month
        account.downloads_used_this_month = 0
        self._accounts.update_usage(account, updated_at=self._clock())
        Log.info(f"Download credits renewed to {self._downloads_per_month}", user_id=user_id)
        return account
