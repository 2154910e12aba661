from collections.abc import Callable
from datetime import datetime, timezone

from coa_processor.entitlement.exceptions import (
    NoCreditsError,
    PaymentRequiredError,
    SubscriptionRequiredError,
)
from coa_processor.entitlement.models import Account, DownloadOption
from coa_processor.rendering.models import EntitlementDecision


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class EntitlementPolicy:
    """Maps a download option and account state to render flags.

    * FREE: watermarked, standard header.
    * ONE_TIME: needs a confirmed payment; clean, standard header.
    * SUBSCRIPTION: needs an active subscription with credits left; clean,
      custom header when the company has one.
    """

    def __init__(self, clock: Callable[[], datetime] = utc_now) -> None:
        self._clock = clock

    def decide(
        self,
        account: Account | None,
        option: DownloadOption,
        payment_confirmed: bool = False,
    ) -> EntitlementDecision:
        """Return the render flags for this download.

        Raises:
            PaymentRequiredError: ONE_TIME without a confirmed payment.
            SubscriptionRequiredError: SUBSCRIPTION without an active subscription.
            NoCreditsError: SUBSCRIPTION with no credits left.
        """
        if option is DownloadOption.FREE:
            return EntitlementDecision(watermarked=True, use_custom_header=False)

        if option is DownloadOption.ONE_TIME:
            if not payment_confirmed:
                raise PaymentRequiredError("Payment must be confirmed before a one-time download")
            return EntitlementDecision(watermarked=False, use_custom_header=False)

        self.ensure_credit(account)
        return EntitlementDecision(watermarked=False, use_custom_header=True)

    def ensure_credit(self, account: Account | None) -> Account:
        if account is None or not account.is_subscriber:
            raise SubscriptionRequiredError("Active subscription required")
        if account.available_credits(self._clock()) <= 0:
            raise NoCreditsError("No download credits remaining this month")
        return account
