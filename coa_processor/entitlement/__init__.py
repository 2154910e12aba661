from coa_processor.entitlement.exceptions import (
    EntitlementError,
    NoCreditsError,
    PaymentRequiredError,
    SubscriptionRequiredError,
)
from coa_processor.entitlement.models import Account, DownloadOption

__all__ = [
    "Account",
    "DownloadOption",
    "EntitlementError",
    "NoCreditsError",
    "PaymentRequiredError",
    "SubscriptionRequiredError",
]
