class EntitlementError(Exception):
    """Base exception for download entitlement checks."""


class PaymentRequiredError(EntitlementError):
    """Raised when a one-time download has no confirmed payment."""


class SubscriptionRequiredError(EntitlementError):
    """Raised when a subscription download is requested without an active subscription."""


class NoCreditsError(EntitlementError):
    """Raised when a subscriber has no download credits left this period."""
