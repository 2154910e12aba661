from datetime import datetime, timedelta, timezone

import pytest

from coa_processor.entitlement.exceptions import (
    NoCreditsError,
    PaymentRequiredError,
    SubscriptionRequiredError,
)
from coa_processor.entitlement.ledger import CreditLedger
from coa_processor.entitlement.models import Account, DownloadOption
from coa_processor.entitlement.policy import EntitlementPolicy
from coa_processor.rendering.models import EntitlementDecision
from coa_processor.storage.memory import InMemoryDocumentStore
from coa_processor.storage.repositories import AccountRepository

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def _subscriber(remaining: int = 5, period_end: datetime | None = None) -> Account:
    return Account(
        user_id="u1",
        subscription_status="active",
        downloads_remaining=remaining,
        current_period_end=period_end,
    )


def _policy() -> EntitlementPolicy:
    return EntitlementPolicy(clock=lambda: NOW)


class TestEntitlementPolicy:
    def test_free_is_watermarked(self) -> None:
        decision = _policy().decide(None, DownloadOption.FREE)
        assert decision == EntitlementDecision(watermarked=True, use_custom_header=False)

    def test_one_time_requires_payment(self) -> None:
        with pytest.raises(PaymentRequiredError):
            _policy().decide(None, DownloadOption.ONE_TIME)

    def test_paid_one_time_is_clean_without_custom_header(self) -> None:
        decision = _policy().decide(None, DownloadOption.ONE_TIME, payment_confirmed=True)
        assert decision == EntitlementDecision(watermarked=False, use_custom_header=False)

    def test_subscription_is_clean_with_custom_header(self) -> None:
        decision = _policy().decide(_subscriber(), DownloadOption.SUBSCRIPTION)
        assert decision == EntitlementDecision(watermarked=False, use_custom_header=True)

    @pytest.mark.parametrize("status", ["none", "canceled", "past_due"])
    def test_subscription_requires_active_status(self, status: str) -> None:
        account = Account(user_id="u1", subscription_status=status, downloads_remaining=10)
        with pytest.raises(SubscriptionRequiredError):
            _policy().decide(account, DownloadOption.SUBSCRIPTION)

    def test_subscription_requires_account(self) -> None:
        with pytest.raises(SubscriptionRequiredError):
            _policy().decide(None, DownloadOption.SUBSCRIPTION)

    def test_subscription_requires_credits(self) -> None:
        with pytest.raises(NoCreditsError):
            _policy().decide(_subscriber(remaining=0), DownloadOption.SUBSCRIPTION)

    def test_lapsed_period_has_no_credits(self) -> None:
        account = _subscriber(remaining=30, period_end=NOW - timedelta(days=1))
        with pytest.raises(NoCreditsError):
            _policy().decide(account, DownloadOption.SUBSCRIPTION)


class TestCreditLedger:
    def _ledger(self, user: dict[str, object]) -> tuple[CreditLedger, InMemoryDocumentStore]:
        store = InMemoryDocumentStore({"users": {"u1": user}})
        return CreditLedger(AccountRepository(store), clock=lambda: NOW), store

    def test_consume_moves_one_credit(self) -> None:
        ledger, store = self._ledger({
            "subscriptionStatus": "active",
            "downloadsRemaining": 60,
            "downloadsUsedThisMonth": 0,
        })
        account = ledger.consume("u1")
        assert (account.downloads_remaining, account.downloads_used_this_month) == (59, 1)
        stored = store.get("users", "u1")
        assert stored is not None
        assert stored["downloadsRemaining"] == 59
        assert stored["downloadsUsedThisMonth"] == 1
        assert stored["updatedAt"] == NOW.isoformat()

    def test_consume_without_credits_raises(self) -> None:
        ledger, store = self._ledger({"subscriptionStatus": "active", "downloadsRemaining": 0})
        with pytest.raises(NoCreditsError):
            ledger.consume("u1")
        assert store.get("users", "u1") == {"subscriptionStatus": "active", "downloadsRemaining": 0}

    def test_consume_for_non_subscriber_raises(self) -> None:
        ledger, _ = self._ledger({"subscriptionStatus": "none", "downloadsRemaining": 5})
        with pytest.raises(SubscriptionRequiredError):
            ledger.consume("u1")

    def test_consume_for_unknown_user_raises(self) -> None:
        ledger, _ = self._ledger({})
        with pytest.raises(SubscriptionRequiredError):
            ledger.consume("someone-else")

    def test_renew_resets_monthly_allowance(self) -> None:
        ledger, store = self._ledger({
            "subscriptionStatus": "active",
            "downloadsRemaining": 2,
            "downloadsUsedThisMonth": 58,
        })
        account = ledger.renew("u1")
        assert (account.downloads_remaining, account.downloads_used_this_month) == (60, 0)
        stored = store.get("users", "u1")
        assert stored is not None
        assert stored["downloadsRemaining"] == 60
