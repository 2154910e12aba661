from datetime import datetime

from coa_processor.entitlement.models import Account
from coa_processor.rendering.models import BrandingProfile
from coa_processor.storage.base import BaseDocumentStore

COMPANY_INFO_COLLECTION = "companyInfo"
USERS_COLLECTION = "users"


class BrandingRepository:
    """Company branding profiles, one per user."""

    def __init__(self, store: BaseDocumentStore) -> None:
        self._store = store

    def find(self, user_id: str) -> BrandingProfile | None:
        data = self._store.get(COMPANY_INFO_COLLECTION, user_id)
        if data is None:
            return None
        return BrandingProfile.from_dict(data)


class AccountRepository:
    """Subscription and download credit state in the ``users`` collection."""

    def __init__(self, store: BaseDocumentStore) -> None:
        self._store = store

    def find(self, user_id: str) -> Account | None:
        data = self._store.get(USERS_COLLECTION, user_id)
        if data is None:
            return None
        return Account.from_dict(user_id, data)

    def update_usage(self, account: Account, updated_at: datetime) -> None:
        """Persist credit counters.

        Raises:
            DocumentNotFoundError: if the user document does not exist.
        """
        self._store.update(
            USERS_COLLECTION,
            account.user_id,
            {
                "downloadsRemaining": account.downloads_remaining,
                "downloadsUsedThisMonth": account.downloads_used_this_month,
                "updatedAt": updated_at.isoformat(),
            },
        )
