"""Account storage over the `accounts` JSON collection (unique email)."""

from pathlib import Path
from typing import Any, Dict, List, Optional

from ..models.account import Account, normalize_email
from .document_store import JsonCollection

ACCOUNTS_FILE = "accounts.json"
UNIQUE_FIELDS = ("email",)


class AccountStore:
    """Typed access to account documents. Emails are stored normalized."""

    def __init__(self, data_dir: Path):
        self.collection = JsonCollection(Path(data_dir) / ACCOUNTS_FILE)

    @staticmethod
    def _to_model(doc: Optional[Dict[str, Any]]) -> Optional[Account]:
        return Account(**doc) if doc else None

    def list(self) -> List[Account]:
        return [Account(**doc) for doc in self.collection.all()]

    def get(self, account_id: str) -> Optional[Account]:
        return self._to_model(self.collection.get(account_id))

    def find_by_email(self, email: str) -> Optional[Account]:
        wanted = normalize_email(email)
        return self._to_model(
            self.collection.find_one(lambda doc: doc.get("email") == wanted)
        )

    def insert(self, account: Account) -> Account:
        """Raises DuplicateKeyError if the email is taken."""
        doc = account.model_dump(mode="json")
        doc["email"] = normalize_email(doc["email"])
        return Account(**self.collection.insert_one(doc, unique=UNIQUE_FIELDS))

    def update(self, account_id: str, changes: Dict[str, Any]) -> Optional[Account]:
        """Raises DuplicateKeyError if a changed email belongs to another account."""
        changes = dict(changes)
        if "email" in changes:
            changes["email"] = normalize_email(changes["email"])
        return self._to_model(
            self.collection.update_one(account_id, changes, unique=UNIQUE_FIELDS)
        )

    def delete(self, account_id: str) -> Optional[Account]:
        return self._to_model(self.collection.delete_one(account_id))
