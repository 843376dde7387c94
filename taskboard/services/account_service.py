"""
Account service: admin-side account management.

Two operations touch both collections and are NOT atomic across them:

- delete_account removes the account's tasks first, then the account. A
  crash in between leaves an account with no tasks, which can simply be
  deleted again.
- rename_email_and_propagate updates the account first, then rewrites the
  tasks. A crash in between leaves tasks on the old email; the error is
  logged with both emails so the rewrite can be replayed.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..models.account import ROLES, Account, Role, normalize_email
from ..stores.accounts import AccountStore
from ..stores.document_store import Document, DuplicateKeyError
from ..stores.tasks import TaskStore
from ..utils.exceptions import EmailConflict, NotFound, StoreError, ValidationFailure
from ..utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class RenameResult:
    updated_todos: int
    account: Account


def _rename_rewriter(old_email: str, new_email: str):
    """Rewrite only the fields of a task document that reference old_email."""

    def rewrite(doc: Document) -> Optional[Document]:
        changed = False
        if normalize_email(doc.get("user_email", "")) == old_email:
            doc["user_email"] = new_email
            changed = True
        if normalize_email(doc.get("assign_to", "")) == old_email:
            doc["assign_to"] = new_email
            changed = True
        return doc if changed else None

    return rewrite


class AccountService:
    def __init__(self, accounts: AccountStore, tasks: TaskStore):
        self.accounts = accounts
        self.tasks = tasks

    def list_accounts(self) -> List[Account]:
        return self.accounts.list()

    def get_account(self, account_id: str) -> Account:
        account = self.accounts.get(account_id)
        if account is None:
            raise NotFound("User not found")
        return account

    def get_by_email(self, email: str) -> Account:
        if not normalize_email(email):
            raise ValidationFailure("Missing email parameter")
        account = self.accounts.find_by_email(email)
        if account is None:
            raise NotFound("User not found")
        return account

    def update_account(
        self, account_id: str, email: Optional[str] = None, role: Optional[Role] = None
    ) -> Account:
        """
        Update email and/or role. Does not touch tasks: callers changing the
        email should use rename_email_and_propagate instead.
        """
        changes: Dict[str, Any] = {}
        if email is not None:
            if not normalize_email(email):
                raise ValidationFailure("Email cannot be empty")
            changes["email"] = normalize_email(email)
        if role is not None:
            if role not in ROLES:
                raise ValidationFailure(f"Invalid role: {role}")
            changes["role"] = role

        try:
            account = self.accounts.update(account_id, changes)
        except DuplicateKeyError:
            raise EmailConflict()
        if account is None:
            raise NotFound("User not found")
        logger.info("Account updated", account_id=account_id, fields=sorted(changes))
        return account

    def rename_email_and_propagate(
        self, old_email: str, new_email: str, new_role: Optional[Role] = None
    ) -> RenameResult:
        """
        Move an account from old_email to new_email and repoint every task
        whose owner or assignee is old_email.
        """
        old = normalize_email(old_email)
        new = normalize_email(new_email)
        if not old or not new:
            raise ValidationFailure("Both oldEmail and newEmail are required")
        if new_role is not None and new_role not in ROLES:
            raise ValidationFailure(f"Invalid role: {new_role}")

        account = self.accounts.find_by_email(old)
        if account is None:
            raise NotFound("User not found")

        changes: Dict[str, Any] = {"email": new}
        if new_role:
            changes["role"] = new_role
        try:
            updated = self.accounts.update(account.id, changes)
        except DuplicateKeyError:
            raise EmailConflict()
        if updated is None:
            # deleted between lookup and update
            raise NotFound("User not found")

        try:
            updated_todos = self.tasks.rewrite(_rename_rewriter(old, new))
        except StoreError:
            logger.error(
                "Rename propagation incomplete: account moved, tasks not rewritten",
                account_id=account.id,
                old_email=old,
                new_email=new,
            )
            raise

        logger.info(
            "Account email renamed",
            account_id=account.id,
            old_email=old,
            new_email=new,
            updated_todos=updated_todos,
        )
        return RenameResult(updated_todos=updated_todos, account=updated)

    def delete_account(self, account_id: str) -> int:
        """Delete the account and every task it owns; returns the task count."""
        account = self.get_account(account_id)
        deleted_todos = self.tasks.delete_by_owner(account.email)
        if self.accounts.delete(account_id) is None:
            raise NotFound("User not found")
        logger.info(
            "Account deleted",
            account_id=account_id,
            email=account.email,
            deleted_todos=deleted_todos,
        )
        return deleted_todos
