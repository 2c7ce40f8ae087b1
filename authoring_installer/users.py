from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from passlib.context import CryptContext

from .errors import ProvisioningError
from .lib.docstore import DocumentStore
from .run_state import RunState

logger = logging.getLogger(__name__)

USER_MODEL = "user"
FAILED = "Failed to create admin user account. Please check the console output."

SUPER_ROLE = "Super Admin"
FULL_SCOPE = "*"

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, encoded: str) -> bool:
    return pwd_context.verify(password, encoded)


@dataclass(frozen=True)
class User:
    id: str
    email: str
    tenant_id: str
    auth: str = "local"
    roles: List[str] = field(default_factory=list)
    permissions: List[str] = field(default_factory=list)

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> "User":
        return cls(
            id=str(doc["_id"]),
            email=str(doc["email"]),
            tenant_id=str(doc["_tenantId"]),
            auth=str(doc.get("auth") or "local"),
            roles=list(doc.get("roles") or []),
            permissions=list(doc.get("permissions") or []),
        )

    @property
    def is_super(self) -> bool:
        return FULL_SCOPE in self.permissions


class UserManager:
    def __init__(self, db: DocumentStore) -> None:
        self.db = db

    def retrieve(self, email: str) -> User | None:
        doc = self.db.find_one(USER_MODEL, {"email": email})
        return User.from_doc(doc) if doc else None

    def delete_by_email(self, email: str) -> int:
        return self.db.destroy(USER_MODEL, {"email": email})

    def delete(self, user_id: str) -> int:
        return self.db.destroy(USER_MODEL, {"_id": user_id})

    def register_local(self, *, email: str, password: str, tenant_id: str) -> User:
        if not password:
            raise ValueError("A password is required")
        if self.db.find_one(USER_MODEL, {"email": email}):
            raise ValueError(f"An account already exists for {email}")
        doc = self.db.create(
            USER_MODEL,
            {
                "email": email,
                "password": hash_password(password),
                "auth": "local",
                "_tenantId": tenant_id,
                "roles": [],
                "permissions": [],
            },
        )
        return User.from_doc(doc)

    def grant_super_permissions(self, user_id: str) -> None:
        n = self.db.update(USER_MODEL, {"_id": user_id}, {"roles": [SUPER_ROLE], "permissions": [FULL_SCOPE]})
        if n != 1:
            raise LookupError(f"No user with id {user_id}")


class UserProvisioner:
    def __init__(self, manager: UserManager) -> None:
        self.manager = manager

    def provision(self, email: str, password: str, tenant_id: str, *, run_state: RunState) -> User:
        try:
            removed = self.manager.delete_by_email(email)
        except Exception as e:
            raise ProvisioningError(f"Removing existing account {email} failed: {e}", message=FAILED) from e
        if removed:
            logger.info("Removed %d existing account(s) for %s", removed, email)

        try:
            user = self.manager.register_local(email=email, password=password, tenant_id=tenant_id)
        except Exception as e:
            raise ProvisioningError(f"Registering {email} failed: {e}", message=FAILED) from e
        run_state.user = user

        try:
            self.manager.grant_super_permissions(user.id)
        except Exception as e:
            raise ProvisioningError(f"Granting permissions to {email} failed: {e}", message=FAILED) from e

        logger.info("Super user %s created under tenant %s", email, tenant_id)
        return user
