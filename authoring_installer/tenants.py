from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from .errors import ConflictError, InstallAborted, ProvisioningError
from .lib.docstore import DocumentStore
from .lib.prompt import Prompter
from .modes import InstallMode
from .run_state import RunState

logger = logging.getLogger(__name__)

TENANT_MODEL = "tenant"
FAILED = "Failed to create master tenant. Please check the console output."


@dataclass(frozen=True)
class Tenant:
    id: str
    name: str
    display_name: str
    is_master: bool = False
    database: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> "Tenant":
        return cls(
            id=str(doc["_id"]),
            name=str(doc["name"]),
            display_name=str(doc.get("displayName") or doc["name"]),
            is_master=bool(doc.get("isMaster", False)),
            database=dict(doc.get("database") or {}),
        )


class TenantManager:
    def __init__(self, db: DocumentStore) -> None:
        self.db = db

    def retrieve(self, name: str) -> Optional[Tenant]:
        doc = self.db.find_one(TENANT_MODEL, {"name": name})
        return Tenant.from_doc(doc) if doc else None

    def retrieve_master(self) -> Optional[Tenant]:
        doc = self.db.find_one(TENANT_MODEL, {"isMaster": True})
        return Tenant.from_doc(doc) if doc else None

    def create(self, *, name: str, display_name: str, is_master: bool, database: Dict[str, Any]) -> Tenant:
        if self.db.find_one(TENANT_MODEL, {"name": name}):
            raise ValueError(f"Tenant '{name}' already exists")
        if is_master and self.db.find_one(TENANT_MODEL, {"isMaster": True}):
            raise ValueError("A master tenant already exists")
        doc = self.db.create(
            TENANT_MODEL,
            {
                "name": name,
                "displayName": display_name,
                "isMaster": is_master,
                "database": dict(database),
            },
        )
        return Tenant.from_doc(doc)

    def delete(self, tenant_id: str) -> int:
        return self.db.destroy(TENANT_MODEL, {"_id": tenant_id})


class TenantProvisioner:
    """Creates the master tenant, resolving a clash with an earlier install first.

    ``on_created`` runs right after creation (the install saves the tenant's
    name and id to its configuration there); the tenant is already recorded in
    the run state by then, so a failure in it is rolled back.
    """

    def __init__(
        self,
        manager: TenantManager,
        *,
        mode: InstallMode,
        prompter: Optional[Prompter] = None,
        on_created: Optional[Callable[[Tenant], None]] = None,
    ) -> None:
        if mode.is_interactive and prompter is None:
            raise ValueError("interactive provisioning needs a prompter")
        self.manager = manager
        self.mode = mode
        self.prompter = prompter
        self.on_created = on_created

    def provision(self, tenant_name: str, display_name: str, db_info: Dict[str, Any], *, run_state: RunState) -> Tenant:
        try:
            existing = self.manager.retrieve(tenant_name) or self.manager.retrieve_master()
        except Exception as e:
            raise ProvisioningError(f"Tenant lookup failed: {e}", message=FAILED) from e

        if existing is not None:
            self._resolve_conflict(existing, tenant_name)

        return self._create(tenant_name, display_name, db_info, run_state=run_state)

    def _resolve_conflict(self, existing: Tenant, tenant_name: str) -> None:
        if not self.mode.is_interactive:
            if existing.name == tenant_name:
                msg = f"Tenant '{existing.name}' already exists, automatic install cannot continue."
            else:
                msg = f"Master tenant '{existing.name}' already exists, automatic install cannot continue."
            raise ConflictError(msg, message=msg)

        self.prompter.say("Tenant already exists. It must be deleted for install to continue.")  # type: ignore[union-attr]
        if not self.prompter.confirm("Continue? (Y/n)", default=True):  # type: ignore[union-attr]
            raise InstallAborted(f"Operator declined deleting tenant '{existing.name}'")

        self.purge()

    def purge(self) -> None:
        """Destroy every record of every kind the store currently knows about."""
        db = self.manager.db
        try:
            for model in db.model_names():
                db.destroy(model, None)
        except Exception as e:
            raise ProvisioningError(f"Failed to delete previous install: {e}", message=FAILED) from e
        logger.info("Purged previous installation data")

    def _create(self, tenant_name: str, display_name: str, db_info: Dict[str, Any], *, run_state: RunState) -> Tenant:
        if self.prompter is not None:
            self.prompter.say(f"Creating file system for master tenant ({tenant_name})")
        try:
            tenant = self.manager.create(
                name=tenant_name,
                display_name=display_name,
                is_master=True,
                database=db_info,
            )
        except Exception as e:
            raise ProvisioningError(f"Tenant creation failed: {e}", message=FAILED) from e

        run_state.tenant = tenant
        logger.info("Master tenant (%s) was created with id %s", tenant.name, tenant.id)

        if self.on_created is not None:
            try:
                self.on_created(tenant)
            except Exception as e:
                raise ProvisioningError(f"Saving tenant configuration failed: {e}", message=FAILED) from e
        return tenant
