from __future__ import annotations

import logging
from pathlib import Path

from .config_collector import ConfigRecord
from .errors import DependencyError
from .lib.docstore import DocumentStore
from .tenants import TenantManager
from .users import UserManager

logger = logging.getLogger(__name__)


class Application:
    """The pieces of the running application the installer talks to."""

    def __init__(self, db: DocumentStore) -> None:
        self.db = db
        self.tenants = TenantManager(db)
        self.users = UserManager(db)

    @classmethod
    def from_config(cls, config: ConfigRecord, *, root_dir: str | Path) -> "Application":
        data_root = Path(root_dir) / str(config.get("dataRoot") or "data")
        return cls(DocumentStore(data_root / f"{config.get('dbName')}.json"))

    @property
    def started(self) -> bool:
        return self.db.is_open

    def start(self) -> None:
        """Open the store; returns once the application can serve requests."""
        if self.started:
            return
        try:
            self.db.open()
        except Exception as e:
            raise DependencyError(
                f"Application failed to start: {e}",
                message="Failed to create master tenant. Please check the console output.",
            ) from e
        logger.info("Application started (store=%s)", self.db.path)
