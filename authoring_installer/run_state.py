from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from .modes import Phase

if TYPE_CHECKING:
    from .application import Application
    from .config_collector import ConfigRecord
    from .tenants import Tenant
    from .users import User


@dataclass
class RunState:
    """Everything one install run has produced so far.

    Owned by the pipeline loop. ``credentials`` is filled early by unattended
    runs so that missing super user settings fail before anything is created.
    ``tenant`` and ``user`` are only ever set by the step that created them,
    and only read back by rollback.
    """

    phase: Phase = Phase.COLLECTING_CONFIG
    config: Optional["ConfigRecord"] = None
    credentials: Optional["ConfigRecord"] = None
    app: Optional["Application"] = None
    tenant: Optional["Tenant"] = None
    user: Optional["User"] = None
    completed: List[str] = field(default_factory=list)

    def summary(self) -> Dict[str, Any]:
        return {
            "phase": self.phase.value,
            "completed": list(self.completed),
            "tenant": self.tenant.id if self.tenant else None,
            "user": self.user.id if self.user else None,
        }
