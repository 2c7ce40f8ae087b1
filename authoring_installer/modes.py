from __future__ import annotations

import enum
from typing import Optional, Sequence


class InstallMode(enum.Enum):
    INTERACTIVE = "interactive"
    UNATTENDED = "unattended"

    @property
    def is_interactive(self) -> bool:
        return self is InstallMode.INTERACTIVE


def decide_mode(argv: Optional[Sequence[str]], *, force_interactive: bool = False) -> InstallMode:
    """Interactive with no arguments at all; unattended as soon as any is given."""
    if force_interactive or not argv:
        return InstallMode.INTERACTIVE
    return InstallMode.UNATTENDED


class Phase(enum.Enum):
    COLLECTING_CONFIG = "CollectingConfig"
    INSTALLING_ARTIFACT = "InstallingArtifact"
    PROVISIONING_TENANT = "ProvisioningTenant"
    PROVISIONING_USER = "ProvisioningUser"
    FINALIZING = "Finalizing"
    DONE = "Done"
    ABORTED = "Aborted"
