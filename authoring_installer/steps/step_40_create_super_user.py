from __future__ import annotations

import logging

from ..config_collector import collect_credentials
from ..errors import ProvisioningError
from ..modes import Phase
from ..pipeline import InstallCtx
from ..run_state import RunState
from ..users import FAILED, UserProvisioner

logger = logging.getLogger(__name__)


class CreateSuperUserStep:
    step_id = "40_create_super_user"
    phase = Phase.PROVISIONING_USER

    def run(self, ctx: InstallCtx, state: RunState) -> None:
        if state.app is None or state.tenant is None:
            raise ProvisioningError("no master tenant to attach the super user to", message=FAILED)

        ctx.prompter.say(
            "Creating the super user account. "
            "This account can be used to manage everything on your authoring tool instance."
        )
        creds = state.credentials
        if creds is None:
            creds = collect_credentials(mode=ctx.mode, overrides=ctx.overrides, prompter=ctx.prompter, message=FAILED)

        UserProvisioner(state.app.users).provision(
            str(creds.get("email")),
            str(creds.get("password")),
            state.tenant.id,
            run_state=state,
        )
