from __future__ import annotations

import logging

from ..config_collector import collect
from ..config_persister import save_config
from ..config_schema import TENANT_SCHEMA
from ..errors import PersistenceError, ProvisioningError
from ..modes import Phase
from ..pipeline import InstallCtx
from ..run_state import RunState
from ..tenants import FAILED, Tenant, TenantProvisioner

logger = logging.getLogger(__name__)


class CreateTenantStep:
    step_id = "30_create_tenant"
    phase = Phase.PROVISIONING_TENANT

    def run(self, ctx: InstallCtx, state: RunState) -> None:
        cfg = state.config
        if cfg is None:
            raise RuntimeError("configuration missing; run 10_configure_environment first")

        if ctx.interactive:
            ctx.prompter.say(
                "Now we need to create the master tenant.\n"
                "Just press ENTER to accept the default value (in brackets)."
            )
        else:
            ctx.prompter.say("Creating master tenant")

        app = ctx.app_factory(cfg)
        state.app = app
        app.start()

        answers = collect(TENANT_SCHEMA, mode=ctx.mode, overrides=ctx.overrides, prompter=ctx.prompter, message=FAILED)

        def save_tenant_to_config(tenant: Tenant) -> None:
            ctx.prompter.say(f"Master tenant ({tenant.name}) was created.")
            ctx.prompter.say("Now saving configuration")
            cfg.set("masterTenantName", tenant.name)
            cfg.set("masterTenantID", tenant.id)
            try:
                save_config(cfg, root_dir=ctx.root_dir)
            except PersistenceError as e:
                # Past the first save, a write failure is an ordinary step failure.
                raise ProvisioningError(str(e), message=FAILED) from e

        provisioner = TenantProvisioner(
            app.tenants,
            mode=ctx.mode,
            prompter=ctx.prompter,
            on_created=save_tenant_to_config,
        )
        provisioner.provision(
            str(answers.get("name")),
            str(answers.get("displayName")),
            cfg.db_info,
            run_state=state,
        )
