from __future__ import annotations

import logging

from ..config_collector import collect, collect_credentials
from ..config_persister import save_config
from ..config_schema import DEFAULT_FRAMEWORK_REPOSITORY, config_schema
from ..errors import DependencyError
from ..modes import Phase
from ..pipeline import InstallCtx
from ..run_state import RunState

logger = logging.getLogger(__name__)

FRAMEWORK_LOOKUP_FAILED = "Failed to get latest framework version"


class ConfigureEnvironmentStep:
    step_id = "10_configure_environment"
    phase = Phase.COLLECTING_CONFIG

    def run(self, ctx: InstallCtx, state: RunState) -> None:
        if ctx.interactive:
            ctx.prompter.say(
                "We need to configure the tool before install.\n"
                "Just press ENTER to accept the default value (in brackets)."
            )
        else:
            ctx.prompter.say("Now setting configuration items.")

        # Needed before the schema exists: it supplies the frameworkRevision default.
        repository = str(ctx.overrides.get("frameworkRepository") or DEFAULT_FRAMEWORK_REPOSITORY)
        try:
            latest = ctx.framework.latest_tag(repository)
        except DependencyError:
            raise
        except Exception as e:
            raise DependencyError(str(e), message=FRAMEWORK_LOOKUP_FAILED) from e

        record = collect(
            config_schema(latest),
            mode=ctx.mode,
            overrides=ctx.overrides,
            prompter=ctx.prompter,
        )
        logger.info("Configuration: %s", record.redacted())

        if not ctx.interactive:
            # Nothing may be installed or created for a run that cannot finish.
            state.credentials = collect_credentials(mode=ctx.mode, overrides=ctx.overrides)

        save_config(record, root_dir=ctx.root_dir)
        state.config = record
