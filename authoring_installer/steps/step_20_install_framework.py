from __future__ import annotations

import logging

from ..errors import DependencyError
from ..modes import Phase
from ..pipeline import InstallCtx
from ..run_state import RunState

logger = logging.getLogger(__name__)

FAILED = "Framework install failed. See console output for possible reasons."


class InstallFrameworkStep:
    step_id = "20_install_framework"
    phase = Phase.INSTALLING_ARTIFACT

    def run(self, ctx: InstallCtx, state: RunState) -> None:
        cfg = state.config
        if cfg is None:
            raise RuntimeError("configuration missing; run 10_configure_environment first")

        repository = str(cfg.get("frameworkRepository"))
        revision = str(cfg.get("frameworkRevision"))
        ctx.prompter.say(f"Installing the framework ({revision})")
        try:
            ctx.framework.install(repository, revision, force=True)
        except DependencyError:
            raise
        except Exception as e:
            raise DependencyError(str(e), message=FAILED) from e
        logger.info("Framework %s@%s installed", repository, revision)
