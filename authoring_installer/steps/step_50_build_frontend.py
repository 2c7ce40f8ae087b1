from __future__ import annotations

import logging
import shutil

from ..lib.command import format_argv, run_command
from ..modes import Phase
from ..pipeline import InstallCtx
from ..run_state import RunState

logger = logging.getLogger(__name__)


class BuildFrontendStep:
    step_id = "50_build_frontend"
    phase = Phase.FINALIZING

    def run(self, ctx: InstallCtx, state: RunState) -> None:
        ctx.prompter.say("Compiling the web application, please wait a moment ... ")
        if not ctx.build_command:
            return

        argv = list(ctx.build_command)
        cmd = format_argv(argv)
        if shutil.which(argv[0]) is None:
            logger.warning("%s not found on PATH; skipping front-end build", argv[0])
            ctx.prompter.say(f"Install will continue. Try running {cmd} after installation completes.")
            return

        r = run_command(argv, check=False, cwd=str(ctx.root_dir))
        if not r.ok:
            # The application is usable without a compiled front end.
            logger.warning("%s exited with %s", cmd, r.returncode)
            ctx.prompter.say(f"{cmd} failed. Install will continue. Try running {cmd} after installation completes.")
            return
        ctx.prompter.say("The web application was compiled and is now ready to use.")
