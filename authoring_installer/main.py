from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from .application import Application
from .config_collector import ConfigRecord
from .config_schema import all_setting_names
from .errors import InstallError, ValidationError
from .lib.docstore import read_document_file
from .lib.framework import FrameworkSource, GitFramework
from .lib.prompt import Prompter
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .modes import InstallMode, decide_mode
from .pipeline import AppFactory, InstallCtx, PipelineResult, run_pipeline, summarize
from .run_state import RunState
from .steps import (
    BuildFrontendStep,
    ConfigureEnvironmentStep,
    CreateSuperUserStep,
    CreateTenantStep,
    InstallFrameworkStep,
)

logger = logging.getLogger(__name__)

FRAMEWORK_DIRNAME = "adapt_framework"
DEFAULT_BUILD_COMMAND = ("grunt", "build:prod")


def build_steps():
    return [
        ConfigureEnvironmentStep(),
        InstallFrameworkStep(),
        CreateTenantStep(),
        CreateSuperUserStep(),
        BuildFrontendStep(),
    ]


def confirm_start(mode: InstallMode, prompter: Prompter) -> bool:
    if not mode.is_interactive:
        prompter.say("This script will install the application. Please wait ...")
        return True
    prompter.say("This script will install the application.\nWould you like to continue?")
    return prompter.confirm("Y/n", default=True)


def run(
    *,
    mode: InstallMode,
    root_dir: str | Path = ".",
    overrides: Optional[Dict[str, Any]] = None,
    prompter: Optional[Prompter] = None,
    framework: Optional[FrameworkSource] = None,
    app_factory: Optional[AppFactory] = None,
    build_command: Optional[Sequence[str]] = DEFAULT_BUILD_COMMAND,
    state: Optional[RunState] = None,
) -> PipelineResult:
    """Run the installer once. PersistenceError from the first config save propagates."""

    root = Path(root_dir).resolve()
    prompter = prompter or Prompter()
    state = state or RunState()

    if not confirm_start(mode, prompter):
        return PipelineResult(exit_code=0, message="Bye!", phase=state.phase)

    def default_app_factory(cfg: ConfigRecord) -> Application:
        return Application.from_config(cfg, root_dir=root)

    ctx = InstallCtx(
        mode=mode,
        root_dir=root,
        prompter=prompter,
        framework=framework or GitFramework(root / FRAMEWORK_DIRNAME),
        app_factory=app_factory or default_app_factory,
        overrides=dict(overrides or {}),
        build_command=build_command,
    )

    result = run_pipeline(ctx=ctx, steps=build_steps(), state=state)
    logger.info("Run summary: %s", summarize(result, state))
    return result


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="authoring-installer",
        description="Install the authoring tool: configuration, framework, master tenant and super user.",
    )
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to installer log")
    p.add_argument("--root", default=".", help="Install root (where .env and conf/ are written)")
    p.add_argument("--overrides", default=None, help="JSON or YAML file of setting values")
    p.add_argument(
        "--interactive",
        action="store_true",
        help="Prompt for anything not given, even when other arguments are present",
    )

    settings = p.add_argument_group("settings", "Any setting the installer would otherwise prompt for")
    for name in all_setting_names():
        settings.add_argument(f"--{name}", dest=name, default=None, metavar="VALUE")
    return p


def collect_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    if args.overrides:
        path = Path(args.overrides)
        if not path.is_file():
            raise ValidationError(f"override file {path} not found", message=f"Override file not found: {path}")
        overrides.update(read_document_file(path))
    for name in all_setting_names():
        value = getattr(args, name, None)
        if value is not None:
            overrides[name] = value
    return overrides


def main(argv: Optional[list[str]] = None) -> int:
    raw = sys.argv[1:] if argv is None else list(argv)
    args = build_parser().parse_args(raw)
    mode = decide_mode(raw, force_interactive=bool(args.interactive))

    configure_logging(log_path=args.log, also_console=not mode.is_interactive)
    logger.info("Starting install (mode=%s)", mode.value)

    try:
        overrides = collect_overrides(args)
        result = run(mode=mode, root_dir=args.root, overrides=overrides)
    except InstallError as e:
        logger.error("Install stopped: %s", e)
        print(f"\n{e.message}\n")
        return 1
    except KeyboardInterrupt:
        print("\nInstall interrupted.\n")
        return 130
    except Exception as e:
        logger.exception("Installer failed")
        print(f"ERROR: {e}")
        print("\nInstall was unsuccessful. Please check the console output.\n")
        return 1

    print(f"\n{result.message}\n")
    return result.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
