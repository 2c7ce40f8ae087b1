from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Tuple

DEFAULT_LOG_PATH = "logs/authoring-installer.log"
FALLBACK_LOG_NAME = "authoring-installer.log"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

_CONFIGURED_ATTR = "_authoring_installer_configured"
_PATH_ATTR = "_authoring_installer_log_path"


def _open_log_file(log_path: str) -> Tuple[logging.FileHandler, str]:
    try:
        Path(log_path).parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(log_path, encoding="utf-8"), log_path
    except OSError:
        fallback = str(Path.cwd() / FALLBACK_LOG_NAME)
        return logging.FileHandler(fallback, encoding="utf-8"), fallback


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = True,
) -> str:
    """Attach the installer's handlers to the root logger and return the log file used.

    Only the first call installs handlers; later calls return the same path.
    Interactive runs pass ``also_console=False`` so log lines do not interleave
    with prompts.
    """

    root = logging.getLogger()
    root.setLevel(level)
    if getattr(root, _CONFIGURED_ATTR, False):
        return getattr(root, _PATH_ATTR, log_path)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    file_handler, actual_path = _open_log_file(log_path)

    handlers: List[logging.Handler] = [file_handler]
    if also_console:
        handlers.append(logging.StreamHandler())

    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    setattr(root, _CONFIGURED_ATTR, True)
    setattr(root, _PATH_ATTR, actual_path)

    if actual_path != log_path:
        logging.getLogger(__name__).warning("Cannot write %s, logging to %s", log_path, actual_path)
    else:
        logging.getLogger(__name__).info("Logging to %s", actual_path)
    return actual_path
