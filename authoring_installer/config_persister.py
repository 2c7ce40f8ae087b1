from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

from .config_collector import ConfigRecord
from .errors import PersistenceError

logger = logging.getLogger(__name__)

ENV_FILENAME = ".env"
CONFIG_RELPATH = Path("conf") / "config.json"

# Fixed until the application supports alternatives.
OUTPUT_PLUGIN = "adapt"
DB_TYPE = "mongoose"
AUTH_TYPE = "local"

TRANSIENT_KEYS = ("frameworkRevision",)


def _env_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def render_env(values: Dict[str, Any]) -> str:
    return "\n".join(f"{k}={_env_value(v)}" for k, v in values.items())


def structured_config(values: Dict[str, Any], *, root_dir: Path) -> Dict[str, Any]:
    config = dict(values)
    config["outputPlugin"] = OUTPUT_PLUGIN
    config["dbType"] = DB_TYPE
    config["auth"] = AUTH_TYPE
    config["root"] = str(root_dir.resolve())
    for key in TRANSIENT_KEYS:
        config.pop(key, None)
    config["useSmtp"] = bool(str(config.get("smtpService") or ""))
    return config


def _write(path: Path, text: str, *, hint: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        written = path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise PersistenceError(f"Failed to write {path}: {e}. {hint}") from e
    if written == 0:
        raise PersistenceError(f"Failed to write {path}: nothing was written. {hint}")


def save_config(record: ConfigRecord, *, root_dir: str | Path) -> None:
    """Write the record as ``.env`` and ``conf/config.json`` under ``root_dir``.

    Both files are replaced on every call. The record itself is left untouched.
    """

    root = Path(root_dir)
    values = record.as_dict()

    _write(
        root / ENV_FILENAME,
        render_env(values),
        hint="Do you have write permissions for the current directory?",
    )
    _write(
        root / CONFIG_RELPATH,
        json.dumps(structured_config(values, root_dir=root), indent=2),
        hint="Do you have write permissions for the directory?",
    )
    logger.info("Saved configuration to %s and %s", root / ENV_FILENAME, root / CONFIG_RELPATH)
