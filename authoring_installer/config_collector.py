from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Mapping, Optional

from .config_schema import SUPER_USER_SCHEMA, InvalidValue, Schema, Setting
from .errors import ValidationError
from .lib.prompt import Prompter
from .modes import InstallMode

logger = logging.getLogger(__name__)

REDACTED = "********"


@dataclass
class ConfigRecord:
    """Resolved settings for one install run."""

    values: Dict[str, Any] = field(default_factory=dict)
    sensitive: FrozenSet[str] = frozenset()

    def get(self, name: str, default: Any = None) -> Any:
        return self.values.get(name, default)

    def set(self, name: str, value: Any) -> None:
        self.values[name] = value

    def as_dict(self) -> Dict[str, Any]:
        return dict(self.values)

    def redacted(self) -> Dict[str, Any]:
        return {k: (REDACTED if k in self.sensitive and v not in (None, "") else v) for k, v in self.values.items()}

    @property
    def db_info(self) -> Dict[str, Any]:
        return {
            "dbName": self.get("dbName"),
            "dbHost": self.get("dbHost"),
            "dbUser": self.get("dbUser"),
            "dbPass": self.get("dbPass"),
            "dbPort": self.get("dbPort"),
        }


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _shown(setting: Setting, value: Any) -> Any:
    return REDACTED if setting.sensitive else value


def _default_text(setting: Setting) -> Optional[str]:
    d = setting.default
    if d is None:
        return None
    if setting.type == "boolean":
        return "Y" if d else "N"
    return str(d)


def _resolve_default(setting: Setting) -> Any:
    if _is_blank(setting.default):
        if setting.required:
            raise InvalidValue(f"{setting.name} is required")
        return setting.default if setting.default is not None else ""
    return setting.coerce(setting.default)


def _resolve_unattended(setting: Setting, overrides: Mapping[str, Any]) -> Any:
    raw = overrides.get(setting.name)
    if _is_blank(raw):
        return _resolve_default(setting)
    return setting.coerce(raw)


def _resolve_interactive(setting: Setting, overrides: Mapping[str, Any], prompter: Prompter) -> Any:
    raw = overrides.get(setting.name)
    if not _is_blank(raw):
        try:
            return setting.coerce(raw)
        except InvalidValue as e:
            prompter.say(f"Ignoring invalid value for {setting.name}: {e}")

    while True:
        entered = prompter.ask(setting.description, default=_default_text(setting), hidden=setting.sensitive)
        try:
            if _is_blank(entered):
                return _resolve_default(setting)
            return setting.coerce(entered)
        except InvalidValue as e:
            prompter.say(f"Invalid input: {e}")


def collect(
    schema: Schema,
    *,
    mode: InstallMode,
    overrides: Optional[Mapping[str, Any]] = None,
    prompter: Optional[Prompter] = None,
    message: Optional[str] = None,
) -> ConfigRecord:
    """Resolve every setting of ``schema``: override, then operator entry, then default.

    Unattended runs never prompt; a value that cannot be resolved raises
    ValidationError.
    """

    overrides = overrides or {}
    if mode.is_interactive and prompter is None:
        raise ValueError("interactive collection needs a prompter")

    record = ConfigRecord(sensitive=frozenset(s.name for s in schema if s.sensitive))
    for setting in schema:
        if mode.is_interactive:
            value = _resolve_interactive(setting, overrides, prompter)  # type: ignore[arg-type]
        else:
            try:
                value = _resolve_unattended(setting, overrides)
            except InvalidValue as e:
                raise ValidationError(str(e), message=message) from e
        record.set(setting.name, value)
        logger.debug("Resolved %s=%r", setting.name, _shown(setting, value))

    return record


def collect_credentials(
    *,
    mode: InstallMode,
    overrides: Optional[Mapping[str, Any]] = None,
    prompter: Optional[Prompter] = None,
    message: Optional[str] = None,
) -> ConfigRecord:
    """Resolve the super user's email and password, with the retyped password matching.

    Interactive runs ask again on a mismatch; unattended runs raise ValidationError.
    """

    overrides = dict(overrides or {})
    while True:
        creds = collect(SUPER_USER_SCHEMA, mode=mode, overrides=overrides, prompter=prompter, message=message)
        if creds.get("password") == creds.get("retypePassword"):
            return creds
        if not mode.is_interactive:
            raise ValidationError("password and retypePassword do not match", message=message)
        prompter.say("Passwords do not match, please try again.")  # type: ignore[union-attr]
        # Overrides produced the mismatch; ask the operator from here on.
        overrides.pop("password", None)
        overrides.pop("retypePassword", None)
