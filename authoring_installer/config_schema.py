from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

DIGITS = r"^[0-9]+$"
SLUG = r"^[A-Za-z0-9_-]+$"
NON_EMPTY = r"^.+$"
EMAIL = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

DEFAULT_AUTHORING_REPOSITORY = "https://github.com/adaptlearning/adapt_authoring.git"
DEFAULT_FRAMEWORK_REPOSITORY = "https://github.com/adaptlearning/adapt_framework.git"

_TRUE = {"y", "yes", "true", "1"}
_FALSE = {"n", "no", "false", "0", ""}


class InvalidValue(ValueError):
    pass


@dataclass(frozen=True)
class Setting:
    """One named configuration value and the rules it must satisfy."""

    name: str
    description: str
    type: str = "string"  # string|integer|boolean
    default: Any = None
    pattern: Optional[str] = None
    required: bool = False
    sensitive: bool = False

    def coerce(self, raw: Any) -> Any:
        """Validate a raw (usually textual) value and convert it to the declared type."""
        if self.type == "boolean":
            if isinstance(raw, bool):
                return raw
            text = str(raw).strip().lower()
            if text in _TRUE:
                return True
            if text in _FALSE:
                return False
            raise InvalidValue(f"{self.name}: expected y/n, got {raw!r}")

        if self.type == "integer":
            if isinstance(raw, bool):
                raise InvalidValue(f"{self.name}: expected a number")
            # Numbers from an override file go through the pattern like typed text.
            text = str(raw).strip()
            if not re.match(self.pattern or DIGITS, text):
                raise InvalidValue(f"{self.name}: expected a number, got {raw!r}")
            return int(text)

        text = "" if raw is None else str(raw).strip()
        if self.required and not text:
            raise InvalidValue(f"{self.name} is required")
        if text and self.pattern and not re.match(self.pattern, text):
            raise InvalidValue(f"{self.name}: {text if not self.sensitive else '<hidden>'} does not match {self.pattern}")
        return text


Schema = Tuple[Setting, ...]


def config_schema(latest_framework_tag: str) -> Schema:
    return (
        Setting("serverPort", "Server port", type="integer", pattern=DIGITS, default=5000),
        Setting("serverName", "Server name", default="localhost"),
        Setting("dbHost", "Database host", default="localhost"),
        Setting("dbName", "Master database name", pattern=SLUG, default="adapt-tenant-master"),
        Setting("dbPort", "Database server port", type="integer", pattern=DIGITS, default=27017),
        Setting("dbUser", "Database user", default=""),
        Setting("dbPass", "Database password", default="", sensitive=True),
        Setting("dataRoot", "Data directory path", pattern=SLUG, default="data"),
        Setting("sessionSecret", "Session secret", pattern=NON_EMPTY, default="your-session-secret", sensitive=True),
        Setting("useffmpeg", "Will ffmpeg be used? y/N", type="boolean", default=False),
        Setting(
            "smtpService",
            "Which SMTP service (if any) will be used? "
            "(see https://github.com/andris9/nodemailer-wellknown#supported-services)",
            default="none",
        ),
        Setting("smtpUsername", "SMTP username", default=""),
        Setting("smtpPassword", "SMTP password", default="", sensitive=True),
        Setting("fromAddress", "Sender email address", default=""),
        Setting("rootUrl", "The url this instance is accessed by", default="http://localhost:5000/"),
        Setting("authoringToolRepository", "Authoring Tool Repository", default=DEFAULT_AUTHORING_REPOSITORY),
        Setting("frameworkRepository", "Framework Repository", default=DEFAULT_FRAMEWORK_REPOSITORY),
        Setting(
            "frameworkRevision",
            "Framework revision to install (branchName || tags/tagName)",
            default=f"tags/{latest_framework_tag}",
        ),
    )


TENANT_SCHEMA: Schema = (
    Setting("name", "Set a unique name for your tenant", pattern=SLUG, default="master", required=True),
    Setting("displayName", "Set the display name for your tenant", default="Master", required=True),
)

SUPER_USER_SCHEMA: Schema = (
    Setting("email", "Email address", pattern=EMAIL, required=True),
    Setting("password", "Password", required=True, sensitive=True),
    Setting("retypePassword", "Retype Password", required=True, sensitive=True),
)


def all_setting_names() -> List[str]:
    names = [s.name for s in config_schema("latest")]
    names += [s.name for s in TENANT_SCHEMA]
    names += [s.name for s in SUPER_USER_SCHEMA]
    return names
