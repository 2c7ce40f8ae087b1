"""Tests for resolving settings from overrides, prompts and defaults."""

import pytest

from authoring_installer.config_collector import REDACTED, collect, collect_credentials
from authoring_installer.config_schema import (
    SUPER_USER_SCHEMA,
    TENANT_SCHEMA,
    Setting,
    config_schema,
)
from authoring_installer.errors import ValidationError
from authoring_installer.modes import InstallMode

from conftest import ScriptedPrompter, enter

SCHEMA = config_schema("v5.1.0")


class TestUnattended:
    def test_defaults_fill_every_setting(self):
        record = collect(SCHEMA, mode=InstallMode.UNATTENDED)

        assert record.get("serverPort") == 5000
        assert record.get("dbName") == "adapt-tenant-master"
        assert record.get("dbPort") == 27017
        assert record.get("useffmpeg") is False
        assert record.get("smtpService") == "none"
        assert record.get("frameworkRevision") == "tags/v5.1.0"
        assert set(record.values) == {s.name for s in SCHEMA}

    def test_overrides_win_and_are_coerced(self):
        record = collect(
            SCHEMA,
            mode=InstallMode.UNATTENDED,
            overrides={"serverPort": "8080 ", "useffmpeg": "yes", "dbName": "tenant_one"},
        )

        assert record.get("serverPort") == 8080
        assert record.get("useffmpeg") is True
        assert record.get("dbName") == "tenant_one"

    def test_numeric_override_from_a_file(self):
        record = collect(SCHEMA, mode=InstallMode.UNATTENDED, overrides={"serverPort": 8080})
        assert record.get("serverPort") == 8080

    def test_blank_override_falls_back_to_default(self):
        record = collect(SCHEMA, mode=InstallMode.UNATTENDED, overrides={"serverName": "  "})
        assert record.get("serverName") == "localhost"

    @pytest.mark.parametrize(
        "name,value",
        [
            ("serverPort", "eighty"),
            ("serverPort", -1),
            ("dbPort", -5),
            ("dbPort", 27017.5),
            ("dbName", "bad name!"),
            ("useffmpeg", "maybe"),
        ],
    )
    def test_invalid_override_is_fatal(self, name, value):
        with pytest.raises(ValidationError) as exc:
            collect(SCHEMA, mode=InstallMode.UNATTENDED, overrides={name: value})
        assert exc.value.message == "Failed to save configuration items."

    def test_missing_required_value_is_fatal(self):
        with pytest.raises(ValidationError, match="email is required"):
            collect(SUPER_USER_SCHEMA, mode=InstallMode.UNATTENDED)

    def test_required_settings_are_never_empty(self):
        overrides = {"email": "a@b.io", "password": "pw", "retypePassword": "pw"}
        for schema in (SCHEMA, TENANT_SCHEMA, SUPER_USER_SCHEMA):
            record = collect(schema, mode=InstallMode.UNATTENDED, overrides=overrides)
            for setting in schema:
                if setting.required:
                    assert record.get(setting.name) not in (None, "")

    def test_sensitive_values_are_redacted(self):
        record = collect(SCHEMA, mode=InstallMode.UNATTENDED, overrides={"smtpPassword": "hunter2"})

        redacted = record.redacted()
        assert redacted["smtpPassword"] == REDACTED
        assert redacted["sessionSecret"] == REDACTED
        # Nothing to hide when the secret is empty.
        assert redacted["dbPass"] == ""
        assert record.get("smtpPassword") == "hunter2"


class TestInteractive:
    def test_enter_accepts_every_default(self):
        prompter = ScriptedPrompter(enter(len(SCHEMA)))

        record = collect(SCHEMA, mode=InstallMode.INTERACTIVE, prompter=prompter)

        assert record.get("serverPort") == 5000
        assert record.get("dbName") == "adapt-tenant-master"
        assert prompter.answers == []

    def test_secrets_are_asked_hidden(self):
        prompter = ScriptedPrompter(enter(len(SCHEMA)))
        collect(SCHEMA, mode=InstallMode.INTERACTIVE, prompter=prompter)

        hidden = {label for label, is_hidden in prompter.asked if is_hidden}
        assert hidden == {"Session secret", "SMTP password", "Database password"}

    def test_invalid_entry_is_asked_again(self):
        schema = (Setting("serverPort", "Server port", type="integer", default=5000),)
        prompter = ScriptedPrompter(["abc", "6000"])

        record = collect(schema, mode=InstallMode.INTERACTIVE, prompter=prompter)

        assert record.get("serverPort") == 6000
        assert len(prompter.asked) == 2
        assert "Invalid input" in prompter.output

    def test_valid_override_skips_the_prompt(self):
        prompter = ScriptedPrompter([])
        record = collect(
            TENANT_SCHEMA,
            mode=InstallMode.INTERACTIVE,
            overrides={"name": "main", "displayName": "Main"},
            prompter=prompter,
        )
        assert record.as_dict() == {"name": "main", "displayName": "Main"}
        assert prompter.asked == []

    def test_invalid_override_falls_back_to_prompt(self):
        prompter = ScriptedPrompter(["good-name", ""])
        record = collect(
            TENANT_SCHEMA,
            mode=InstallMode.INTERACTIVE,
            overrides={"name": "bad name"},
            prompter=prompter,
        )
        assert record.get("name") == "good-name"
        assert record.get("displayName") == "Master"
        assert "Ignoring invalid value for name" in prompter.output

    def test_required_value_without_default_is_asked_until_given(self):
        prompter = ScriptedPrompter(["", "admin@example.com", "pw", "pw"])

        record = collect(SUPER_USER_SCHEMA, mode=InstallMode.INTERACTIVE, prompter=prompter)

        assert record.get("email") == "admin@example.com"
        assert [label for label, _ in prompter.asked][:2] == ["Email address", "Email address"]

    def test_needs_a_prompter(self):
        with pytest.raises(ValueError):
            collect(SCHEMA, mode=InstallMode.INTERACTIVE)


class TestCredentials:
    def test_matching_passwords(self):
        creds = collect_credentials(
            mode=InstallMode.UNATTENDED,
            overrides={"email": "a@b.io", "password": "pw", "retypePassword": "pw"},
        )
        assert creds.get("email") == "a@b.io"

    def test_mismatch_is_fatal_when_unattended(self):
        with pytest.raises(ValidationError, match="do not match"):
            collect_credentials(
                mode=InstallMode.UNATTENDED,
                overrides={"email": "a@b.io", "password": "one", "retypePassword": "two"},
            )

    def test_mismatch_is_asked_again_when_interactive(self):
        prompter = ScriptedPrompter(["pw", "pw"])

        creds = collect_credentials(
            mode=InstallMode.INTERACTIVE,
            overrides={"email": "a@b.io", "password": "one", "retypePassword": "two"},
            prompter=prompter,
        )

        assert creds.get("password") == "pw"
        assert "Passwords do not match" in prompter.output
