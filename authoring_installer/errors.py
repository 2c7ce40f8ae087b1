from __future__ import annotations


class InstallError(RuntimeError):
    """Base class for failures that end an install run.

    ``message`` is the operator-facing reason printed on exit; the exception
    text itself carries the underlying detail for the log.
    """

    default_message = "Install was unsuccessful. Please check the console output."

    def __init__(self, detail: str = "", *, message: str | None = None) -> None:
        super().__init__(detail or message or self.default_message)
        self.message = message or self.default_message


class ValidationError(InstallError):
    default_message = "Failed to save configuration items."


class ConflictError(InstallError):
    pass


class DependencyError(InstallError):
    pass


class PersistenceError(InstallError):
    default_message = "Install Failed."


class ProvisioningError(InstallError):
    pass


class InstallAborted(InstallError):
    default_message = "Exiting install ... "
