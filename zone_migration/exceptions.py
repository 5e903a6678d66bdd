class ZoneMigrationError(Exception):
    """Base exception for zone migration failures."""


class CloudOperationError(ZoneMigrationError):
    """Raised when a call to the cloud control plane fails."""

    operation: str
    resource: str

    def __init__(self, operation: str, resource: str, cause: Exception = None):
        self.operation = operation
        self.resource = resource
        self.cause = cause
        message = "{} failed for {}".format(operation, resource)
        if cause is not None:
            message += ": {}".format(cause)
        super().__init__(message)


class SourceVMNotFoundError(ZoneMigrationError):
    """Raised when the VM to migrate does not exist."""


class MigrationNotPossibleError(ZoneMigrationError):
    """Raised when the pre-flight evaluation rules the migration out."""


class LoggingSetupError(ZoneMigrationError):
    """Raised when the log file cannot be rotated or opened."""
