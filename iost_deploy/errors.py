"""
Error taxonomy for the deployment tooling.

Every failure aborts the run. Nothing here is retried or recovered locally.
"""

from typing import Optional


class DeploymentError(Exception):
    """Base class for all deployment failures"""


class ConfigurationError(DeploymentError):
    """Network configuration is missing or inconsistent"""


class ResourceNotFoundError(DeploymentError, FileNotFoundError):
    """A file the deployment depends on does not exist"""


class AddressBookNotFoundError(ResourceNotFoundError):
    pass


class ScheduleFileNotFoundError(ResourceNotFoundError):
    pass


class ArtifactNotFoundError(ResourceNotFoundError):
    pass


class AddressNotFoundError(DeploymentError, KeyError):
    """A key is absent from the address book"""

    def __init__(self, key: str, path: str):
        self.key = key
        self.path = path
        super().__init__(f'"{key}" not found in JSON file: {path}')

    def __str__(self):
        # KeyError would otherwise repr() the message
        return self.args[0]


class ScheduleValidationError(DeploymentError, ValueError):
    """A vesting schedule entry is missing a field or has a malformed one"""

    def __init__(self, message: str, key: Optional[str] = None, field: Optional[str] = None):
        self.key = key
        self.field = field
        super().__init__(message)

    @classmethod
    def for_field(cls, key: str, field: str, reason: str) -> "ScheduleValidationError":
        return cls(f"Schedule '{key}': field '{field}' {reason}", key=key, field=field)


class TransactionFailedError(DeploymentError):
    """A transaction was mined but reverted"""


class EventNotFoundError(DeploymentError):
    """An expected event is missing from a transaction receipt"""


class ModuleAlreadyExecutedError(DeploymentError):
    """A module whose calls cannot be replayed safely has already run on this chain"""
