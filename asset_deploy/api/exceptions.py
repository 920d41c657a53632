"""Exception definitions for asset-deploy"""

from typing import List, Sequence

from ..constants import ErrorCode


class DeployToolError(Exception):
    """Base exception for asset-deploy"""

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.error_code = error_code


class ConfigError(DeployToolError):
    """Configuration error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CONFIG_FORMAT_ERROR)


class ConfigRepoStaleError(DeployToolError):
    """Configuration repository is not committed, pushed and up to date"""

    def __init__(self, remote_url: str, errors: Sequence[str]):
        message = (
            f"Configuration repository {remote_url} is not up to date:\n"
            + "\n".join(f"  - {error}" for error in errors)
        )
        super().__init__(message, ErrorCode.CONFIG_REPO_STALE)
        self.remote_url = remote_url
        self.errors = list(errors)


class SecretDecryptionError(DeployToolError):
    """Secret decryption failed"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.SECRET_DECRYPTION_FAILED)


class EntryNotFoundError(DeployToolError):
    """One or more entry sources do not exist"""

    def __init__(self, missing: Sequence[str]):
        message = "Entry source not found: " + ", ".join(missing)
        super().__init__(message, ErrorCode.ENTRY_NOT_FOUND)
        self.missing = list(missing)


class BundlingError(DeployToolError):
    """Bundling an entry failed"""

    def __init__(self, source: str, detail: str):
        super().__init__(f"Failed to bundle {source}: {detail}", ErrorCode.BUNDLING_FAILED)
        self.source = source


class PublishError(DeployToolError):
    """One or more uploads failed

    The remote state is an indeterminate partial publish: ``published``
    lists the keys that landed, ``failed`` the keys that did not.
    """

    def __init__(self, message: str, published: List[str] = None, failed: List[str] = None):
        super().__init__(message, ErrorCode.PUBLISH_FAILED)
        self.published = published or []
        self.failed = failed or []


class NotificationError(DeployToolError):
    """Notification delivery failed (never fatal)"""

    def __init__(self, sink: str, message: str):
        super().__init__(f"{sink}: {message}", ErrorCode.NOTIFICATION_FAILED)
        self.sink = sink
