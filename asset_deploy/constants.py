"""Global constants for asset-deploy"""

from enum import Enum
import re

APP_NAME = "asset-deploy"
LOG_FORMAT = "%(message)s"

# Configuration directory layout
DEFAULT_CONFIG_DIR = "configurations/default"
CONFIG_FILES = ("env", "settings", "messages", "store")
CONFIG_FILE_SUFFIX = ".yml"
ENVIRONMENTS_KEY = "environments"
DEFAULT_ENVIRONMENT = "development"

# Secrets
PLAINTEXT_SECRETS_FILE = "env.yml"
ENCRYPTED_SECRETS_FILE = "env.enc.yml"
DEFAULT_DECRYPT_COMMAND = ("sops", "--decrypt")

# Well-known name of the shared configuration repository
CONFIG_REPO_NAME = "configurations"

# Project metadata
PACKAGE_MANIFEST_FILE = "package.json"

# Bundler
DEFAULT_BUNDLER_COMMAND = ("esbuild",)
SOURCEMAP_SUFFIX = ".map"

# Environment variables
ENV_SLACK_WEBHOOK = "SLACK_WEBHOOK"
ENV_SLACK_CHANNEL = "SLACK_CHANNEL"
ENV_TEAMS_WEBHOOK = "MS_TEAMS_WEBHOOK"

# Network
WEBHOOK_TIMEOUT = 10.0  # seconds

# Truthy strings accepted for boolean settings
TRUTHY_VALUES = frozenset({"1", "true", "yes", "on"})

# Entry declaration: "source:destination"
ENTRY_SEPARATOR = ":"

# Remote URL forms understood when building commit links
GIT_SSH_URL_PATTERN = re.compile(r"^git@(?P<host>[^:]+):(?P<path>.+?)(?:\.git)?$")
GIT_HTTP_URL_PATTERN = re.compile(r"^https?://(?:[^@/]+@)?(?P<host>[^/]+)/(?P<path>.+?)(?:\.git)?/?$")


class Phase(Enum):
    """Lifecycle phases of a deploy run"""
    START = "start"
    GUARD_OK = "guard_ok"
    GUARD_FAIL = "guard_fail"
    RESOLVE = "resolve"
    STATIC_UPLOAD = "static_upload"
    BUILD = "build"
    UPLOAD = "upload"
    SUCCESS = "success"
    ERROR = "error"


class Event(Enum):
    """Notification events emitted at phase boundaries"""
    DECRYPTING = "decrypting"
    BUILDING = "building"
    UPLOADING = "uploading"
    SUCCESS = "success"
    ERROR = "error"


# Error codes
class ErrorCode:
    CONFIG_FORMAT_ERROR = "AD001"
    CONFIG_REPO_STALE = "AD101"
    SECRET_DECRYPTION_FAILED = "AD102"
    ENTRY_NOT_FOUND = "AD103"
    BUNDLING_FAILED = "AD104"
    PUBLISH_FAILED = "AD105"
    NOTIFICATION_FAILED = "AD106"


# Display constants
EMOJI_ERROR = "✗"
EMOJI_ROCKET = "🚀"
EMOJI_LOCK = "🔒"
EMOJI_PACKAGE = "📦"
EMOJI_CLOUD = "☁️"

# Message templates
MSG_EVENT = {
    Event.DECRYPTING: f"{EMOJI_LOCK} decrypting secrets for {{name}} ({{env}})",
    Event.BUILDING: f"{EMOJI_PACKAGE} building {{name}}@{{version}} ({{env}})",
    Event.UPLOADING: f"{EMOJI_CLOUD} uploading {{name}}@{{version}} to {{bucket}}",
    Event.SUCCESS: f"{EMOJI_ROCKET} deployed {{name}}@{{version}} to {{bucket}} ({{env}})",
    Event.ERROR: f"{EMOJI_ERROR} deploy of {{name}}@{{version}} failed: {{error}}",
}
