# asset_deploy/services/__init__.py
"""Business logic services for asset-deploy"""

from .build_service import BuildService
from .deploy_service import DeployService
from .notifier import Notifier, SlackSink, TeamsSink
from .publish_service import PublishService

__all__ = [
    "BuildService",
    "DeployService",
    "Notifier",
    "SlackSink",
    "TeamsSink",
    "PublishService",
]
