"""Deployment status notifications"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, FrozenSet, List, Optional

import httpx

from ..api.exceptions import NotificationError
from ..constants import (
    APP_NAME,
    ENV_SLACK_CHANNEL,
    ENV_SLACK_WEBHOOK,
    ENV_TEAMS_WEBHOOK,
    MSG_EVENT,
    WEBHOOK_TIMEOUT,
    Event,
)
from ..models.context import DeployContext

logger = logging.getLogger(__name__)

ALL_EVENTS = frozenset(Event)
TERMINAL_EVENTS = frozenset({Event.SUCCESS, Event.ERROR})


def format_message(event: Event, context: DeployContext, error: Optional[str] = None) -> str:
    """Render the plain-text message for an event"""
    identity = context.identity
    message = MSG_EVENT[event].format(
        name=identity.package_name,
        version=identity.package_version,
        env=context.environment,
        bucket=context.bucket,
        error=error or "unknown error",
    )
    commit = identity.short_commit or "uncommitted"
    return f"{message} [{commit} by {identity.actor}]"


class NotificationSink(ABC):
    """One delivery channel for deployment notifications"""

    name = "sink"

    def __init__(self, events: FrozenSet[Event] = ALL_EVENTS):
        self.events = events

    def accepts(self, event: Event) -> bool:
        return event in self.events

    @abstractmethod
    async def send(self,
                   client: httpx.AsyncClient,
                   event: Event,
                   message: str,
                   context: DeployContext) -> None:
        """
        Deliver a notification

        Raises:
            NotificationError: If delivery fails
        """
        pass

    async def _post(self, client: httpx.AsyncClient, url: str, payload: Dict[str, Any]) -> None:
        try:
            response = await client.post(url, json=payload)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise NotificationError(self.name, str(e)) from e


class SlackSink(NotificationSink):
    """Simple message sink for Slack-style incoming webhooks"""

    name = "slack"

    def __init__(self, webhook_url: str, channel: Optional[str] = None,
                 events: FrozenSet[Event] = ALL_EVENTS):
        super().__init__(events)
        self.webhook_url = webhook_url
        self.channel = channel

    def build_payload(self, message: str) -> Dict[str, Any]:
        payload = {"text": message, "username": APP_NAME}
        if self.channel:
            payload["channel"] = self.channel
        return payload

    async def send(self, client, event, message, context) -> None:
        await self._post(client, self.webhook_url, self.build_payload(message))


class TeamsSink(NotificationSink):
    """Rich card sink for MS-Teams-style incoming webhooks

    Cards link to the source commit and, when known, to the commit of the
    configuration repository.
    """

    name = "teams"

    THEME_COLORS = {
        Event.SUCCESS: "2EB886",
        Event.ERROR: "D00000",
    }

    def __init__(self, webhook_url: str, events: FrozenSet[Event] = TERMINAL_EVENTS):
        super().__init__(events)
        self.webhook_url = webhook_url

    def build_card(self, event: Event, message: str, context: DeployContext) -> Dict[str, Any]:
        identity = context.identity
        facts = [
            {"name": "Package", "value": f"{identity.package_name}@{identity.package_version}"},
            {"name": "Environment", "value": context.environment},
            {"name": "Bucket", "value": context.bucket},
            {"name": "Commit", "value": identity.commit or "uncommitted"},
            {"name": "Deployed by", "value": identity.actor},
        ]
        if context.repo_status and context.repo_status.local_commit:
            facts.append({"name": "Configuration", "value": context.repo_status.local_commit})

        actions = []
        links = (
            ("View Commit", identity.commit_url),
            ("View Config Commit", context.config_commit_url),
        )
        for label, url in links:
            if url:
                actions.append({
                    "@type": "OpenUri",
                    "name": label,
                    "targets": [{"os": "default", "uri": url}],
                })

        return {
            "@type": "MessageCard",
            "@context": "https://schema.org/extensions",
            "summary": message,
            "themeColor": self.THEME_COLORS.get(event, "0076D7"),
            "title": message,
            "sections": [{"facts": facts}],
            "potentialAction": actions,
        }

    async def send(self, client, event, message, context) -> None:
        await self._post(client, self.webhook_url, self.build_card(event, message, context))


class Notifier:
    """Fan notifications out to independent sinks

    Delivery problems are logged and returned, never raised, so a broken
    webhook cannot mask a pipeline error or change the exit status.
    """

    def __init__(self,
                 sinks: Optional[List[NotificationSink]] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None,
                 timeout: float = WEBHOOK_TIMEOUT):
        """
        Initialize notifier

        Args:
            sinks: Configured sinks (may be empty)
            transport: Optional httpx transport (used by tests)
            timeout: Per-request timeout in seconds
        """
        self.sinks = list(sinks or [])
        self.transport = transport
        self.timeout = timeout

    @classmethod
    def from_lookup(cls, get: Callable[[str], Any], **kwargs) -> 'Notifier':
        """
        Build sinks from a key lookup

        Args:
            get: Lookup function, e.g. a resolver over the secret map and
                the process environment
            **kwargs: Passed to the constructor

        Returns:
            Notifier with every sink whose webhook is configured
        """
        sinks = []
        slack_webhook = get(ENV_SLACK_WEBHOOK)
        if slack_webhook:
            sinks.append(SlackSink(slack_webhook, channel=get(ENV_SLACK_CHANNEL)))
        teams_webhook = get(ENV_TEAMS_WEBHOOK)
        if teams_webhook:
            sinks.append(TeamsSink(teams_webhook))
        return cls(sinks, **kwargs)

    async def notify(self,
                     event: Event,
                     context: DeployContext,
                     error: Optional[str] = None) -> List[NotificationError]:
        """
        Send an event to every sink that accepts it

        Args:
            event: Lifecycle event
            context: Current deploy context
            error: Error description for error events

        Returns:
            Delivery failures, already logged
        """
        message = format_message(event, context, error)
        if event == Event.ERROR:
            logger.error(message)
        else:
            logger.info(message)

        sinks = [sink for sink in self.sinks if sink.accepts(event)]
        if not sinks:
            return []

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            outcomes = await asyncio.gather(
                *[sink.send(client, event, message, context) for sink in sinks],
                return_exceptions=True,
            )

        failures = []
        for sink, outcome in zip(sinks, outcomes):
            if isinstance(outcome, BaseException):
                failure = outcome if isinstance(outcome, NotificationError) \
                    else NotificationError(sink.name, str(outcome))
                logger.warning(f"Notification via {sink.name} failed: {failure}")
                failures.append(failure)
        return failures
