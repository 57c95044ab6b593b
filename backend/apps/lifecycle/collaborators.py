# apps/lifecycle/collaborators.py

"""
Outside collaborators the engine talks to: who gets notified and how, and
which manager an escalation is routed to. Both are resolved from settings
so deployments can swap them.
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import httpx
from django.contrib.auth import get_user_model
from django.utils.module_loading import import_string

from apps.common.conf import lifecycle_setting

logger = logging.getLogger(__name__)


class Notifier(ABC):
    """Delivers a notification to a user. The engine only decides when and to whom."""

    @abstractmethod
    def send(self, recipient_id: int, kind: str, payload: dict[str, Any]) -> None:
        ...


class LoggingNotifier(Notifier):
    def send(self, recipient_id: int, kind: str, payload: dict[str, Any]) -> None:
        logger.info(f"Notify user {recipient_id} [{kind}]: {payload}")


@dataclass
class WebhookConfig:
    """Configuration for webhook delivery."""
    timeout: float = 10.0
    max_retries: int = 3
    retry_delay: float = 1.0
    retry_backoff: float = 2.0  # Exponential backoff multiplier


class WebhookNotifier(Notifier):
    """
    POSTs notifications as JSON to NOTIFICATION_WEBHOOK_URL.
    Retries connection errors, 5xx and 429 with exponential backoff.
    """

    def __init__(self, url: str | None = None, config: WebhookConfig | None = None):
        self.url = url or lifecycle_setting("NOTIFICATION_WEBHOOK_URL")
        self.config = config or WebhookConfig()

    def _should_retry(self, status_code: int | None, attempt: int) -> bool:
        if attempt >= self.config.max_retries:
            return False
        if status_code is None:  # Connection error
            return True
        return status_code >= 500 or status_code == 429

    def _backoff(self, attempt: int) -> float:
        return self.config.retry_delay * (self.config.retry_backoff ** (attempt - 1))

    def send(self, recipient_id: int, kind: str, payload: dict[str, Any]) -> None:
        if not self.url:
            raise ValueError("NOTIFICATION_WEBHOOK_URL is not configured")

        body = {"recipient_id": recipient_id, "kind": kind, "payload": payload}
        attempt = 0

        while True:
            status_code = None
            try:
                with httpx.Client(timeout=self.config.timeout) as client:
                    response = client.post(self.url, json=body)
                status_code = response.status_code
                if not self._should_retry(status_code, attempt):
                    response.raise_for_status()
                    return
            except (httpx.TimeoutException, httpx.ConnectError) as e:
                if not self._should_retry(None, attempt):
                    raise
                logger.warning(f"Webhook delivery to {self.url} failed: {e}")

            attempt += 1
            delay = self._backoff(attempt)
            logger.warning(
                f"Retry {attempt}/{self.config.max_retries} for webhook "
                f"(status={status_code}), waiting {delay:.1f}s"
            )
            time.sleep(delay)


class ManagerResolver(ABC):
    """Given a lead, answers who the responsible manager is."""

    @abstractmethod
    def resolve(self, lead) -> int | None:
        ...


class GroupManagerResolver(ManagerResolver):
    """
    First active user (lowest id) in any of the MANAGER_ROLES auth groups.
    """

    def resolve(self, lead) -> int | None:
        User = get_user_model()
        return (
            User.objects
            .filter(is_active=True, groups__name__in=lifecycle_setting("MANAGER_ROLES"))
            .order_by("id")
            .values_list("id", flat=True)
            .first()
        )


def get_notifier() -> Notifier:
    return import_string(lifecycle_setting("NOTIFIER"))()


def get_manager_resolver() -> ManagerResolver:
    return import_string(lifecycle_setting("MANAGER_RESOLVER"))()


def notify(recipient_id: int | None, kind: str, payload: dict[str, Any]) -> bool:
    """
    Fire-and-forget delivery. Failures are logged, never raised.

    With NOTIFY_ASYNC the notifier runs in deliver_notification_task and
    this only queues it.
    """
    if recipient_id is None:
        return False
    try:
        if lifecycle_setting("NOTIFY_ASYNC"):
            from .tasks import deliver_notification_task

            deliver_notification_task.delay(recipient_id, kind, payload)
        else:
            get_notifier().send(recipient_id, kind, payload)
    except Exception:
        logger.exception(f"Failed to deliver {kind} notification to user {recipient_id}")
        return False
    return True
