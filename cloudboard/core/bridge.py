"""Background task results delivered to the dashboard loop.

Workers never touch dashboard state. They put immutable notifications on a
NotificationBridge, and the loop drains it without blocking once per tick.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Union

from cloudboard.core.models import Identity
from cloudboard.providers.exceptions import ProviderError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SsoLoginSucceeded:
    message: str
    profile: str


@dataclass(frozen=True)
class SsoLoginFailed:
    error: str


@dataclass(frozen=True)
class ProfileActivated:
    client: Any
    profile: str


@dataclass(frozen=True)
class ProfileActivationFailed:
    error: str


Notification = Union[SsoLoginSucceeded, SsoLoginFailed, ProfileActivated, ProfileActivationFailed]


class NotificationBridge:
    """Multiple-producer, single-consumer notification channel."""

    def __init__(self) -> None:
        self._queue: queue.Queue[Notification] = queue.Queue()

    def send(self, notification: Notification) -> None:
        """Enqueue a notification. Safe to call from any thread."""
        self._queue.put(notification)

    def drain(self) -> list[Notification]:
        """Remove and return every pending notification without blocking."""
        notifications = []

        while True:
            try:
                notifications.append(self._queue.get_nowait())
            except queue.Empty:
                break

        return notifications

    def pending(self) -> int:
        return self._queue.qsize()


def spawn_worker(target: Callable[[], None], name: str) -> None:
    """Run target on a daemon thread. Nothing waits for it to finish."""
    threading.Thread(target=target, name=name, daemon=True).start()


def activate_profile_task(
    bridge: NotificationBridge,
    client_factory: Callable[[Identity], Any],
    identity: Identity,
) -> Callable[[], None]:
    """Build a task constructing a cloud client for identity.

    Parameters
    ----------
    bridge : NotificationBridge
        Channel receiving the outcome
    client_factory : Callable[[Identity], Any]
        Builds a cloud client; may raise ProviderError
    identity : Identity
        Identity to build the client for; must name a profile

    Returns
    -------
    Callable[[], None]
        Task sending ProfileActivated or ProfileActivationFailed
    """
    profile = identity.profile or "default"

    def task() -> None:
        try:
            client = client_factory(identity)
        except ProviderError as e:
            bridge.send(ProfileActivationFailed(str(e)))
            return
        except Exception as e:
            logger.exception("Unexpected error while activating profile %s", profile)
            bridge.send(ProfileActivationFailed(str(e)))
            return

        bridge.send(ProfileActivated(client, profile))

    return task


def sso_login_task(
    bridge: NotificationBridge,
    login: Callable[[str | None], tuple[bool, str]],
    profile: str | None,
) -> Callable[[], None]:
    """Build a task running the login helper for profile.

    Parameters
    ----------
    bridge : NotificationBridge
        Channel receiving the outcome
    login : Callable[[str | None], tuple[bool, str]]
        Runs the helper and returns (succeeded, output)
    profile : str | None
        Profile to log in with

    Returns
    -------
    Callable[[], None]
        Task sending SsoLoginSucceeded or SsoLoginFailed
    """

    def task() -> None:
        try:
            succeeded, output = login(profile)
        except Exception as e:
            logger.exception("Login helper crashed")
            bridge.send(SsoLoginFailed(str(e)))
            return

        if succeeded:
            bridge.send(SsoLoginSucceeded("Login successful", profile or "default"))
        else:
            bridge.send(SsoLoginFailed(output))

    return task
