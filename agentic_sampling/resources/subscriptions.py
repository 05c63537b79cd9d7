"""Resource subscriptions with periodic update notifications."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Set

from agentic_sampling.utils.log_utils import sanitize_log_message

logger = logging.getLogger(__name__)

NotifyCallback = Callable[[str], Awaitable[None]]


class SubscriptionManager:
    """Tracks subscribed URIs and notifies each of them on a fixed interval.

    The timer is a single asyncio task started with :meth:`start` and
    cancelled by :meth:`stop`. A failed notification is logged and does not
    stop the timer.

    Attributes:
        interval: Seconds between notification rounds
    """

    def __init__(self, notify: NotifyCallback, interval: float = 10.0) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.interval = interval
        self._notify = notify
        self._subscriptions: Set[str] = set()
        self._task: Optional[asyncio.Task] = None

    @property
    def subscriptions(self) -> Set[str]:
        return set(self._subscriptions)

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def subscribe(self, uri: str) -> None:
        self._subscriptions.add(str(uri))
        logger.debug("Resource subscribed", extra={"uri": str(uri)})

    def unsubscribe(self, uri: str) -> None:
        self._subscriptions.discard(str(uri))
        logger.debug("Resource unsubscribed", extra={"uri": str(uri)})

    def start(self) -> None:
        """Start the notification timer. Does nothing if already running."""
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run(), name="resource-subscriptions")
        logger.info("Subscription notifier started", extra={"interval": self.interval})

    async def stop(self) -> None:
        """Stop the notification timer and wait for it to finish."""
        if self._task is None:
            return
        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Subscription notifier stopped")

    async def notify_all(self) -> int:
        """Send one round of notifications.

        Returns:
            Number of notifications delivered successfully
        """
        delivered = 0
        for uri in sorted(self._subscriptions):
            try:
                await self._notify(uri)
                delivered += 1
            except Exception as e:
                logger.error("Resource update notification failed", extra={
                    "uri": uri,
                    "error": sanitize_log_message(str(e))
                })
        return delivered

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            await self.notify_all()
