"""
DP Travels Backend - Mail Dispatcher
Addresses composed emails and hands them to the configured provider,
retrying a fixed number of times before giving up.
"""

import asyncio
import logging
from functools import lru_cache
from typing import Awaitable, Callable, Optional

from app.config import settings
from app.models import EmailContent, Notification
from app.services.mail_providers import MailProvider, MailTransportError, build_mail_provider

logger = logging.getLogger(__name__)


class DispatchError(Exception):
    """Every delivery attempt failed."""

    def __init__(self, message: str, attempts: int):
        super().__init__(message)
        self.attempts = attempts


class MailDispatcher:
    """
    Delivers notifications to the business inbox.

    On a transport failure the dispatcher waits ``retry_delay`` seconds and
    tries again, up to ``max_attempts`` attempts in total. There is no
    backoff and no queueing: the caller waits for the final outcome.
    """

    def __init__(
        self,
        provider: MailProvider,
        sender: str,
        recipient: Optional[str] = None,
        max_attempts: int = 2,
        retry_delay: float = 2.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.provider = provider
        self.sender = sender
        self.recipient = recipient or sender
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self._sleep = sleep

    def address(self, content: EmailContent) -> Notification:
        return Notification(
            from_address=self.sender,
            from_name=content.from_name,
            to_address=self.recipient,
            subject=content.subject,
            html_body=content.html_body,
            reply_to=content.reply_to,
        )

    async def send(self, content: EmailContent) -> Notification:
        """
        Send one email.

        Returns:
            The notification as it was handed to the provider

        Raises:
            DispatchError: when every attempt failed
        """
        notification = self.address(content)
        last_error: Optional[MailTransportError] = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                logger.info(f"Sending email (attempt {attempt}/{self.max_attempts}): {notification.subject}")
                await self.provider.send(notification)
                return notification
            except MailTransportError as e:
                last_error = e
                logger.warning(f"Email attempt {attempt}/{self.max_attempts} failed: {e}")
                if attempt < self.max_attempts:
                    await self._sleep(self.retry_delay)

        logger.error(f"Email delivery gave up after {self.max_attempts} attempts")
        raise DispatchError(str(last_error), attempts=self.max_attempts) from last_error

    async def verify(self) -> bool:
        return await self.provider.verify()

    async def close(self) -> None:
        await self.provider.close()


@lru_cache()
def get_mail_dispatcher() -> MailDispatcher:
    """Process-wide dispatcher built from settings. Overridable as a FastAPI dependency."""
    return MailDispatcher(
        provider=build_mail_provider(settings),
        sender=settings.sender_address,
        recipient=settings.receiver_address,
        max_attempts=settings.mail_max_attempts,
        retry_delay=settings.mail_retry_delay,
    )
