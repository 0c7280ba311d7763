"""
DP Travels Backend - Mail Providers
Interchangeable delivery backends: SMTP, SMTP with OAuth2, HTTP API, in-memory

Every provider raises MailTransportError when a message could not be handed
over; retrying is the dispatcher's job.
"""

import asyncio
import re
import smtplib
import logging
from datetime import datetime, timedelta
from email.message import EmailMessage
from typing import List, Optional, Protocol

import httpx

from app.config import Settings
from app.models import Notification

logger = logging.getLogger(__name__)


class MailTransportError(Exception):
    """The provider rejected the message or could not be reached."""


class MailProvider(Protocol):
    name: str

    def is_configured(self) -> bool: ...

    async def send(self, notification: Notification) -> None: ...

    async def verify(self) -> bool: ...

    async def close(self) -> None: ...


def html_to_text(html: str) -> str:
    """Crude plain-text fallback for mail clients without HTML."""
    text = re.sub(r"</(p|tr|h[1-6]|div)>", "\n", html)
    text = re.sub(r"<[^>]+>", "", text)
    text = (
        text.replace("&nbsp;", " ")
        .replace("&lt;", "<")
        .replace("&gt;", ">")
        .replace("&quot;", '"')
        .replace("&#x27;", "'")
        .replace("&#39;", "'")
        .replace("&amp;", "&")
    )
    lines = [re.sub(r"[ \t]+", " ", line).strip() for line in text.splitlines()]
    return "\n".join(line for line in lines if line)


def build_mime_message(notification: Notification) -> EmailMessage:
    msg = EmailMessage()
    msg["From"] = notification.from_header
    msg["To"] = notification.to_address
    msg["Subject"] = notification.subject
    if notification.reply_to:
        msg["Reply-To"] = notification.reply_to

    msg.set_content(html_to_text(notification.html_body), charset="utf-8")
    msg.add_alternative(notification.html_body, subtype="html", charset="utf-8")
    return msg


# ============================================================
# SMTP
# ============================================================

class SMTPMailProvider:
    """SMTP relay with STARTTLS (or implicit TLS on 465) and password login."""

    name = "smtp"

    def __init__(self, host: str, port: int, user: str, password: str, timeout: float = 30.0):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.timeout = timeout

    def is_configured(self) -> bool:
        return all([self.host, self.port, self.user, self.password])

    def _connect(self) -> smtplib.SMTP:
        if self.port == 465:
            return smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)
        server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
        try:
            server.starttls()
        except (smtplib.SMTPException, OSError):
            server.close()
            raise
        return server

    def _authenticate(self, server: smtplib.SMTP, access_token: Optional[str] = None) -> None:
        server.login(self.user, self.password)

    def _deliver(self, notification: Notification, access_token: Optional[str] = None) -> None:
        msg = build_mime_message(notification)
        try:
            with self._connect() as server:
                self._authenticate(server, access_token)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise MailTransportError(f"SMTP delivery failed: {e}") from e

    def _check_login(self, access_token: Optional[str] = None) -> None:
        try:
            with self._connect() as server:
                self._authenticate(server, access_token)
        except (smtplib.SMTPException, OSError) as e:
            raise MailTransportError(f"SMTP login failed: {e}") from e

    async def send(self, notification: Notification) -> None:
        await asyncio.to_thread(self._deliver, notification)
        logger.info(f"Email sent via {self.host}:{self.port} to {notification.to_address}")

    async def verify(self) -> bool:
        try:
            await asyncio.to_thread(self._check_login)
        except MailTransportError as e:
            logger.error(f"Email transporter failed: {e}")
            return False
        logger.info("Email transporter ready")
        return True

    async def close(self) -> None:
        return None


class OAuth2SMTPMailProvider(SMTPMailProvider):
    """
    SMTP relay authenticated with XOAUTH2.

    Access tokens come from the refresh-token grant and are cached until a
    minute before they expire.
    """

    name = "oauth2"

    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        client_id: str,
        client_secret: str,
        refresh_token: str,
        token_url: str,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(host, port, user, password="", timeout=timeout)
        self.client_id = client_id
        self.client_secret = client_secret
        self.refresh_token = refresh_token
        self.token_url = token_url
        self.access_token: Optional[str] = None
        self.token_expires: Optional[datetime] = None
        self.client = client or httpx.AsyncClient(timeout=15.0)

    def is_configured(self) -> bool:
        return all([
            self.host,
            self.port,
            self.user,
            self.client_id,
            self.client_secret,
            self.refresh_token,
        ])

    async def _get_access_token(self) -> str:
        if self.access_token and self.token_expires and datetime.now() < self.token_expires:
            return self.access_token

        try:
            response = await self.client.post(
                self.token_url,
                data={
                    "grant_type": "refresh_token",
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "refresh_token": self.refresh_token,
                },
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
        except httpx.RequestError as e:
            logger.error(f"OAuth2 token request error: {e}")
            raise MailTransportError(f"Failed to reach OAuth2 token endpoint: {e}") from e

        if response.status_code != 200:
            logger.error(f"OAuth2 token refresh failed [{response.status_code}]: {response.text}")
            raise MailTransportError(f"OAuth2 token refresh failed: {response.status_code}")

        try:
            data = response.json()
            self.access_token = data["access_token"]
            expires_in = int(data.get("expires_in", 3599))
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error(f"OAuth2 token response unusable: {response.text}")
            raise MailTransportError(f"OAuth2 token response missing access_token: {e}") from e
        self.token_expires = datetime.now() + timedelta(seconds=expires_in - 60)
        logger.info("OAuth2 mail access token obtained")
        return self.access_token

    def _authenticate(self, server: smtplib.SMTP, access_token: Optional[str] = None) -> None:
        auth_string = f"user={self.user}\x01auth=Bearer {access_token}\x01\x01"
        server.ehlo()
        server.auth("XOAUTH2", lambda challenge=None: auth_string, initial_response_ok=True)

    async def send(self, notification: Notification) -> None:
        token = await self._get_access_token()
        await asyncio.to_thread(self._deliver, notification, token)
        logger.info(f"Email sent via {self.host}:{self.port} (XOAUTH2) to {notification.to_address}")

    async def verify(self) -> bool:
        try:
            token = await self._get_access_token()
            await asyncio.to_thread(self._check_login, token)
        except MailTransportError as e:
            logger.error(f"Email transporter failed: {e}")
            return False
        logger.info("Email transporter ready")
        return True

    async def close(self) -> None:
        await self.client.aclose()


# ============================================================
# Transactional email HTTP API
# ============================================================

class ApiMailProvider:
    """Brevo-style transactional email API: JSON POST with an api-key header."""

    name = "api"

    def __init__(self, api_url: str, api_key: str, client: Optional[httpx.AsyncClient] = None):
        self.api_url = api_url
        self.api_key = api_key
        self.client = client or httpx.AsyncClient(timeout=15.0)

    def is_configured(self) -> bool:
        return bool(self.api_url and self.api_key)

    def _payload(self, notification: Notification) -> dict:
        payload = {
            "sender": {"name": notification.from_name, "email": notification.from_address},
            "to": [{"email": notification.to_address}],
            "subject": notification.subject,
            "htmlContent": notification.html_body,
        }
        if notification.reply_to:
            payload["replyTo"] = {"email": notification.reply_to}
        return payload

    async def send(self, notification: Notification) -> None:
        try:
            response = await self.client.post(
                self.api_url,
                json=self._payload(notification),
                headers={
                    "api-key": self.api_key,
                    "accept": "application/json",
                },
            )
        except httpx.RequestError as e:
            raise MailTransportError(f"Mail API request error: {e}") from e

        if response.status_code >= 400:
            raise MailTransportError(
                f"Mail API rejected message [{response.status_code}]: {response.text}"
            )
        logger.info(f"Email accepted by mail API for {notification.to_address}")

    async def verify(self) -> bool:
        if not self.is_configured():
            logger.error("Email transporter failed: mail API key not configured")
            return False
        logger.info("Email transporter ready")
        return True

    async def close(self) -> None:
        await self.client.aclose()


# ============================================================
# In-memory
# ============================================================

class MockMailProvider:
    """Keeps every notification in memory instead of sending it."""

    name = "mock"

    def __init__(self):
        self.outbox: List[Notification] = []

    def is_configured(self) -> bool:
        return True

    async def send(self, notification: Notification) -> None:
        self.outbox.append(notification)
        logger.info(f"Mock email stored: {notification.subject}")

    async def verify(self) -> bool:
        return True

    async def close(self) -> None:
        return None


def build_mail_provider(settings: Settings) -> MailProvider:
    """Create the provider selected by MAIL_PROVIDER."""
    provider = settings.mail_provider.lower()

    if provider == "smtp":
        return SMTPMailProvider(
            host=settings.smtp_host,
            port=settings.smtp_port,
            user=settings.smtp_user,
            password=settings.smtp_password,
            timeout=settings.smtp_timeout,
        )
    if provider == "oauth2":
        return OAuth2SMTPMailProvider(
            host=settings.smtp_host,
            port=settings.smtp_port,
            user=settings.smtp_user,
            client_id=settings.oauth2_client_id,
            client_secret=settings.oauth2_client_secret,
            refresh_token=settings.oauth2_refresh_token,
            token_url=settings.oauth2_token_url,
            timeout=settings.smtp_timeout,
        )
    if provider == "api":
        return ApiMailProvider(api_url=settings.mail_api_url, api_key=settings.mail_api_key)
    if provider == "mock":
        return MockMailProvider()

    raise ValueError(f"Unknown mail provider: {settings.mail_provider!r}")
