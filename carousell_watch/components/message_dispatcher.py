"""
Message dispatching components for the Carousell Watch system.

This module delivers notifications by SMTP email and, optionally, through
the Telegram Bot API. Each send is a single attempt; failures are reported in
the returned DeliveryResult and never retried here.
"""

import logging
import smtplib
from abc import abstractmethod
from datetime import datetime
from email.message import EmailMessage
from typing import List

import requests

from ..interfaces import IMessageDispatcher
from ..models.config import Configuration, SmtpSettings, TelegramSettings
from ..models.delivery import DeliveryResult
from ..models.notification import Notification

logger = logging.getLogger(__name__)

MAX_ERROR_LENGTH = 500
TELEGRAM_MAX_TEXT = 4096


class BaseMessageDispatcher(IMessageDispatcher):
    """Base class for message dispatchers."""

    name = "base"

    def send_notification(self, notification: Notification) -> DeliveryResult:
        """
        Send a notification.

        Args:
            notification: Notification to send

        Returns:
            DeliveryResult: Result of the delivery attempt
        """
        if self._should_skip(notification):
            logger.info(f"{self.name}: no recipients, skipping.")
            return DeliveryResult(
                success=True, delivery_time=datetime.now(), error_message=None, skipped=True
            )

        start_time = datetime.now()
        try:
            self._send_message(notification)
        except Exception as e:
            error_msg = f"{type(e).__name__}: {e}"[:MAX_ERROR_LENGTH]
            logger.error(f"{self.name} delivery failed: {error_msg}")
            result = DeliveryResult(
                success=False, delivery_time=datetime.now(), error_message=error_msg
            )
            result.validate()
            return result

        delivery_time = datetime.now()
        logger.info(
            f"{self.name}: sent '{notification.subject}' in "
            f"{(delivery_time - start_time).total_seconds():.2f}s"
        )
        result = DeliveryResult(success=True, delivery_time=delivery_time, error_message=None)
        result.validate()
        return result

    def _should_skip(self, notification: Notification) -> bool:
        return False

    @abstractmethod
    def _send_message(self, notification: Notification) -> None:
        """
        Platform-specific message sending implementation.

        Raises:
            Exception: If sending fails
        """

    @abstractmethod
    def test_connection(self) -> bool:
        """Test connection to the messaging platform."""


class EmailDispatcher(BaseMessageDispatcher):
    """SMTP email dispatcher."""

    name = "email"

    def __init__(self, settings: SmtpSettings, timeout: float = 30.0):
        """
        Initialize email dispatcher.

        Args:
            settings: SMTP connection settings
            timeout: Socket timeout in seconds
        """
        self.settings = settings
        self.timeout = timeout

    def _should_skip(self, notification: Notification) -> bool:
        return not notification.recipients

    def _connect(self) -> smtplib.SMTP:
        self.settings.validate()
        server = smtplib.SMTP(self.settings.host, self.settings.port, timeout=self.timeout)
        try:
            if self.settings.use_tls:
                server.starttls()
            if self.settings.user and self.settings.password:
                server.login(self.settings.user, self.settings.password)
        except Exception:
            server.close()
            raise
        return server

    def build_message(self, notification: Notification) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = notification.subject
        message["From"] = self.settings.from_email
        message["To"] = ",".join(notification.recipients)
        message.set_content(notification.body)
        return message

    def _send_message(self, notification: Notification) -> None:
        message = self.build_message(notification)
        with self._connect() as server:
            logger.info(f"SMTP verify: OK as {self.settings.user}")
            server.send_message(message)
        logger.info(f"Email queued to {message['To']}")

    def test_connection(self) -> bool:
        """Connect and authenticate without sending anything."""
        try:
            with self._connect():
                pass
            logger.info(f"SMTP connection test successful as {self.settings.user}")
            return True
        except Exception as e:
            logger.error(f"SMTP connection test failed: {e}")
            return False


class TelegramDispatcher(BaseMessageDispatcher):
    """Telegram Bot API message dispatcher."""

    name = "telegram"

    def __init__(self, bot_token: str, chat_id: str, timeout: float = 30.0):
        """
        Initialize Telegram dispatcher.

        Args:
            bot_token: Telegram bot token
            chat_id: Target chat ID for messages
            timeout: Request timeout in seconds
        """
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.timeout = timeout
        self.base_url = f"https://api.telegram.org/bot{bot_token}"
        self.session = requests.Session()

    def format_text(self, notification: Notification) -> str:
        return f"🚨 {notification.subject}\n\n{notification.body}"[:TELEGRAM_MAX_TEXT]

    def _send_message(self, notification: Notification) -> None:
        """Send message via Telegram Bot API."""
        payload = {
            "chat_id": self.chat_id,
            "text": self.format_text(notification),
            "disable_web_page_preview": True,
        }

        response = self.session.post(f"{self.base_url}/sendMessage", json=payload, timeout=self.timeout)
        response.raise_for_status()

        result = response.json()
        if not result.get("ok"):
            raise RuntimeError(
                f"Telegram API error: {result.get('description', 'Unknown error')}"
            )

        logger.info(f"Message sent to Telegram chat {self.chat_id}")

    def test_connection(self) -> bool:
        """Test connection to Telegram Bot API."""
        try:
            response = self.session.get(f"{self.base_url}/getMe", timeout=10)
            response.raise_for_status()
            result = response.json()
            if result.get("ok"):
                logger.info("Telegram bot connection test successful")
                return True
            logger.error(f"Telegram bot test failed: {result}")
            return False
        except Exception as e:
            logger.error(f"Failed to connect to Telegram Bot API: {e}")
            return False


class MessageDispatcherFactory:
    """Factory for creating message dispatchers."""

    @staticmethod
    def create_email_dispatcher(smtp: SmtpSettings) -> EmailDispatcher:
        return EmailDispatcher(smtp)

    @staticmethod
    def create_telegram_dispatcher(telegram: TelegramSettings) -> TelegramDispatcher:
        if not telegram.enabled:
            raise ValueError("Telegram requires both TG_TOKEN and TG_CHAT")
        return TelegramDispatcher(bot_token=telegram.bot_token, chat_id=telegram.chat_id)

    @classmethod
    def create_dispatchers(cls, config: Configuration) -> List[BaseMessageDispatcher]:
        """
        Create every dispatcher enabled by the configuration.

        Email is always present; Telegram is added when configured.
        """
        dispatchers: List[BaseMessageDispatcher] = [cls.create_email_dispatcher(config.smtp)]
        if config.telegram.enabled:
            dispatchers.append(cls.create_telegram_dispatcher(config.telegram))
        return dispatchers
