"""
Configuration models for the system.
"""

import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from .alert import Alert

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124 Safari/537.36"
)


@dataclass
class BrowserSettings:
    """Settings for the page rendering collaborator."""

    headless: bool = True
    navigation_timeout_ms: int = 60000
    settle_ms: int = 2000
    user_agent: str = DEFAULT_USER_AGENT

    def validate(self) -> bool:
        """Validate browser settings."""
        if not isinstance(self.headless, bool):
            raise ValueError("headless must be a boolean")

        if not isinstance(self.navigation_timeout_ms, int) or self.navigation_timeout_ms <= 0:
            raise ValueError("navigation_timeout_ms must be a positive integer")

        if not isinstance(self.settle_ms, int) or self.settle_ms < 0:
            raise ValueError("settle_ms must be a non-negative integer")

        if not isinstance(self.user_agent, str) or not self.user_agent.strip():
            raise ValueError("user_agent cannot be empty")

        return True


@dataclass
class SmtpSettings:
    """SMTP transport settings, read from the environment."""

    host: Optional[str]
    port: int = 587
    user: str = ""
    password: str = ""
    from_email: str = ""
    use_tls: bool = True

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "SmtpSettings":
        env = os.environ if environ is None else environ
        user = env.get("SMTP_USER", "")
        return cls(
            host=env.get("SMTP_HOST") or None,
            port=int(env.get("SMTP_PORT") or 587),
            user=user,
            password=env.get("SMTP_PASS", ""),
            from_email=env.get("FROM_EMAIL") or user,
            use_tls=env.get("SMTP_TLS", "true").lower() in ("true", "1", "yes"),
        )

    def validate(self) -> bool:
        """Validate SMTP settings needed to actually send mail."""
        if not self.host:
            raise ValueError("SMTP_HOST is not configured")

        if not (0 < self.port < 65536):
            raise ValueError("SMTP port must be between 1 and 65535")

        if not self.from_email:
            raise ValueError("FROM_EMAIL (or SMTP_USER) is not configured")

        return True


@dataclass
class TelegramSettings:
    """Optional Telegram delivery settings, read from the environment."""

    bot_token: Optional[str] = None
    chat_id: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "TelegramSettings":
        env = os.environ if environ is None else environ
        return cls(
            bot_token=env.get("TG_TOKEN") or None,
            chat_id=env.get("TG_CHAT") or None,
        )

    @property
    def enabled(self) -> bool:
        return bool(self.bot_token and self.chat_id)


@dataclass
class RunFlags:
    """Operational mode flags for one run."""

    force_all_matches: bool = False
    force_test_email: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RunFlags":
        env = os.environ if environ is None else environ
        return cls(
            force_all_matches=env.get("FORCE_ALL_MATCHES") == "1",
            force_test_email=env.get("FORCE_TEST_EMAIL") == "1",
        )


@dataclass
class Configuration:
    """System configuration."""

    alerts: List[Alert]
    state_path: str = "seen.json"
    browser: BrowserSettings = field(default_factory=BrowserSettings)
    smtp: SmtpSettings = field(default_factory=lambda: SmtpSettings(host=None))
    telegram: TelegramSettings = field(default_factory=TelegramSettings)

    def validate(self) -> bool:
        """Validate system configuration."""
        if not isinstance(self.alerts, list):
            raise ValueError("alerts must be a list")

        seen_ids = set()
        for alert in self.alerts:
            alert.validate()
            if alert.id in seen_ids:
                raise ValueError(f"Duplicate alert id: {alert.id}")
            seen_ids.add(alert.id)

        if not isinstance(self.state_path, str) or not self.state_path.strip():
            raise ValueError("state_path cannot be empty")

        self.browser.validate()

        return True

    def all_recipients(self) -> List[str]:
        """Union of every alert's recipients, de-duplicated in first-seen order."""
        recipients: List[str] = []
        for alert in self.alerts:
            for email in alert.emails:
                if email not in recipients:
                    recipients.append(email)
        return recipients
