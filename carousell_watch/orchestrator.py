"""
Run orchestrator for the Carousell Watch system.

One invocation is one sequential pass: load seen state, evaluate every alert
source by source, notify recipients of new hits, and save seen state.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set

from .components.alert_evaluator import AlertEvaluator
from .components.message_dispatcher import (
    BaseMessageDispatcher,
    EmailDispatcher,
    MessageDispatcherFactory,
)
from .components.notification_formatter import NotificationFormatter
from .components.page_renderer import PlaywrightPageRenderer
from .components.seen_state import SeenStateStore
from .interfaces import IAlertEvaluator, IMessageDispatcher, IPageRenderer, ISeenStateStore
from .models.alert import Alert
from .models.config import Configuration, RunFlags
from .models.listing import Hit
from .models.notification import Notification
from .services.config_manager import ConfigurationManager
from .utils.error_handling import (
    ErrorCategory,
    ErrorSeverity,
    NotificationDeliveryError,
    get_error_tracker,
    with_error_handling,
)
from .utils.logging import get_logger


@dataclass
class RunSummary:
    """Outcome of one run."""

    test_notification: bool = False
    alerts_processed: int = 0
    hits_per_alert: Dict[str, int] = field(default_factory=dict)
    failed_sources: List[str] = field(default_factory=list)
    seen_count: int = 0


class WatchOrchestrator:
    """
    Coordinates one watcher run.

    The orchestrator owns no global state: configuration, collaborators and
    flags are passed in, so several independent instances can coexist.
    """

    def __init__(
        self,
        config: Configuration,
        renderer: Optional[IPageRenderer],
        dispatchers: Sequence[IMessageDispatcher],
        store: Optional[ISeenStateStore] = None,
        flags: Optional[RunFlags] = None,
        evaluator: Optional[IAlertEvaluator] = None,
        formatter: Optional[NotificationFormatter] = None,
    ):
        self.config = config
        self.renderer = renderer
        self.dispatchers = list(dispatchers)
        self.store = store or SeenStateStore(config.state_path)
        self.flags = flags or RunFlags()
        self.error_tracker = get_error_tracker()
        self.evaluator = evaluator or AlertEvaluator(renderer, error_tracker=self.error_tracker)
        self.formatter = formatter or NotificationFormatter()
        self.logger = get_logger("orchestrator")

    async def run(self) -> RunSummary:
        """
        Execute one run.

        Returns:
            RunSummary describing what happened

        Raises:
            NotificationDeliveryError: If any notification fails; seen state
                is not saved in that case.
            StateError: If seen state cannot be read or written.
        """
        if self.flags.force_test_email:
            return self._send_test_notification()

        summary = RunSummary()
        errors_before = len(self.error_tracker.errors)
        seen = self._load_seen()

        if self.flags.force_all_matches:
            self.logger.info("Force-all mode: reporting every match, seen state untouched")

        for alert in self.config.alerts:
            hits = await self.evaluator.evaluate(alert, seen, self.flags.force_all_matches)
            summary.alerts_processed += 1
            summary.hits_per_alert[alert.id] = len(hits)

            if hits:
                self._notify(alert, hits)

        self._save_seen(seen)

        summary.seen_count = len(seen)
        summary.failed_sources = [
            error.context.get("source", "")
            for error in self.error_tracker.get_errors(
                ErrorCategory.RENDERING, ErrorCategory.EXTRACTION, start=errors_before
            )
        ]
        self.logger.info(
            "Run completed",
            extra={
                "alerts": summary.alerts_processed,
                "hits": summary.hits_per_alert,
                "failed_sources": summary.failed_sources,
                "seen": summary.seen_count,
            },
        )
        return summary

    @with_error_handling(
        component="orchestrator",
        category=ErrorCategory.STATE,
        severity=ErrorSeverity.CRITICAL,
    )
    def _load_seen(self) -> Set[str]:
        return self.store.load()

    @with_error_handling(
        component="orchestrator",
        category=ErrorCategory.STATE,
        severity=ErrorSeverity.CRITICAL,
    )
    def _save_seen(self, seen: Set[str]) -> None:
        self.store.save(seen)

    def _notify(self, alert: Alert, hits: List[Hit]) -> None:
        notification = self.formatter.format_alert(alert, hits)
        self._dispatch(notification, self.dispatchers)

    def _send_test_notification(self) -> RunSummary:
        recipients = self.config.all_recipients()
        notification = self.formatter.format_test_message(recipients)
        email_dispatchers = [d for d in self.dispatchers if isinstance(d, EmailDispatcher)]
        self._dispatch(notification, email_dispatchers)
        self.logger.info(f"Test email attempted to: {', '.join(recipients)}")
        return RunSummary(test_notification=True)

    def _dispatch(self, notification: Notification, dispatchers: Sequence[IMessageDispatcher]) -> None:
        for dispatcher in dispatchers:
            result = dispatcher.send_notification(notification)
            if not result.success:
                self.error_tracker.record_error(
                    component="orchestrator",
                    category=ErrorCategory.NOTIFICATION,
                    severity=ErrorSeverity.CRITICAL,
                    message=f"Delivery of '{notification.subject}' failed",
                    context={"error": result.error_message},
                )
                raise NotificationDeliveryError(
                    f"Failed to deliver '{notification.subject}': {result.error_message}"
                )


@with_error_handling(
    component="orchestrator",
    category=ErrorCategory.CONFIGURATION,
    severity=ErrorSeverity.CRITICAL,
)
def load_configuration(config_path: Optional[str] = None) -> Configuration:
    """Load and validate configuration, recording failures."""
    return ConfigurationManager(config_path).load_config()


async def run_watch(config_path: Optional[str] = None, flags: Optional[RunFlags] = None) -> RunSummary:
    """
    Run the watcher with production collaborators.

    Args:
        config_path: Configuration file path, or None to search default paths
        flags: Run flags, read from the environment when omitted

    Returns:
        RunSummary of the run
    """
    config = load_configuration(config_path)
    flags = flags or RunFlags.from_env()
    dispatchers: List[BaseMessageDispatcher] = MessageDispatcherFactory.create_dispatchers(config)

    if flags.force_test_email:
        # no browser needed to send the diagnostic message
        orchestrator = WatchOrchestrator(config, renderer=None, dispatchers=dispatchers, flags=flags)
        return await orchestrator.run()

    async with PlaywrightPageRenderer(config.browser) as renderer:
        orchestrator = WatchOrchestrator(config, renderer, dispatchers, flags=flags)
        return await orchestrator.run()
