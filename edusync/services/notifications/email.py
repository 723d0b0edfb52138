"""Partner program email notifications.

Templates live next to this module and are rendered with Jinja2 (HTML
autoescaping on, so partner-supplied names cannot inject markup). Delivery
goes through Resend when ``RESEND_API_KEY`` is set; otherwise the rendered
email is only logged.
"""

import enum
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx
from jinja2 import Environment, FileSystemLoader, select_autoescape

from edusync.config import Settings, get_settings
from edusync.constants import PARTNER_DASHBOARD_PATH, RESEND_API_URL
from edusync.utils.http_client import get_general_client
from edusync.utils.metrics import metrics
from edusync.utils.retry import DEFAULT_RETRY_CONFIG, RetryConfig, retry_async

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"

TEMPLATE_SUBJECTS = {
    "application_received": "🎉 Your SISO Partnership Application Has Been Received!",
    "application_approved": "🎉 Welcome to the SISO Partnership Program!",
    "commission_earned": "💰 You've Earned a New Commission!",
}

_environment = Environment(
    loader=FileSystemLoader(TEMPLATES_DIR),
    autoescape=select_autoescape(["html"]),
)


class NotificationError(Exception):
    """Base exception for email notification errors."""


class UnknownTemplateError(NotificationError):
    """The requested template does not exist."""

    def __init__(self, template: str):
        super().__init__(f"Unknown email template: {template}")
        self.template = template


class EmailDeliveryError(NotificationError):
    """The email provider did not accept the message."""


class EmailDelivery(str, enum.Enum):
    """How a notification left the service."""

    SENT = "sent"
    LOGGED = "logged"


@dataclass
class RenderedEmail:
    subject: str
    html: str


def render_email(template: str, data: dict[str, Any], app_url: str | None = None) -> RenderedEmail:
    """Render one of the partner templates.

    Args:
        template: Template key (e.g. "application_received")
        data: Template variables; missing keys render empty
        app_url: Site URL for dashboard links (default: APP_URL)

    Raises:
        UnknownTemplateError: If ``template`` is not a known template key
    """
    subject = TEMPLATE_SUBJECTS.get(template)
    if subject is None:
        raise UnknownTemplateError(template)

    if app_url is None:
        app_url = get_settings().app_url
    html = _environment.get_template(f"{template}.html").render(
        data=data,
        dashboard_url=f"{app_url.rstrip('/')}{PARTNER_DASHBOARD_PATH}",
    )
    return RenderedEmail(subject=subject, html=html)


class EmailNotificationService:
    """Renders and delivers partner notifications."""

    def __init__(
        self,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
        retry_config: RetryConfig = DEFAULT_RETRY_CONFIG,
    ):
        self.settings = settings or get_settings()
        self._http = http_client
        self.retry_config = retry_config

    async def send(self, to: str, template: str, data: dict[str, Any]) -> EmailDelivery:
        """Render ``template`` and deliver it to ``to``.

        Raises:
            UnknownTemplateError: If the template does not exist
            EmailDeliveryError: If the provider rejects the message or stays unreachable
        """
        email = render_email(template, data, app_url=self.settings.app_url)

        if not self.settings.email_enabled:
            logger.info(f"Sending email: to={to}, subject={email.subject!r}")
            logger.debug(email.html)
            delivery = EmailDelivery.LOGGED
        else:
            await self._dispatch(to, email)
            logger.info(f"Email '{template}' sent to {to}")
            delivery = EmailDelivery.SENT

        metrics.email_notifications_total.inc(template=template, delivery=delivery.value)
        return delivery

    async def _dispatch(self, to: str, email: RenderedEmail) -> None:
        client = self._http or get_general_client()
        response = await retry_async(
            client.post,
            RESEND_API_URL,
            headers={"Authorization": f"Bearer {self.settings.resend_api_key}"},
            json={
                "from": self.settings.email_from,
                "to": [to],
                "subject": email.subject,
                "html": email.html,
            },
            config=self.retry_config,
            operation_name="Resend email",
        )
        if response is None:
            raise EmailDeliveryError("Email provider unavailable")
        if response.status_code >= 400:
            raise EmailDeliveryError(
                f"Email provider rejected message ({response.status_code}): {response.text[:200]}"
            )
