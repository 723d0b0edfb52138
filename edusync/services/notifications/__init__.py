"""Partner program email notifications."""

from edusync.services.notifications.email import (
    TEMPLATE_SUBJECTS,
    EmailDelivery,
    EmailDeliveryError,
    EmailNotificationService,
    NotificationError,
    RenderedEmail,
    UnknownTemplateError,
    render_email,
)

__all__ = [
    "TEMPLATE_SUBJECTS",
    "EmailDelivery",
    "EmailDeliveryError",
    "EmailNotificationService",
    "NotificationError",
    "RenderedEmail",
    "UnknownTemplateError",
    "render_email",
]
