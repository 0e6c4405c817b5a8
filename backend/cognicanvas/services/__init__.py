"""Domain services that sit beside the store."""

from cognicanvas.services.chat_service import chat_service
from cognicanvas.services.notifications import notification_center

__all__ = ["chat_service", "notification_center"]
