from lenslink.notifications.dispatcher import LoggingSender, NotificationSender, Notifier
from lenslink.notifications.templates import NotificationKind, render

__all__ = ["LoggingSender", "NotificationSender", "Notifier", "NotificationKind", "render"]
