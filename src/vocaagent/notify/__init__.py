"""词汇推送."""

from vocaagent.notify.telegram import Notifier, NotifyResult, TelegramClient

__all__ = [
    "Notifier",
    "NotifyResult",
    "TelegramClient",
]
