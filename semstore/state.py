"""Per-chat record of the last menu message sent."""

from __future__ import annotations

import threading


class MenuMessages:
    """Thread-safe map from chat id to the id of its last menu message."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._messages: dict[int, int] = {}

    def set(self, chat_id: int, message_id: int) -> None:
        with self._lock:
            self._messages[chat_id] = message_id

    def get(self, chat_id: int) -> int | None:
        """Return the stored message id, or None if the chat has none."""
        with self._lock:
            return self._messages.get(chat_id)

    def clear(self, chat_id: int) -> None:
        with self._lock:
            self._messages.pop(chat_id, None)