"""Minimal Telegram Bot API client and update dispatcher."""

from __future__ import annotations

import json
import logging
import threading
from typing import Any, Callable, Iterable

import httpx

API_URL = "https://api.telegram.org"
PARSE_MODE_HTML = "HTML"
DEFAULT_HTTP_TIMEOUT = 30.0
POLL_TIMEOUT_SECONDS = 30
POLL_RETRY_SECONDS = 3.0

BOT_COMMANDS: tuple[dict[str, str], ...] = (
    {"command": "start", "description": "Перезапустить бота"},
)

Update = dict[str, Any]
Handler = Callable[[Update], None]
Predicate = Callable[[Update], bool]

log = logging.getLogger(__name__)


class TelegramError(Exception):
    """Raised when a Bot API request fails or is rejected."""

    def __init__(self, message: str, error_code: int | None = None) -> None:
        super().__init__(message)
        self.error_code = error_code


def _without_none(params: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in params.items() if value is not None}


class TelegramAPI:
    """Calls Bot API methods over HTTP and returns their results."""

    def __init__(
        self,
        token: str,
        *,
        client: httpx.Client | None = None,
        base_url: str = API_URL,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
    ) -> None:
        if not token:
            raise TelegramError("empty token")
        self._base = f"{base_url.rstrip('/')}/bot{token}"
        self._client = client if client is not None else httpx.Client(timeout=timeout)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> TelegramAPI:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _call(
        self,
        method: str,
        params: dict[str, Any] | None = None,
        *,
        files: dict[str, tuple[str, bytes]] | None = None,
        timeout: float | None = None,
    ) -> Any:
        url = f"{self._base}/{method}"
        extra: dict[str, Any] = {}
        if timeout is not None:
            extra["timeout"] = timeout
        try:
            if files:
                response = self._client.post(url, data=params or {}, files=files, **extra)
            else:
                response = self._client.post(url, json=_without_none(params or {}), **extra)
        except httpx.HTTPError as exc:
            raise TelegramError(f"{method}: {exc}") from exc
        try:
            payload = response.json()
        except ValueError as exc:
            raise TelegramError(
                f"{method}: invalid response (HTTP {response.status_code})"
            ) from exc
        if not isinstance(payload, dict):
            raise TelegramError(f"{method}: invalid response (HTTP {response.status_code})")
        if not payload.get("ok"):
            description = payload.get("description", f"HTTP {response.status_code}")
            raise TelegramError(f"{method}: {description}", payload.get("error_code"))
        return payload.get("result")

    def send_message(
        self,
        chat_id: int,
        text: str,
        reply_markup: dict[str, Any] | None = None,
        parse_mode: str | None = None,
    ) -> dict[str, Any]:
        return self._call(
            "sendMessage",
            {
                "chat_id": chat_id,
                "text": text,
                "reply_markup": reply_markup,
                "parse_mode": parse_mode,
            },
        )

    def edit_message_text(
        self,
        chat_id: int,
        message_id: int,
        text: str,
        reply_markup: dict[str, Any] | None = None,
        parse_mode: str | None = None,
    ) -> Any:
        return self._call(
            "editMessageText",
            {
                "chat_id": chat_id,
                "message_id": message_id,
                "text": text,
                "reply_markup": reply_markup,
                "parse_mode": parse_mode,
            },
        )

    def edit_message_photo(
        self,
        chat_id: int,
        message_id: int,
        file_path: str,
        caption: str = "",
        reply_markup: dict[str, Any] | None = None,
    ) -> Any:
        """Replace a message's media with the photo at ``file_path``; OSError if unreadable."""
        with open(file_path, "rb") as handle:
            content = handle.read()
        name = str(file_path).split("/")[-1]
        media: dict[str, Any] = {"type": "photo", "media": f"attach://{name}"}
        if caption:
            media["caption"] = caption
        form = {
            "chat_id": str(chat_id),
            "message_id": str(message_id),
            "media": json.dumps(media, ensure_ascii=False),
        }
        if reply_markup is not None:
            form["reply_markup"] = json.dumps(reply_markup, ensure_ascii=False)
        return self._call("editMessageMedia", form, files={name: (name, content)})

    def delete_message(self, chat_id: int, message_id: int) -> bool:
        return bool(self._call("deleteMessage", {"chat_id": chat_id, "message_id": message_id}))

    def answer_callback_query(self, callback_query_id: str) -> bool:
        return bool(self._call("answerCallbackQuery", {"callback_query_id": callback_query_id}))

    def set_my_commands(self, commands: Iterable[dict[str, str]]) -> bool:
        return bool(self._call("setMyCommands", {"commands": list(commands)}))

    def get_updates(self, offset: int = 0, timeout: int = 0) -> list[Update]:
        """Long-poll for updates starting at ``offset``."""
        result = self._call(
            "getUpdates",
            {"offset": offset, "timeout": timeout},
            timeout=timeout + DEFAULT_HTTP_TIMEOUT,
        )
        return list(result or [])


def _message_text(update: Update) -> str | None:
    message = update.get("message")
    return message.get("text") if isinstance(message, dict) else None


def _callback_data(update: Update) -> str | None:
    query = update.get("callback_query")
    return query.get("data") if isinstance(query, dict) else None


class Dispatcher:
    """Routes updates to the first registered handler whose condition matches."""

    def __init__(
        self,
        api: Any,
        *,
        poll_timeout: int = POLL_TIMEOUT_SECONDS,
        retry_delay: float = POLL_RETRY_SECONDS,
    ) -> None:
        self._api = api
        self._routes: list[tuple[Predicate, Handler]] = []
        self._poll_timeout = poll_timeout
        self._retry_delay = retry_delay

    def register_text(self, text: str, handler: Handler) -> None:
        """Handle messages whose text equals ``text``."""
        self._routes.append((lambda update: _message_text(update) == text, handler))

    def register_callback(self, data: str, handler: Handler, prefix: bool = False) -> None:
        """Handle callback queries whose data equals (or, with ``prefix``, starts with) ``data``."""

        def matches(update: Update) -> bool:
            value = _callback_data(update)
            if value is None:
                return False
            return value.startswith(data) if prefix else value == data

        self._routes.append((matches, handler))

    def register_match(self, predicate: Predicate, handler: Handler) -> None:
        self._routes.append((predicate, handler))

    def dispatch(self, update: Update) -> bool:
        """Run the first matching handler; return whether one was found."""
        for predicate, handler in self._routes:
            if predicate(update):
                handler(update)
                return True
        return False

    def run_polling(self, stop_event: threading.Event | None = None) -> None:
        """Fetch and dispatch updates until ``stop_event`` is set."""
        stop = stop_event if stop_event is not None else threading.Event()
        offset = 0
        while not stop.is_set():
            try:
                updates = self._api.get_updates(offset, self._poll_timeout)
            except TelegramError as exc:
                log.error("failed to get updates: %s", exc)
                stop.wait(self._retry_delay)
                continue
            for update in updates:
                update_id = update.get("update_id")
                if isinstance(update_id, int):
                    offset = max(offset, update_id + 1)
                try:
                    self.dispatch(update)
                except Exception:
                    log.exception("handler failed for update %s", update_id)