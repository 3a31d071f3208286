"""
Настройка логирования FinTracker и алерты в Telegram.

`setup_logging()` задаёт формат и уровень корневого логгера (`LOG_LEVEL`) и
подключает `TelegramAlertHandler`, который пересылает записи уровня WARNING
и выше через отдельного бота для алертов.

Переменные окружения:
- TELEGRAM_BOT_ALERT — токен бота для алертов.
- TELEGRAM_ALERT_CHAT_ID — идентификатор(-ы) чатов через запятую,
  например "123456789,-1001234567890". Без них обработчик ничего не отправляет.
"""
import asyncio
import logging
from typing import List, Optional

from aiogram import Bot

from fintracker.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


class TelegramAlertHandler(logging.Handler):
    """Отправляет записи WARNING+ в чаты алертов. Без токена или чатов — no-op."""

    def __init__(self, level: int = logging.WARNING, token: Optional[str] = None, chat_ids: Optional[str] = None) -> None:
        super().__init__(level=level)
        token = token if token is not None else settings.TELEGRAM_BOT_ALERT
        self._chat_ids: List[int] = self.parse_chat_ids(
            chat_ids if chat_ids is not None else settings.TELEGRAM_ALERT_CHAT_ID
        )
        self._bot: Optional[Bot] = Bot(token=token) if token else None

    @property
    def enabled(self) -> bool:
        return self._bot is not None and bool(self._chat_ids)

    @staticmethod
    def parse_chat_ids(raw: Optional[str]) -> List[int]:
        if not raw:
            return []
        ids: List[int] = []
        for part in raw.split(","):
            part = part.strip()
            if not part:
                continue
            try:
                ids.append(int(part))
            except ValueError:
                continue
        return ids

    def emit(self, record: logging.LogRecord) -> None:
        if not self.enabled:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # вне цикла событий отправить некуда
            return
        try:
            loop.create_task(self._send(self.format(record)))
        except Exception:
            self.handleError(record)

    async def _send(self, text: str) -> None:
        assert self._bot is not None
        for chat_id in self._chat_ids:
            try:
                await self._bot.send_message(chat_id=chat_id, text=f"🚨 FinTracker alert:\n{text[:3500]}")
            except Exception:
                continue


def setup_logging() -> None:
    """Формат и уровень корневого логгера + алерт-обработчик.

    Функцию можно вызывать многократно — дубликаты обработчиков не добавляются.
    """
    root = logging.getLogger()
    root.setLevel(settings.LOG_LEVEL.upper())
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    if not any(type(h) is logging.StreamHandler for h in root.handlers):
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        root.addHandler(console)

    if not any(isinstance(h, TelegramAlertHandler) for h in root.handlers):
        handler = TelegramAlertHandler(level=logging.WARNING)
        if handler.enabled:
            handler.setFormatter(formatter)
            root.addHandler(handler)
