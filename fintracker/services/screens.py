"""
Экраны бота поверх контроллеров.

`ScreenRegistry` держит контроллеры каждого пользователя (по аналогии с
кэшем пользовательских настроек), `LiveScreen` — сообщение Telegram,
которое перерисовывается при каждой публикации состояния контроллера.
"""
from __future__ import annotations
import asyncio
import logging
from typing import Callable, Generic, TypeVar

from aiogram.exceptions import TelegramAPIError, TelegramBadRequest
from aiogram.types import InlineKeyboardMarkup, Message

from fintracker.presentation.categories import CategoryController
from fintracker.presentation.controller import ResourceController
from fintracker.presentation.goals import SavingsGoalController
from fintracker.presentation.state import ReadOnlyState
from fintracker.presentation.transactions import TransactionController
from fintracker.remote.api import FinTrackerApi
from fintracker.repo.repo import CategoryRepository, SavingsGoalRepository, TransactionRepository

logger = logging.getLogger(__name__)

S = TypeVar("S")
Render = Callable[[S], tuple[str, InlineKeyboardMarkup]]


class LiveScreen(Generic[S]):
    """Наблюдатель состояния: держит последнее сообщение экрана в актуальном виде.

    Правки сообщения идут последовательно; если за время правки состояние
    поменялось несколько раз, показывается только последний снимок.
    """

    def __init__(self, message: Message, state: ReadOnlyState[S], render: Render, shown: tuple[str, InlineKeyboardMarkup] | None = None):
        """
        :param message: Сообщение бота, которое показывает экран.
        :param state: Наблюдаемое состояние контроллера.
        :param render: Снимок -> (текст, клавиатура).
        :param shown: То, с чем сообщение уже отправлено (чтобы не править его впустую).
        """
        self.message = message
        self._render = render
        self._shown: tuple[str, InlineKeyboardMarkup] | None = shown
        self._latest: tuple[str, InlineKeyboardMarkup] | None = None
        self._worker: asyncio.Task | None = None
        self._unsubscribe = state.subscribe(self._on_state)
        self._on_state(state.value)

    def _on_state(self, value: S) -> None:
        self._latest = self._render(value)
        if self._worker is None or self._worker.done():
            self._worker = asyncio.get_running_loop().create_task(self._flush())

    async def _flush(self) -> None:
        while self._latest is not None and self._latest != self._shown:
            text, markup = self._latest
            try:
                await self.message.edit_text(text, reply_markup=markup, parse_mode="HTML")
            except TelegramBadRequest as e:
                # "message is not modified" или сообщение уже удалено
                logger.warning(f"[SCREEN] edit failed: {e}")
            except TelegramAPIError as e:
                # сеть, RetryAfter и прочее: снимок пропускается, следующий придёт с новой публикацией
                logger.warning(f"[SCREEN] telegram error: {e}")
            except Exception:
                logger.exception("[SCREEN] edit crashed")
            self._shown = (text, markup)

    async def close(self) -> None:
        self._unsubscribe()
        if self._worker is not None and not self._worker.done():
            await self._worker


class ScreenRegistry:
    """Контроллеры экранов по пользователям; бэкенд (FinTrackerApi) общий."""

    def __init__(self, api: FinTrackerApi):
        self.api = api
        self._controllers: dict[tuple[int, str], ResourceController] = {}
        self._screens: dict[tuple[int, str], LiveScreen] = {}

    def categories(self, user_id: int) -> CategoryController:
        key = (user_id, "categories")
        if key not in self._controllers:
            self._controllers[key] = CategoryController(CategoryRepository(self.api))
        return self._controllers[key]

    def transactions(self, user_id: int) -> TransactionController:
        key = (user_id, "transactions")
        if key not in self._controllers:
            self._controllers[key] = TransactionController(TransactionRepository(self.api))
        return self._controllers[key]

    def goals(self, user_id: int) -> SavingsGoalController:
        key = (user_id, "goals")
        if key not in self._controllers:
            self._controllers[key] = SavingsGoalController(SavingsGoalRepository(self.api))
        return self._controllers[key]

    async def bind(
        self,
        user_id: int,
        screen: str,
        message: Message,
        controller: ResourceController,
        render: Render,
        shown: tuple[str, InlineKeyboardMarkup] | None = None,
    ) -> LiveScreen:
        """Привязывает сообщение к состоянию контроллера; прежнее сообщение экрана отвязывается."""
        key = (user_id, screen)
        old = self._screens.pop(key, None)
        if old is not None:
            await old.close()
        live = LiveScreen(message, controller.state, render, shown)
        self._screens[key] = live
        return live

    async def close(self) -> None:
        for live in self._screens.values():
            await live.close()
        self._screens.clear()
        for controller in self._controllers.values():
            await controller.close()
        self._controllers.clear()
