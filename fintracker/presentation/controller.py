"""
Контроллер состояния экрана поверх асинхронных потоков Resource.

Каждая операция экрана (например, "fetch" или "create") — это поток событий
Loading → Success/Error от репозитория. Контроллер применяет к текущему
снимку чистую функцию свёртки и публикует результат наблюдателям.
Повторный `start` той же операции вытесняет предыдущую подписку:
её поздние события отбрасываются по счётчику поколений.
"""
from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass, replace
from typing import AsyncIterator, Callable, Generic, TypeVar

from fintracker.presentation.state import ReadOnlyState, StateHolder
from fintracker.remote.resource import Error, Loading, Resource, Success

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ListUiState:
    """Общая часть снимка экрана со списком: записи, флаг загрузки, ошибка."""
    items: tuple = ()
    is_loading: bool = False
    error: str | None = None


S = TypeVar("S", bound=ListUiState)
Operation = Callable[[], AsyncIterator[Resource]]
Fold = Callable[[S, Resource], S]


def fold_replace(current: S, event: Resource) -> S:
    """Свёртка для загрузки списка: Success заменяет items целиком.

    Loading не сбрасывает прежнюю ошибку — она очищается только на Success.
    """
    if isinstance(event, Loading):
        return replace(current, is_loading=True)
    if isinstance(event, Success):
        if event.data is None:
            return replace(current, is_loading=False)
        return replace(current, is_loading=False, error=None, items=tuple(event.data))
    if isinstance(event, Error):
        return replace(current, is_loading=False, error=event.message)
    raise TypeError(f"Unknown resource event: {event!r}")


def fold_append(current: S, event: Resource) -> S:
    """Свёртка для создания записи: Success добавляет созданную запись в конец items."""
    if isinstance(event, Success):
        if event.data is None:
            return replace(current, is_loading=False)
        return replace(current, is_loading=False, error=None, items=current.items + (event.data,))
    return fold_replace(current, event)


class ResourceController(Generic[S]):
    """
    Владелец одного UI-состояния и его операций.

    Все изменения состояния проходят через `publish` в цикле событий
    контроллера. Ошибки репозитория и исключения потоков не выходят наружу:
    они сворачиваются в `error` снимка.
    """

    def __init__(self, initial: S):
        self._holder: StateHolder[S] = StateHolder(initial)
        self._generations: dict[str, int] = {}
        self._current: dict[str, asyncio.Task] = {}
        self._tasks: set[asyncio.Task] = set()
        self._closed = False

    @property
    def state(self) -> ReadOnlyState[S]:
        return self._holder.as_readonly()

    @property
    def value(self) -> S:
        return self._holder.value

    def publish(self, new_state: S) -> None:
        self._holder.publish(new_state)

    def update(self, fn: Callable[[S], S]) -> None:
        self._holder.update(fn)

    def start(
        self,
        name: str,
        operation: Operation,
        fold: Fold = fold_replace,
        on_success: Callable[[Success], None] | None = None,
    ) -> asyncio.Task | None:
        """
        Запускает потребление потока операции `name`.

        :param name: Логическое имя операции; новый запуск вытесняет прежний.
        :param operation: Фабрика потока Resource (вызывается внутри задачи).
        :param fold: Чистая функция свёртки события в состояние.
        :param on_success: Вызывается после свёртки Success (например, для обновления списка).
        :return: Задача, потребляющая поток; None, если контроллер уже закрыт.
        """
        if self._closed:
            logger.warning(f"[{name}] {type(self).__name__} is closed, operation ignored")
            return None

        generation = self._generations.get(name, 0) + 1
        self._generations[name] = generation

        task = asyncio.get_running_loop().create_task(
            self._consume(name, generation, operation, fold, on_success),
            name=f"{type(self).__name__}:{name}:{generation}",
        )
        self._current[name] = task
        self._tasks.add(task)
        task.add_done_callback(lambda t: self._forget(name, t))
        return task

    def is_current(self, name: str, generation: int) -> bool:
        return self._generations.get(name) == generation

    async def join(self, name: str | None = None) -> None:
        """Ждёт завершения текущих операций (или только операции `name`)."""
        while True:
            pending = [
                t for n, t in self._current.items()
                if (name is None or n == name) and not t.done()
            ]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    async def close(self) -> None:
        """Экран уничтожен: отменяет все подписки контроллера."""
        self._closed = True
        tasks = list(self._tasks)
        for t in tasks:
            t.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _consume(self, name, generation, operation, fold, on_success) -> None:
        stream = None
        try:
            stream = operation()
            async for event in stream:
                if not self.is_current(name, generation):
                    logger.debug(f"[{name}] dropped late event from superseded subscription: {event!r}")
                    break
                self.publish(fold(self.value, event))
                if isinstance(event, Success) and on_success is not None:
                    try:
                        on_success(event)
                    except Exception:
                        logger.exception(f"[{name}] on_success callback failed")
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.exception(f"[{name}] operation failed")
            if self.is_current(name, generation):
                self.publish(fold(self.value, Error(str(e) or type(e).__name__, cause=e)))
        finally:
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()

    def _forget(self, name: str, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if self._current.get(name) is task:
            del self._current[name]
