from __future__ import annotations
import logging
from typing import Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

S = TypeVar("S")
Observer = Callable[[S], None]


class ReadOnlyState(Generic[S]):
    """Наблюдаемое состояние только для чтения — то, что получает экран."""

    def __init__(self, holder: "StateHolder[S]"):
        self._holder = holder

    @property
    def value(self) -> S:
        return self._holder.value

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        return self._holder.subscribe(observer)


class StateHolder(Generic[S]):
    """
    Контейнер неизменяемого снимка UI-состояния.

    Снимок заменяется целиком в `publish`; наблюдатели получают новый снимок
    после замены и никогда не видят частично обновлённое состояние.
    """

    def __init__(self, initial: S):
        """
        :param initial: Состояние по умолчанию, с которым создаётся экран.
        """
        self._value = initial
        self._observers: list[Observer] = []

    @property
    def value(self) -> S:
        return self._value

    def publish(self, new_state: S) -> None:
        if new_state is self._value:
            return
        self._value = new_state
        for observer in list(self._observers):
            try:
                observer(new_state)
            except Exception:
                logger.exception("[STATE] observer failed")

    def update(self, fn: Callable[[S], S]) -> None:
        self.publish(fn(self._value))

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Подписывает наблюдателя; возвращает функцию отписки."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def as_readonly(self) -> ReadOnlyState[S]:
        return ReadOnlyState(self)
