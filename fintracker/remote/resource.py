from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Loading:
    """Операция запущена, результата пока нет."""


@dataclass(frozen=True)
class Success(Generic[T]):
    """Операция завершилась успешно. `data` может быть None, если бэкенд вернул пустое тело."""
    data: T | None = None


@dataclass(frozen=True)
class Error:
    """Операция завершилась ошибкой.

    `message` показывается пользователю как есть, `cause` — исходное исключение
    (не участвует в сравнении).
    """
    message: str
    cause: BaseException | None = field(default=None, compare=False, repr=False)


Resource = Union[Loading, Success[T], Error]
