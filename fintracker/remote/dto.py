"""
DTO бэкенда FinTracker.

Бэкенд отдаёт JSON с испанскими именами полей (`categoriaId`, `nombre`, ...),
в Python используются английские имена через алиасы. Все модели неизменяемые,
идентичность записи — поле `id`.
"""
from __future__ import annotations

import enum
import datetime as dt
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

from fintracker.constants.constants import EXPENSE, INCOME


# Бэкенд ждёт суммы числами, а не строками
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CategoryType(str, enum.Enum):
    expense = EXPENSE
    income = INCOME


class _Dto(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_payload(self) -> dict:
        """Словарь для отправки на бэкенд (с алиасами, даты в ISO)."""
        return self.model_dump(mode="json", by_alias=True)


class Category(_Dto):
    id: int = Field(default=0, alias="categoriaId")
    name: str = Field(alias="nombre")
    # "Gasto" | "Ingreso"; форма не валидирует, поэтому допускается любая строка
    type: str = Field(alias="tipo")
    icon: str = Field(default="", alias="icono")
    color: str = Field(default="", alias="colorFondo")  # "#FF5733"


class Transaction(_Dto):
    id: int = Field(default=0, alias="transaccionId")
    amount: Money = Field(alias="monto")
    category: Category = Field(alias="categoria")
    date: dt.date = Field(alias="fecha")
    type: str = Field(alias="tipo")  # "Gastos" | "Ingresos"
    notes: str | None = Field(default=None, alias="notas")


class SavingsGoal(_Dto):
    id: int = Field(default=0, alias="metaAhorroId")
    name: str = Field(alias="nombreMeta")
    target_amount: Money = Field(alias="montoObjetivo")
    saved_amount: Money = Field(default=Decimal("0"), alias="montoActual")
    deadline: dt.date | None = Field(default=None, alias="fechaFinalizacion")

    @property
    def progress(self) -> float:
        """Доля накопленного от цели, в пределах [0, 1]."""
        if self.target_amount <= 0:
            return 0.0
        return float(min(max(self.saved_amount / self.target_amount, Decimal("0")), Decimal("1")))
