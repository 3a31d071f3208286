"""
Производные представления над снимком состояния.

Чистые функции: ничего не кэшируют и пересчитываются при каждом чтении.
"""
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Sequence

from fintracker.constants.constants import (
    CHART_PALETTE, CHART_START_ANGLE, FULL_CIRCLE, TAB_TYPES, INCOME,
)
from fintracker.presentation.controller import ListUiState
from fintracker.remote.dto import Category, Transaction
from fintracker.utils.date_ranges import PeriodFilter, get_period_range


@dataclass(frozen=True)
class ChartSegment:
    category: Category
    start_angle: float
    sweep_angle: float
    color: str


def filter_by_tab(state: ListUiState, tab_index: int) -> list[Category]:
    """Категории вкладки: 0 — "Gasto", любая другая — "Ingreso". Порядок items сохраняется."""
    wanted = TAB_TYPES.get(tab_index, INCOME)
    return [c for c in state.items if c.type == wanted]


def filter_by_type(transactions: Iterable[Transaction], tx_type: str) -> list[Transaction]:
    return [t for t in transactions if t.type == tx_type]


def filter_by_period(
    transactions: Iterable[Transaction],
    period: PeriodFilter,
    now: datetime | None = None,
) -> list[Transaction]:
    start, end = get_period_range(period, now)
    return [t for t in transactions if start <= t.date <= end]


def total_amount(transactions: Iterable[Transaction]) -> Decimal:
    return sum((t.amount for t in transactions), Decimal("0"))


def group_and_sum(transactions: Iterable[Transaction]) -> dict[Category, Decimal]:
    """
    Суммы по категориям.

    Группировка по id категории; ключ — первая встреченная запись категории,
    порядок ключей — порядок первого появления. Сумма значений равна сумме
    всех входных amount.
    """
    first_seen: dict[int, Category] = {}
    sums: dict[int, Decimal] = {}
    for t in transactions:
        cid = t.category.id
        if cid not in first_seen:
            first_seen[cid] = t.category
            sums[cid] = Decimal("0")
        sums[cid] += t.amount
    return {first_seen[cid]: sums[cid] for cid in first_seen}


def chart_segments(grouped: dict[Category, Decimal], total: Decimal | float) -> list[ChartSegment]:
    """
    Сегменты круговой диаграммы.

    Угол сегмента пропорционален доле категории в `total`, отсчёт от -90°
    (12 часов). Цвета по кругу из фиксированной палитры в порядке ключей.
    """
    if not total:
        return []
    segments: list[ChartSegment] = []
    start = CHART_START_ANGLE
    for i, (category, amount) in enumerate(grouped.items()):
        sweep = float(amount) / float(total) * FULL_CIRCLE
        segments.append(ChartSegment(
            category=category,
            start_angle=start,
            sweep_angle=sweep,
            color=CHART_PALETTE[i % len(CHART_PALETTE)],
        ))
        start += sweep
    return segments


def segment_shares(segments: Sequence[ChartSegment]) -> list[tuple[str, float]]:
    """(имя категории, доля в процентах) — для текстовой легенды."""
    return [(s.category.name, s.sweep_angle / FULL_CIRCLE * 100) for s in segments]
