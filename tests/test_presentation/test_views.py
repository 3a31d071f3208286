import asyncio
from datetime import date, datetime
from decimal import Decimal

import pytest

from fintracker.constants.constants import CHART_PALETTE
from fintracker.presentation.controller import ListUiState
from fintracker.presentation.transactions import TransactionController
from fintracker.presentation.views import (
    chart_segments, filter_by_period, filter_by_tab, group_and_sum, segment_shares, total_amount,
)
from fintracker.remote.dto import Category, Transaction
from fintracker.remote.resource import Loading, Success
from fintracker.utils.date_ranges import PeriodFilter, get_period_range

FOOD = Category(id=1, name="Food", type="Gasto", icon="🍔", color="#FF0000")
BUS = Category(id=2, name="Bus", type="Gasto", icon="🚌", color="#03A9F4")
SALARY = Category(id=3, name="Salary", type="Ingreso", icon="💵", color="#4CAF50")

# Среда, 16 июля 2025
NOW = datetime(2025, 7, 16, 18, 30)


def tx(id, amount, category, day, type="Gastos"):
    return Transaction(id=id, amount=Decimal(amount), category=category, date=day, type=type)


def test_filter_by_tab_partitions_items():
    state = ListUiState(items=(FOOD, SALARY, BUS))

    expenses = filter_by_tab(state, 0)
    incomes = filter_by_tab(state, 1)

    assert expenses == [FOOD, BUS]
    assert incomes == [SALARY]
    assert set(expenses) | set(incomes) == set(state.items)
    assert not set(expenses) & set(incomes)


def test_group_and_sum_conserves_total_and_keeps_first_seen_order():
    items = [
        tx(1, "100.50", BUS, NOW.date()),
        tx(2, "20", FOOD, NOW.date()),
        tx(3, "0.25", BUS, NOW.date()),
        tx(4, "79.25", FOOD, NOW.date()),
    ]
    grouped = group_and_sum(items)

    assert list(grouped) == [BUS, FOOD]
    assert grouped[BUS] == Decimal("100.75")
    assert sum(grouped.values()) == total_amount(items) == Decimal("200.00")


def test_chart_segments_cover_full_circle():
    grouped = {FOOD: Decimal("50"), BUS: Decimal("30"), SALARY: Decimal("20")}
    segments = chart_segments(grouped, Decimal("100"))

    assert [s.sweep_angle for s in segments] == pytest.approx([180.0, 108.0, 72.0])
    assert sum(s.sweep_angle for s in segments) == pytest.approx(360.0)
    assert segments[0].start_angle == -90.0
    assert segments[1].start_angle == pytest.approx(90.0)
    assert [s.color for s in segments] == CHART_PALETTE[:3]
    assert segment_shares(segments)[0] == ("Food", pytest.approx(50.0))


def test_chart_colors_cycle_through_palette():
    categories = [Category(id=i, name=f"c{i}", type="Gasto") for i in range(len(CHART_PALETTE) + 1)]
    segments = chart_segments({c: Decimal("1") for c in categories}, Decimal(len(categories)))

    assert segments[-1].color == CHART_PALETTE[0]


def test_chart_segments_empty_when_total_is_zero():
    assert chart_segments({}, Decimal("0")) == []


def test_period_ranges():
    assert get_period_range(PeriodFilter.DAY, NOW) == (date(2025, 7, 16), date(2025, 7, 16))
    assert get_period_range(PeriodFilter.WEEK, NOW) == (date(2025, 7, 14), date(2025, 7, 16))
    assert get_period_range(PeriodFilter.MONTH, NOW) == (date(2025, 7, 1), date(2025, 7, 16))
    assert get_period_range("Año", NOW) == (date(2025, 1, 1), date(2025, 7, 16))


def test_filter_by_period():
    items = [
        tx(1, "10", FOOD, date(2025, 7, 16)),
        tx(2, "10", FOOD, date(2025, 7, 13)),
        tx(3, "10", FOOD, date(2025, 6, 30)),
    ]
    assert [t.id for t in filter_by_period(items, PeriodFilter.WEEK, NOW)] == [1]
    assert [t.id for t in filter_by_period(items, PeriodFilter.MONTH, NOW)] == [1, 2]
    assert [t.id for t in filter_by_period(items, PeriodFilter.YEAR, NOW)] == [1, 2, 3]


def test_transaction_controller_balance_and_chart(scripted_repository):
    items = [
        tx(1, "300", FOOD, date(2025, 7, 15)),
        tx(2, "100", BUS, date(2025, 7, 16)),
        tx(3, "5000", SALARY, date(2025, 7, 15), type="Ingresos"),
        tx(4, "999", FOOD, date(2025, 5, 1)),
    ]
    repo = scripted_repository(fetches=[[Loading(), Success(items)]])

    async def scenario():
        controller = TransactionController(repo)
        await controller.join()
        return controller

    controller = asyncio.run(scenario())
    assert controller.balance(NOW) == Decimal("400")
    assert [(s.category, s.sweep_angle) for s in controller.chart(NOW)] == [(FOOD, 270.0), (BUS, 90.0)]

    controller.on_type_selected("Ingresos")
    assert controller.balance(NOW) == Decimal("5000")

    controller.on_type_selected("Gastos")
    controller.on_filter_changed("Año")
    assert controller.balance(NOW) == Decimal("1399")
