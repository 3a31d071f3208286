import asyncio
import logging
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal

from aiogram.exceptions import TelegramNetworkError

from fintracker.keyboards.screens import (
    categories_screen, kb_balance, kb_categories, render_balance, render_categories, render_goals,
)
from fintracker.presentation.categories import CategoryUiState
from fintracker.presentation.goals import SavingsGoalUiState
from fintracker.presentation.state import StateHolder
from fintracker.presentation.transactions import TransactionUiState
from fintracker.remote.dto import Category, SavingsGoal, Transaction
from fintracker.services.screens import LiveScreen
from fintracker.utils.alerts import TelegramAlertHandler
from fintracker.utils.date_ranges import PeriodFilter
from fintracker.utils.formatting import fmt_money, parse_amount, progress_bar

FOOD = Category(id=1, name="Food", type="Gasto", icon="🍔")
SALARY = Category(id=2, name="Salary", type="Ingreso", icon="💵")
NOW = datetime(2025, 7, 16, 12, 0)


class FakeMessage:
    def __init__(self):
        self.edits = []

    async def edit_text(self, text, reply_markup=None, parse_mode=None):
        await asyncio.sleep(0)
        self.edits.append(text)


def test_render_categories_shows_selected_tab_and_error():
    state = CategoryUiState(items=(FOOD, SALARY), error="network timeout")

    text = render_categories(state)
    assert "Food" in text and "Salary" not in text
    assert "⚠️ network timeout" in text

    text = render_categories(replace(state, selected_tab_index=1))
    assert "Salary" in text and "Food" not in text


def test_render_categories_escapes_html():
    state = CategoryUiState(items=(Category(id=3, name="<b>x</b>", type="Gasto"),))

    assert "&lt;b&gt;x&lt;/b&gt;" in render_categories(state)


def test_kb_categories_marks_active_tab():
    markup = kb_categories(CategoryUiState(selected_tab_index=1))
    tabs = markup.inline_keyboard[0]

    assert [b.callback_data for b in tabs] == ["cat:tab:0", "cat:tab:1"]
    assert tabs[1].text.startswith("● ")
    assert not tabs[0].text.startswith("● ")


def test_render_balance_lists_chart_legend_and_transactions():
    items = (
        Transaction(id=1, amount=Decimal("300"), category=FOOD, date=date(2025, 7, 15), type="Gastos"),
        Transaction(id=2, amount=Decimal("100"), category=SALARY, date=date(2025, 7, 15), type="Ingresos"),
    )
    text = render_balance(TransactionUiState(items=items), NOW)

    assert "<b>300 RD$</b>" in text
    assert "Food — 100.0%" in text
    assert "15/07/2025" in text


def test_render_balance_empty_period():
    text = render_balance(TransactionUiState(selected_filter=PeriodFilter.DAY), NOW)

    assert "За этот период операций не было." in text


def test_kb_balance_period_buttons():
    markup = kb_balance(TransactionUiState(selected_filter=PeriodFilter.MONTH))
    periods = markup.inline_keyboard[1]

    assert [b.callback_data for b in periods] == ["tx:period:DAY", "tx:period:WEEK", "tx:period:MONTH", "tx:period:YEAR"]
    assert periods[2].text == "● Mes"


def test_render_goals_progress():
    goal = SavingsGoal(id=1, name="Viaje", target_amount=Decimal("1000"), saved_amount=Decimal("300"))
    text = render_goals(SavingsGoalUiState(items=(goal,), goal_created=True))

    assert "✅ Цель создана" in text
    assert "▰▰▰▱▱▱▱▱▱▱ 300 RD$ / 1 000 RD$" in text


def test_live_screen_edits_message_with_latest_snapshot_only():
    async def scenario():
        holder = StateHolder(CategoryUiState())
        message = FakeMessage()
        live = LiveScreen(message, holder.as_readonly(), categories_screen, shown=categories_screen(holder.value))
        holder.publish(replace(holder.value, is_loading=True))
        holder.publish(replace(holder.value, is_loading=False, items=(FOOD,)))
        await live.close()
        holder.publish(replace(holder.value, items=()))
        return message.edits

    edits = asyncio.run(scenario())
    assert len(edits) == 1
    assert "Food" in edits[0]


class FlakyMessage(FakeMessage):
    """Первая правка падает с сетевой ошибкой Telegram, остальные проходят."""

    def __init__(self):
        super().__init__()
        self.attempts = 0

    async def edit_text(self, text, reply_markup=None, parse_mode=None):
        self.attempts += 1
        if self.attempts == 1:
            raise TelegramNetworkError(method=None, message="net down")
        await super().edit_text(text, reply_markup=reply_markup, parse_mode=parse_mode)


def test_live_screen_survives_telegram_network_error():
    async def scenario():
        holder = StateHolder(CategoryUiState())
        message = FlakyMessage()
        live = LiveScreen(message, holder.as_readonly(), categories_screen, shown=categories_screen(holder.value))
        holder.publish(replace(holder.value, is_loading=True))
        for _ in range(3):
            await asyncio.sleep(0)
        assert live._worker.done()
        assert live._worker.exception() is None

        holder.publish(replace(holder.value, is_loading=False, items=(FOOD,)))
        await live.close()
        return message

    message = asyncio.run(scenario())
    assert message.attempts == 2
    assert len(message.edits) == 1
    assert "Food" in message.edits[0]


def test_formatting_helpers():
    assert fmt_money(Decimal("1234.5")) == "1 234.50 RD$"
    assert fmt_money(1234, "") == "1 234"
    assert fmt_money(None) == "—"
    assert progress_bar(0.5) == "▰▰▰▰▰▱▱▱▱▱"
    assert progress_bar(3) == "▰" * 10
    assert parse_amount("12,50") == Decimal("12.50")
    assert parse_amount("-1") is None
    assert parse_amount("abc") is None


def test_alert_handler_is_noop_without_token():
    handler = TelegramAlertHandler(token="", chat_ids="123, -1001234567890, oops")

    assert handler.parse_chat_ids("123, -1001234567890, oops") == [123, -1001234567890]
    assert handler.enabled is False
    handler.emit(logging.LogRecord("x", logging.ERROR, __file__, 1, "boom", None, None))
