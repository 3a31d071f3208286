from aiogram import Router, F
from aiogram.filters import Command
from aiogram.types import Message, CallbackQuery

from fintracker.keyboards.screens import balance_screen
from fintracker.services.screens import ScreenRegistry
from fintracker.utils.date_ranges import PeriodFilter

transactions_router = Router()


@transactions_router.message(Command("balance"))
async def handle_balance(message: Message, screens: ScreenRegistry):
    """Экран баланса: сумма, диаграмма по категориям и список операций за период."""
    controller = screens.transactions(message.from_user.id)
    controller.fetch_transactions()
    shown = balance_screen(controller.value)
    text, markup = shown
    msg = await message.answer(text, reply_markup=markup, parse_mode="HTML")
    await screens.bind(message.from_user.id, "transactions", msg, controller, balance_screen, shown)


@transactions_router.callback_query(F.data.startswith("tx:type:"))
async def on_type(cb: CallbackQuery, screens: ScreenRegistry):
    screens.transactions(cb.from_user.id).on_type_selected(cb.data.split(":", 2)[2])
    await cb.answer()


@transactions_router.callback_query(F.data.startswith("tx:period:"))
async def on_period(cb: CallbackQuery, screens: ScreenRegistry):
    period = PeriodFilter[cb.data.split(":", 2)[2]]
    screens.transactions(cb.from_user.id).on_filter_changed(period)
    await cb.answer(period.value)


@transactions_router.callback_query(F.data == "tx:refresh")
async def on_refresh(cb: CallbackQuery, screens: ScreenRegistry):
    screens.transactions(cb.from_user.id).fetch_transactions()
    await cb.answer("Обновляю…")
