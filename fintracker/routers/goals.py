from aiogram import Router, F
from aiogram.filters import Command, CommandObject
from aiogram.types import Message, CallbackQuery

from fintracker.keyboards.screens import goals_screen
from fintracker.remote.dto import SavingsGoal
from fintracker.services.screens import ScreenRegistry
from fintracker.utils.formatting import fmt_money, parse_amount

goals_router = Router()


@goals_router.message(Command("goals"))
async def handle_goals(message: Message, screens: ScreenRegistry):
    controller = screens.goals(message.from_user.id)
    controller.acknowledge_created()
    controller.fetch_goals()
    shown = goals_screen(controller.value)
    text, markup = shown
    msg = await message.answer(text, reply_markup=markup, parse_mode="HTML")
    await screens.bind(message.from_user.id, "goals", msg, controller, goals_screen, shown)


@goals_router.callback_query(F.data == "goal:refresh")
async def on_refresh(cb: CallbackQuery, screens: ScreenRegistry):
    screens.goals(cb.from_user.id).fetch_goals()
    await cb.answer("Обновляю…")


@goals_router.message(Command("goal_add"))
async def handle_goal_add(message: Message, command: CommandObject, screens: ScreenRegistry):
    """`/goal_add <название> <сумма>` — новая цель накоплений."""
    args = (command.args or "").rsplit(maxsplit=1)
    amount = parse_amount(args[1]) if len(args) == 2 else None
    if amount is None:
        await message.answer("Формат: /goal_add <название> <сумма>, например /goal_add Отпуск 50000")
        return

    controller = screens.goals(message.from_user.id)
    controller.create_goal(SavingsGoal(name=args[0].strip(), target_amount=amount))
    await controller.join("create")
    if controller.value.error:
        await message.answer(f"⚠️ Не удалось создать цель: {controller.value.error}")
    else:
        await message.answer(f"✅ Цель «{args[0].strip()}» на {fmt_money(amount)} создана. Список: /goals")
