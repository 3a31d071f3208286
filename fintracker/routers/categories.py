from aiogram import Router, F
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import Message, CallbackQuery

from fintracker.constants.constants import FORM_COLORS, FORM_ICONS
from fintracker.keyboards.screens import (
    categories_screen, kb_form_colors, kb_form_icons, kb_form_type, render_category_draft,
)
from fintracker.services.screens import ScreenRegistry
from fintracker.states.form import CategoryForm
from fintracker.utils.formatting import safe_delete

categories_router = Router()


@categories_router.message(Command("categories"))
async def handle_categories(message: Message, screens: ScreenRegistry):
    """Показывает экран категорий и привязывает сообщение к состоянию контроллера."""
    controller = screens.categories(message.from_user.id)
    controller.fetch_categories()
    shown = categories_screen(controller.value)
    text, markup = shown
    msg = await message.answer(text, reply_markup=markup, parse_mode="HTML")
    await screens.bind(message.from_user.id, "categories", msg, controller, categories_screen, shown)


@categories_router.callback_query(F.data.startswith("cat:tab:"))
async def on_tab(cb: CallbackQuery, screens: ScreenRegistry):
    index = int(cb.data.split(":")[2])
    screens.categories(cb.from_user.id).on_tab_selected(index)
    await cb.answer()


@categories_router.callback_query(F.data == "cat:refresh")
async def on_refresh(cb: CallbackQuery, screens: ScreenRegistry):
    screens.categories(cb.from_user.id).fetch_categories()
    await cb.answer("Обновляю…")


# ----- Форма новой категории -----
@categories_router.callback_query(F.data == "cat:add")
async def on_add(cb: CallbackQuery, state: FSMContext, screens: ScreenRegistry):
    controller = screens.categories(cb.from_user.id)
    await state.set_state(CategoryForm.name)
    prompt = await cb.message.answer(
        render_category_draft(controller.value) + "\n\nВведите название категории:",
        parse_mode="HTML",
    )
    await state.update_data(prompt_msg_id=prompt.message_id)
    await cb.answer()


@categories_router.message(CategoryForm.name, F.text)
async def on_name(message: Message, state: FSMContext, screens: ScreenRegistry):
    controller = screens.categories(message.from_user.id)
    controller.on_name_change(message.text.strip())
    data = await state.get_data()
    await safe_delete(message.bot, message.chat.id, data.get("prompt_msg_id"))
    await state.set_state(CategoryForm.type)
    await message.answer(render_category_draft(controller.value), reply_markup=kb_form_type(), parse_mode="HTML")


@categories_router.callback_query(CategoryForm.type, F.data.startswith("catform:type:"))
async def on_type(cb: CallbackQuery, state: FSMContext, screens: ScreenRegistry):
    controller = screens.categories(cb.from_user.id)
    controller.on_type_change(cb.data.split(":", 2)[2])
    await state.set_state(CategoryForm.icon)
    await cb.message.edit_text(render_category_draft(controller.value), reply_markup=kb_form_icons(), parse_mode="HTML")
    await cb.answer()


@categories_router.callback_query(CategoryForm.icon, F.data.startswith("catform:icon:"))
async def on_icon(cb: CallbackQuery, state: FSMContext, screens: ScreenRegistry):
    controller = screens.categories(cb.from_user.id)
    controller.on_icon_change(FORM_ICONS[int(cb.data.split(":")[2])])
    await state.set_state(CategoryForm.color)
    await cb.message.edit_text(render_category_draft(controller.value), reply_markup=kb_form_colors(), parse_mode="HTML")
    await cb.answer()


@categories_router.callback_query(CategoryForm.color, F.data.startswith("catform:color:"))
async def on_color(cb: CallbackQuery, state: FSMContext, screens: ScreenRegistry):
    controller = screens.categories(cb.from_user.id)
    controller.on_color_change(FORM_COLORS[int(cb.data.split(":")[2])])
    await state.clear()
    await cb.message.edit_text(render_category_draft(controller.value) + "\n\n⏳ Сохраняю…", parse_mode="HTML")

    controller.submit_form()
    await controller.join("create")

    error = controller.value.error
    if error:
        await cb.message.edit_text(f"⚠️ Не удалось сохранить категорию: {error}")
    else:
        await cb.message.edit_text("✅ Категория сохранена")
    await cb.answer()


@categories_router.callback_query(F.data == "catform:cancel")
async def on_cancel(cb: CallbackQuery, state: FSMContext):
    await state.clear()
    await cb.message.edit_text("Создание категории отменено.")
    await cb.answer()
