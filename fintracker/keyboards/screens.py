from datetime import datetime
from html import escape

from aiogram.utils.keyboard import InlineKeyboardBuilder
from aiogram.types import InlineKeyboardMarkup, InlineKeyboardButton

from fintracker.constants.constants import (
    CATEGORY_TYPE_META, INCOME, TAB_TYPES, TX_TYPE_META, FORM_ICONS, FORM_COLORS,
)
from fintracker.presentation.categories import CategoryUiState
from fintracker.presentation.goals import SavingsGoalUiState
from fintracker.presentation.transactions import TransactionUiState, visible_transactions
from fintracker.presentation.views import chart_segments, filter_by_tab, group_and_sum, segment_shares, total_amount
from fintracker.remote.dto import CategoryType
from fintracker.utils.date_ranges import PeriodFilter
from fintracker.utils.formatting import fmt_money, fmt_percent, progress_bar

# Квадратики палитры для легенды диаграммы
COLOR_MARKS = {
    "#4CAF50": "🟩", "#FF9800": "🟧", "#03A9F4": "🟦",
    "#F44336": "🟥", "#9C27B0": "🟪", "#009688": "🟫",
}


def _status_lines(is_loading: bool, error: str | None) -> list[str]:
    lines = []
    if is_loading:
        lines.append("⏳ Загрузка…")
    if error:
        lines.append(f"⚠️ {escape(error)}")
    return lines


# ================== Категории ==================
def render_categories(state: CategoryUiState) -> str:
    wanted = TAB_TYPES.get(state.selected_tab_index, INCOME)
    meta = CATEGORY_TYPE_META[wanted]
    lines = [f"{meta['icon']} <b>Категории: {meta['title']}</b>", ""]
    lines += _status_lines(state.is_loading, state.error)

    categories = filter_by_tab(state, state.selected_tab_index)
    if categories:
        lines += [f"{escape(c.icon) or '•'} {escape(c.name)}" for c in categories]
    elif not state.is_loading:
        lines.append("Категорий пока нет.")
    return "\n".join(lines)


def kb_categories(state: CategoryUiState) -> InlineKeyboardMarkup:
    kb = InlineKeyboardBuilder()
    tabs = []
    for index, cat_type in TAB_TYPES.items():
        active = "● " if state.selected_tab_index == index else ""
        tabs.append(InlineKeyboardButton(
            text=f"{active}{CATEGORY_TYPE_META[cat_type]['title']}",
            callback_data=f"cat:tab:{index}",
        ))
    kb.row(*tabs)
    kb.row(
        InlineKeyboardButton(text="🔄 Обновить", callback_data="cat:refresh"),
        InlineKeyboardButton(text="➕ Новая категория", callback_data="cat:add"),
    )
    return kb.as_markup()


# ================== Форма категории ==================
def render_category_draft(state: CategoryUiState) -> str:
    type_title = CATEGORY_TYPE_META.get(state.type, {}).get("title", state.type)
    return (
        "🆕 <b>Новая категория</b>\n\n"
        f"Название: <b>{escape(state.name) or '—'}</b>\n"
        f"Тип: <b>{escape(type_title) or '—'}</b>\n"
        f"Иконка: <b>{state.icon or '—'}</b>\n"
        f"Цвет: <b>{escape(state.color) or '—'}</b>"
    )


def kb_form_type() -> InlineKeyboardMarkup:
    kb = InlineKeyboardBuilder()
    kb.row(*[
        InlineKeyboardButton(text=CATEGORY_TYPE_META[t.value]["title"], callback_data=f"catform:type:{t.value}")
        for t in CategoryType
    ])
    kb.row(InlineKeyboardButton(text="✖️ Отмена", callback_data="catform:cancel"))
    return kb.as_markup()


def kb_form_icons() -> InlineKeyboardMarkup:
    kb = InlineKeyboardBuilder()
    for i, icon in enumerate(FORM_ICONS):
        kb.button(text=icon, callback_data=f"catform:icon:{i}")
    kb.adjust(5)
    kb.row(InlineKeyboardButton(text="✖️ Отмена", callback_data="catform:cancel"))
    return kb.as_markup()


def kb_form_colors() -> InlineKeyboardMarkup:
    kb = InlineKeyboardBuilder()
    for i, color in enumerate(FORM_COLORS):
        kb.button(text=color, callback_data=f"catform:color:{i}")
    kb.adjust(3)
    kb.row(InlineKeyboardButton(text="✖️ Отмена", callback_data="catform:cancel"))
    return kb.as_markup()


# ================== Баланс ==================
def render_balance(state: TransactionUiState, now: datetime | None = None) -> str:
    visible = visible_transactions(state, now)
    total = total_amount(visible)
    lines = [
        "Баланс",
        f"<b>{fmt_money(total)}</b>",
        f"{TX_TYPE_META.get(state.selected_type, {}).get('title', state.selected_type)} · {state.selected_filter.value}",
        "",
    ]
    lines += _status_lines(state.is_loading, state.error)

    if not visible:
        if not state.is_loading:
            lines.append("За этот период операций не было.")
        return "\n".join(lines)

    segments = chart_segments(group_and_sum(visible), total)
    for segment, (name, share) in zip(segments, segment_shares(segments)):
        mark = COLOR_MARKS.get(segment.color, "⬜")
        lines.append(f"{mark} {escape(name)} — {fmt_percent(share)}")
    lines.append("")
    for t in visible:
        lines.append(f"{t.date:%d/%m/%Y} · {escape(t.category.name)} · <b>{fmt_money(t.amount)}</b>")
    return "\n".join(lines)


def kb_balance(state: TransactionUiState) -> InlineKeyboardMarkup:
    kb = InlineKeyboardBuilder()
    kb.row(*[
        InlineKeyboardButton(
            text=("● " if state.selected_type == t else "") + meta["title"],
            callback_data=f"tx:type:{t}",
        )
        for t, meta in TX_TYPE_META.items()
    ])
    kb.row(*[
        InlineKeyboardButton(
            text=("● " if state.selected_filter == p else "") + p.value,
            callback_data=f"tx:period:{p.name}",
        )
        for p in PeriodFilter
    ])
    kb.row(InlineKeyboardButton(text="🔄 Обновить", callback_data="tx:refresh"))
    return kb.as_markup()


# ================== Цели ==================
def render_goals(state: SavingsGoalUiState) -> str:
    lines = ["⭐ <b>Цели накоплений</b>", ""]
    lines += _status_lines(state.is_loading, state.error)
    if state.goal_created:
        lines.append("✅ Цель создана")
    for goal in state.items:
        deadline = f" · до {goal.deadline:%d/%m/%Y}" if goal.deadline else ""
        lines.append(
            f"{escape(goal.name)}{deadline}\n"
            f"{progress_bar(goal.progress)} {fmt_money(goal.saved_amount)} / {fmt_money(goal.target_amount)}"
        )
    if not state.items and not state.is_loading:
        lines.append("Целей пока нет.")
    return "\n".join(lines)


def kb_goals(state: SavingsGoalUiState) -> InlineKeyboardMarkup:
    kb = InlineKeyboardBuilder()
    kb.row(InlineKeyboardButton(text="🔄 Обновить", callback_data="goal:refresh"))
    return kb.as_markup()


# ================== Экран целиком: (текст, клавиатура) ==================
def categories_screen(state: CategoryUiState) -> tuple[str, InlineKeyboardMarkup]:
    return render_categories(state), kb_categories(state)


def balance_screen(state: TransactionUiState) -> tuple[str, InlineKeyboardMarkup]:
    return render_balance(state), kb_balance(state)


def goals_screen(state: SavingsGoalUiState) -> tuple[str, InlineKeyboardMarkup]:
    return render_goals(state), kb_goals(state)
