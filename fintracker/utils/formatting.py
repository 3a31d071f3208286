from decimal import Decimal, InvalidOperation

from aiogram import Bot

from fintracker.config import settings


def fmt_money(amount: Decimal | float | int | None, label: str | None = None) -> str:
    """Форматирование суммы для экранов FinTracker.

    Пробелы-разделители тысяч, два знака после точки (".00" отбрасывается),
    в конце подпись валюты.

    Args:
        amount: Сумма.
        label (str, optional): Подпись валюты. По умолчанию `settings.CURRENCY_LABEL`.

    Returns:
        str: Например '1 234.56 RD$' или '1 234 RD$'; '—' если суммы нет.
    """
    if amount is None:
        return "—"
    label = settings.CURRENCY_LABEL if label is None else label
    txt = f"{Decimal(str(amount)):,.2f}".replace(",", " ")
    txt = txt[:-3] if txt.endswith(".00") else txt
    return f"{txt} {label}".strip()


def fmt_percent(value: float) -> str:
    return f"{value:.1f}%"


def progress_bar(ratio: float, width: int = 10) -> str:
    """Текстовый прогресс-бар: '▰▰▰▱▱▱▱▱▱▱'."""
    ratio = min(max(ratio, 0.0), 1.0)
    filled = round(ratio * width)
    return "▰" * filled + "▱" * (width - filled)


async def safe_delete(bot: Bot, chat_id: int, message_id: int | None):
    """Безопасное удаление служебных сообщений формы (подсказок ввода).

    Args:
        bot (Bot): Экземпляр бота.
        chat_id (int): ID чата.
        message_id (int | None): ID сообщения для удаления.
    """
    if not message_id:
        return
    try:
        await bot.delete_message(chat_id, message_id)
    except Exception:
        pass


def parse_amount(s: str) -> Decimal | None:
    """Парсинг суммы, введённой пользователем в чат.

    Args:
        s (str): Строка с числовым значением ("5 000", "12,50").

    Returns:
        Decimal | None: Значение, если ввод корректный и > 0, иначе None.
    """
    if not s:
        return None
    t = s.replace(" ", "").replace(",", ".")
    try:
        v = Decimal(t)
        if v > 0:
            return v
    except (InvalidOperation, ValueError):
        pass
    return None
