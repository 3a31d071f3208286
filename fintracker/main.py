import asyncio
import logging

from aiogram import Bot, Dispatcher
from aiogram.types import BotCommand

from fintracker.config import settings
from fintracker.remote.api import FinTrackerApi
from fintracker.routers.categories import categories_router
from fintracker.routers.goals import goals_router
from fintracker.routers.transactions import transactions_router
from fintracker.services.screens import ScreenRegistry
from fintracker.utils.alerts import setup_logging

logger = logging.getLogger(__name__)

BOT_COMMANDS = [
    BotCommand(command="balance", description="Баланс и диаграмма расходов"),
    BotCommand(command="categories", description="Категории"),
    BotCommand(command="goals", description="Цели накоплений"),
    BotCommand(command="goal_add", description="Новая цель: /goal_add <название> <сумма>"),
]


async def main() -> None:
    """Главная точка входа FinTracker.

    Последовательно выполняет:
      1. Настройку логирования (`setup_logging`).
      2. Создание клиента бэкенда (`FinTrackerApi`) и реестра экранов.
      3. Запуск Telegram-бота и подключение роутеров экранов.
      4. Цикл обработки сообщений (`start_polling`); при остановке
         закрывает контроллеры экранов и HTTP-клиент.
    """
    setup_logging()
    if not settings.TELEGRAM_BOT_TOKEN:
        raise SystemExit("TELEGRAM_BOT_TOKEN is not set")

    api = FinTrackerApi()
    screens = ScreenRegistry(api)
    bot = Bot(token=settings.TELEGRAM_BOT_TOKEN)
    dp = Dispatcher(screens=screens)

    dp.include_router(router=transactions_router)
    dp.include_router(router=categories_router)
    dp.include_router(router=goals_router)

    await bot.set_my_commands(BOT_COMMANDS)
    logger.info(f"[MAIN] FinTracker bot started, backend {settings.API_BASE_URL}")
    try:
        await dp.start_polling(bot)
    finally:
        await screens.close()
        await api.aclose()
        await bot.session.close()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
