from dotenv import load_dotenv
load_dotenv()

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
    """Конфигурация приложения FinTracker.

    Значения подгружаются из переменных окружения и файла `.env`.
    Токен бота нужен только при запуске `fintracker.main`, поэтому
    все поля имеют значения по умолчанию и модуль можно импортировать
    в тестах без окружения.

    Атрибуты:
        TELEGRAM_BOT_TOKEN (str | None): Токен Telegram-бота, через которого работают экраны.
        API_BASE_URL (str): Базовый URL бэкенда FinTracker.
        API_TIMEOUT (float): Таймаут HTTP-запросов к бэкенду, в секундах.
        CURRENCY_LABEL (str): Подпись валюты при выводе сумм.
        LOG_LEVEL (str): Уровень логирования корневого логгера.
        TELEGRAM_BOT_ALERT (str | None): Токен отдельного бота для алертов.
        TELEGRAM_ALERT_CHAT_ID (str | None): Чаты для алертов через запятую.
    """
    TELEGRAM_BOT_TOKEN: str | None = Field(default=None, alias="TELEGRAM_BOT_TOKEN")
    API_BASE_URL: str = Field(default="http://localhost:5000/", alias="API_BASE_URL")
    API_TIMEOUT: float = Field(default=10.0, alias="API_TIMEOUT")
    CURRENCY_LABEL: str = Field(default="RD$", alias="CURRENCY_LABEL")
    LOG_LEVEL: str = Field(default="INFO", alias="LOG_LEVEL")
    TELEGRAM_BOT_ALERT: str | None = Field(default=None, alias="TELEGRAM_BOT_ALERT")
    TELEGRAM_ALERT_CHAT_ID: str | None = Field(default=None, alias="TELEGRAM_ALERT_CHAT_ID")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore"
    )

settings = Settings()
