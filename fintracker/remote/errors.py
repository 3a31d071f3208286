class FinTrackerError(Exception):
    """Базовая ошибка обращения к бэкенду. Текст пригоден для показа пользователю."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class TransportError(FinTrackerError):
    """Сеть недоступна или истёк таймаут."""


class ServerError(FinTrackerError):
    """Бэкенд ответил кодом не из 2xx."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code


class ValidationError(FinTrackerError):
    """Некорректные данные: тело ответа не разбирается в DTO."""
