import logging
from typing import Any, TypeVar

import httpx
import pydantic

from fintracker.config import settings
from fintracker.remote.dto import Category, SavingsGoal, Transaction
from fintracker.remote.errors import ServerError, TransportError, ValidationError

logger = logging.getLogger(__name__)

CATEGORIES_PATH = "api/Categorias"
TRANSACTIONS_PATH = "api/Transacciones"
GOALS_PATH = "api/MetaAhorros"

M = TypeVar("M", bound=pydantic.BaseModel)


class FinTrackerApi:
    """
    HTTP-клиент бэкенда FinTracker.

    Все сбои транспорта и ответы не из 2xx превращаются в ошибки из
    `fintracker.remote.errors`, чтобы репозитории не зависели от httpx.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """
        :param base_url: Базовый URL бэкенда (по умолчанию из настроек).
        :param timeout: Таймаут запросов в секундах (по умолчанию из настроек).
        :param client: Готовый httpx.AsyncClient (для тестов); такой клиент не закрывается в `aclose`.
        """
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url or settings.API_BASE_URL,
            timeout=timeout if timeout is not None else settings.API_TIMEOUT,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "FinTrackerApi":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # categories
    async def get_categories(self) -> list[Category]:
        return self._parse_list(Category, await self._request("GET", CATEGORIES_PATH))

    async def create_category(self, category: Category) -> Category | None:
        data = await self._request("POST", CATEGORIES_PATH, json=category.to_payload())
        return self._parse_one(Category, data)

    # transactions
    async def get_transactions(self) -> list[Transaction]:
        return self._parse_list(Transaction, await self._request("GET", TRANSACTIONS_PATH))

    async def create_transaction(self, transaction: Transaction) -> Transaction | None:
        data = await self._request("POST", TRANSACTIONS_PATH, json=transaction.to_payload())
        return self._parse_one(Transaction, data)

    # savings goals
    async def get_goals(self) -> list[SavingsGoal]:
        return self._parse_list(SavingsGoal, await self._request("GET", GOALS_PATH))

    async def create_goal(self, goal: SavingsGoal) -> SavingsGoal | None:
        data = await self._request("POST", GOALS_PATH, json=goal.to_payload())
        return self._parse_one(SavingsGoal, data)

    async def _request(self, method: str, path: str, json: dict | None = None) -> Any:
        try:
            resp = await self._client.request(method, path, json=json)
        except httpx.TimeoutException as e:
            logger.warning(f"[API] {method} {path} timed out: {e}")
            raise TransportError("network timeout") from e
        except httpx.TransportError as e:
            logger.warning(f"[API] {method} {path} failed: {e}")
            raise TransportError(f"network error: {e}") from e

        if resp.is_error:
            message = _error_message(resp)
            logger.warning(f"[API] {method} {path} -> {resp.status_code}: {message}")
            raise ServerError(resp.status_code, message)

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise ValidationError(f"invalid response from {path}") from e

    @staticmethod
    def _parse_list(model: type[M], data: Any) -> list[M]:
        if data is None:
            return []
        if not isinstance(data, list):
            raise ValidationError(f"expected a list of {model.__name__}")
        try:
            return [model.model_validate(item) for item in data]
        except pydantic.ValidationError as e:
            raise ValidationError(f"invalid {model.__name__} data") from e

    @staticmethod
    def _parse_one(model: type[M], data: Any) -> M | None:
        if data is None:
            return None
        try:
            return model.model_validate(data)
        except pydantic.ValidationError as e:
            raise ValidationError(f"invalid {model.__name__} data") from e


def _error_message(resp: httpx.Response) -> str:
    """Текст ошибки из тела ответа (ASP.NET кладёт его в message/title/detail)."""
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("message", "title", "detail"):
            if body.get(key):
                return str(body[key])
    if isinstance(body, str) and body:
        return body
    return resp.reason_phrase or f"HTTP {resp.status_code}"
