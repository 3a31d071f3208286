from __future__ import annotations
import logging
from typing import AsyncIterator, Awaitable, Callable, TypeVar

from fintracker.remote.api import FinTrackerApi
from fintracker.remote.dto import Category, SavingsGoal, Transaction
from fintracker.remote.errors import FinTrackerError
from fintracker.remote.resource import Error, Loading, Resource, Success

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def as_resource(tag: str, call: Callable[[], Awaitable[T]]) -> AsyncIterator[Resource[T]]:
    """Оборачивает вызов бэкенда в поток Resource: Loading, затем Success или Error.

    Ошибки FinTrackerError попадают в Error как есть, без повторов.
    Если потребитель бросил поток после Loading, вызов не выполняется.
    """
    yield Loading()
    try:
        data = await call()
    except FinTrackerError as e:
        logger.warning(f"[{tag}] {e.message}")
        yield Error(e.message, cause=e)
        return
    yield Success(data)


class CategoryRepository:
    def __init__(self, api: FinTrackerApi):
        self.api = api

    def fetch_all(self) -> AsyncIterator[Resource[list[Category]]]:
        return as_resource("CATEGORIES", self.api.get_categories)

    def create(self, category: Category) -> AsyncIterator[Resource[Category]]:
        return as_resource("CATEGORIES", lambda: self.api.create_category(category))


class TransactionRepository:
    def __init__(self, api: FinTrackerApi):
        self.api = api

    def fetch_all(self) -> AsyncIterator[Resource[list[Transaction]]]:
        return as_resource("TRANSACTIONS", self.api.get_transactions)

    def create(self, transaction: Transaction) -> AsyncIterator[Resource[Transaction]]:
        return as_resource("TRANSACTIONS", lambda: self.api.create_transaction(transaction))


class SavingsGoalRepository:
    def __init__(self, api: FinTrackerApi):
        self.api = api

    def fetch_all(self) -> AsyncIterator[Resource[list[SavingsGoal]]]:
        return as_resource("GOALS", self.api.get_goals)

    def create(self, goal: SavingsGoal) -> AsyncIterator[Resource[SavingsGoal]]:
        return as_resource("GOALS", lambda: self.api.create_goal(goal))
