from __future__ import annotations
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal

from fintracker.constants.constants import TX_EXPENSES
from fintracker.presentation.controller import ListUiState, ResourceController, fold_append, fold_replace
from fintracker.presentation.views import (
    ChartSegment, chart_segments, filter_by_period, filter_by_type, group_and_sum, total_amount,
)
from fintracker.remote.dto import Transaction
from fintracker.repo.repo import TransactionRepository
from fintracker.utils.date_ranges import PeriodFilter


@dataclass(frozen=True)
class TransactionUiState(ListUiState):
    selected_type: str = TX_EXPENSES
    selected_filter: PeriodFilter = PeriodFilter.WEEK


def visible_transactions(state: TransactionUiState, now: datetime | None = None) -> list[Transaction]:
    """Транзакции выбранного типа за выбранный период."""
    return filter_by_period(filter_by_type(state.items, state.selected_type), state.selected_filter, now)


class TransactionController(ResourceController[TransactionUiState]):
    """Экран баланса: транзакции выбранного типа за выбранный период и диаграмма по категориям."""

    def __init__(self, repository: TransactionRepository, autoload: bool = True):
        super().__init__(TransactionUiState())
        self.repository = repository
        if autoload:
            self.fetch_transactions()

    def fetch_transactions(self):
        return self.start("fetch", self.repository.fetch_all, fold_replace)

    def create_transaction(self, transaction: Transaction):
        self.update(lambda s: replace(s, is_loading=True, error=None))
        return self.start("create", lambda: self.repository.create(transaction), fold_append)

    def on_type_selected(self, tx_type: str) -> None:
        self.update(lambda s: replace(s, selected_type=tx_type))

    def on_filter_changed(self, period: PeriodFilter | str) -> None:
        period = PeriodFilter(period)
        self.update(lambda s: replace(s, selected_filter=period))

    def visible_transactions(self, now: datetime | None = None) -> list[Transaction]:
        return visible_transactions(self.value, now)

    def balance(self, now: datetime | None = None) -> Decimal:
        return total_amount(self.visible_transactions(now))

    def chart(self, now: datetime | None = None) -> list[ChartSegment]:
        visible = self.visible_transactions(now)
        return chart_segments(group_and_sum(visible), total_amount(visible))
