from __future__ import annotations
from dataclasses import dataclass, replace

from fintracker.presentation.controller import ListUiState, ResourceController, fold_append, fold_replace
from fintracker.remote.dto import SavingsGoal
from fintracker.remote.resource import Resource, Success
from fintracker.repo.repo import SavingsGoalRepository


@dataclass(frozen=True)
class SavingsGoalUiState(ListUiState):
    goal_created: bool = False  # экран показывает подтверждение и сбрасывает флаг


def fold_goal_created(current: SavingsGoalUiState, event: Resource) -> SavingsGoalUiState:
    state = fold_append(current, event)
    if isinstance(event, Success):
        state = replace(state, goal_created=True)
    return state


class SavingsGoalController(ResourceController[SavingsGoalUiState]):
    """Экран целей накоплений."""

    def __init__(self, repository: SavingsGoalRepository, autoload: bool = True):
        super().__init__(SavingsGoalUiState())
        self.repository = repository
        if autoload:
            self.fetch_goals()

    def fetch_goals(self):
        return self.start("fetch", self.repository.fetch_all, fold_replace)

    def create_goal(self, goal: SavingsGoal):
        self.update(lambda s: replace(s, is_loading=True, error=None))
        return self.start("create", lambda: self.repository.create(goal), fold_goal_created)

    def acknowledge_created(self) -> None:
        self.update(lambda s: replace(s, goal_created=False))
