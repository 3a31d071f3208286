from __future__ import annotations
import logging
from dataclasses import dataclass, replace
from typing import Callable

from fintracker.presentation.controller import ListUiState, ResourceController, fold_append, fold_replace
from fintracker.presentation.views import filter_by_tab
from fintracker.remote.dto import Category
from fintracker.remote.resource import Resource, Success
from fintracker.repo.repo import CategoryRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategoryUiState(ListUiState):
    """Снимок экрана категорий: список, выбранная вкладка и черновик формы."""
    selected_tab_index: int = 0
    name: str = ""
    type: str = ""
    icon: str = ""
    color: str = ""


def fold_created(current: CategoryUiState, event: Resource) -> CategoryUiState:
    """Создание категории: запись добавляется в конец списка, черновик формы очищается."""
    state = fold_append(current, event)
    if isinstance(event, Success) and event.data is not None:
        state = replace(state, name="", type="", icon="", color="")
    return state


class CategoryController(ResourceController[CategoryUiState]):
    """
    Экран категорий.

    Мутации состояния возможны только через методы on_* и submit_form.
    """

    def __init__(self, repository: CategoryRepository, autoload: bool = True):
        """
        :param repository: Репозиторий категорий.
        :param autoload: Сразу загрузить список (нужен запущенный цикл событий).
        """
        super().__init__(CategoryUiState())
        self.repository = repository
        if autoload:
            self.fetch_categories()

    def fetch_categories(self):
        return self.start("fetch", self.repository.fetch_all, fold_replace)

    # Вкладки
    def on_tab_selected(self, index: int) -> None:
        self.update(lambda s: replace(s, selected_tab_index=index))

    def filtered_categories(self) -> list[Category]:
        state = self.value
        return filter_by_tab(state, state.selected_tab_index)

    # Поля формы
    def on_name_change(self, value: str) -> None:
        self.update(lambda s: replace(s, name=value))

    def on_type_change(self, value: str) -> None:
        self.update(lambda s: replace(s, type=value))

    def on_icon_change(self, value: str) -> None:
        self.update(lambda s: replace(s, icon=value))

    def on_color_change(self, value: str) -> None:
        self.update(lambda s: replace(s, color=value))

    def submit_form(self, on_success: Callable[[], None] | None = None):
        """
        Создаёт категорию из черновика формы.

        Проверок ввода нет (пустое имя допустимо). После успешного создания
        черновик очищается, список перезагружается с бэкенда, затем вызывается
        `on_success`.
        """
        current = self.value
        category = Category(
            id=0,
            name=current.name,
            type=current.type,
            icon=current.icon,
            color=current.color,
        )
        self.update(lambda s: replace(s, is_loading=True, error=None))

        def created(event: Success) -> None:
            logger.info(f"[CATEGORIES] created {event.data!r}")
            self.fetch_categories()
            if on_success is not None:
                on_success()

        return self.start("create", lambda: self.repository.create(category), fold_created, on_success=created)
