from aiogram.fsm.state import StatesGroup, State

class CategoryForm(StatesGroup):
    """Стадии формы новой категории. Сам черновик живёт в CategoryUiState."""
    name = State()
    type = State()
    icon = State()
    color = State()
