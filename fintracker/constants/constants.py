# Типы категорий так, как их хранит бэкенд
EXPENSE = "Gasto"
INCOME = "Ingreso"

# Типы транзакций (экран баланса)
TX_EXPENSES = "Gastos"
TX_INCOMES = "Ingresos"

# Вкладки экрана категорий: индекс вкладки -> тип категории
TAB_TYPES = {0: EXPENSE, 1: INCOME}

CATEGORY_TYPE_META = {
    EXPENSE: {"title": "Расходы", "icon": "💸"},
    INCOME: {"title": "Доходы", "icon": "💰"},
}

TX_TYPE_META = {
    TX_EXPENSES: {"title": "Расходы"},
    TX_INCOMES: {"title": "Доходы"},
}

# Палитра сегментов круговой диаграммы (по порядку первого появления категории)
CHART_PALETTE = [
    "#4CAF50", "#FF9800", "#03A9F4",
    "#F44336", "#9C27B0", "#009688",
]
FULL_CIRCLE = 360.0
CHART_START_ANGLE = -90.0

# Цвета фона, предлагаемые в форме новой категории
FORM_COLORS = ["#FF5733", "#4CAF50", "#03A9F4", "#FF9800", "#9C27B0", "#F44336"]
FORM_ICONS = ["🍔", "🚌", "🏠", "💡", "🎁", "💊", "🎓", "💼", "💵", "📈"]
