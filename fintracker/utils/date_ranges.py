import enum
from datetime import date, datetime, timedelta


class PeriodFilter(str, enum.Enum):
    """Фильтры периода на экране баланса (подписи как в приложении)."""
    DAY = "Día"
    WEEK = "Semana"
    MONTH = "Mes"
    YEAR = "Año"


def get_today_range(now: datetime | None = None) -> tuple[date, date]:
    now = now or datetime.now()
    return now.date(), now.date()


def get_this_week_range(now: datetime | None = None) -> tuple[date, date]:
    now = now or datetime.now()
    start = now.date() - timedelta(days=now.weekday())  # Понедельник
    return start, now.date()


def get_this_month_range(now: datetime | None = None) -> tuple[date, date]:
    now = now or datetime.now()
    return now.date().replace(day=1), now.date()


def get_this_year_range(now: datetime | None = None) -> tuple[date, date]:
    now = now or datetime.now()
    return now.date().replace(month=1, day=1), now.date()


def get_period_range(period: PeriodFilter, now: datetime | None = None) -> tuple[date, date]:
    """Возвращает (start, end) включительно для выбранного фильтра периода."""
    return {
        PeriodFilter.DAY: get_today_range,
        PeriodFilter.WEEK: get_this_week_range,
        PeriodFilter.MONTH: get_this_month_range,
        PeriodFilter.YEAR: get_this_year_range,
    }[PeriodFilter(period)](now)
