import asyncio
from datetime import date
from decimal import Decimal

from fintracker.presentation.goals import SavingsGoalController
from fintracker.presentation.transactions import TransactionController
from fintracker.remote.dto import Category, SavingsGoal, Transaction
from fintracker.remote.resource import Error, Loading, Success

FOOD = Category(id=1, name="Food", type="Gasto", icon="🍔", color="#FF0000")
TRIP = SavingsGoal(id=1, name="Viaje", target_amount=Decimal("5000"))
CAR = SavingsGoal(id=2, name="Carro", target_amount=Decimal("20000"))


def test_create_goal_appends_and_raises_flag(scripted_repository):
    repo = scripted_repository(
        fetches=[[Loading(), Success([TRIP])]],
        creates=[[Loading(), Success(CAR)]],
    )

    async def scenario():
        controller = SavingsGoalController(repo)
        await controller.join()
        controller.create_goal(SavingsGoal(name="Carro", target_amount=Decimal("20000")))
        await controller.join("create")
        created = controller.value
        controller.acknowledge_created()
        return created, controller.value

    created, acknowledged = asyncio.run(scenario())
    assert created.items == (TRIP, CAR)
    assert created.goal_created is True
    assert created.is_loading is False
    assert acknowledged.goal_created is False
    assert acknowledged.items == (TRIP, CAR)


def test_create_goal_clears_error_left_by_failed_fetch(scripted_repository):
    repo = scripted_repository(
        fetches=[[Loading(), Error("network timeout")]],
        creates=[[Loading(), Success(None)]],
    )

    async def scenario():
        controller = SavingsGoalController(repo)
        await controller.join()
        assert controller.value.error == "network timeout"
        controller.create_goal(TRIP)
        await controller.join("create")
        return controller.value

    state = asyncio.run(scenario())
    assert state.error is None
    assert state.goal_created is True
    assert state.items == ()


def test_create_goal_error_keeps_flag_down(scripted_repository):
    repo = scripted_repository(creates=[[Loading(), Error("Monto inválido")]])

    async def scenario():
        controller = SavingsGoalController(repo, autoload=False)
        controller.create_goal(TRIP)
        await controller.join()
        return controller.value

    state = asyncio.run(scenario())
    assert state.error == "Monto inválido"
    assert state.goal_created is False
    assert state.is_loading is False
    assert repo.created == [TRIP]


def test_create_transaction_appends_and_clears_stale_error(scripted_repository):
    lunch = Transaction(id=7, amount=Decimal("250"), category=FOOD, date=date(2025, 7, 16), type="Gastos")
    repo = scripted_repository(
        fetches=[[Loading(), Error("network timeout")]],
        creates=[[Loading(), Success(lunch)]],
    )

    async def scenario():
        controller = TransactionController(repo)
        await controller.join()
        controller.create_transaction(lunch.model_copy(update={"id": 0}))
        assert controller.value.error is None
        await controller.join()
        return controller.value

    state = asyncio.run(scenario())
    assert state.items == (lunch,)
    assert state.error is None
    assert state.is_loading is False
    assert repo.created[0].id == 0


def test_create_transaction_error_keeps_items(scripted_repository):
    existing = Transaction(id=1, amount=Decimal("10"), category=FOOD, date=date(2025, 7, 15), type="Gastos")
    repo = scripted_repository(
        fetches=[[Loading(), Success([existing])]],
        creates=[[Loading(), Error("Categoría no encontrada")]],
    )

    async def scenario():
        controller = TransactionController(repo)
        await controller.join()
        controller.create_transaction(existing.model_copy(update={"id": 0}))
        await controller.join()
        return controller.value

    state = asyncio.run(scenario())
    assert state.items == (existing,)
    assert state.error == "Categoría no encontrada"
    assert state.is_loading is False
