import asyncio

import pytest


async def scripted_stream(events, log: list):
    """Поток Resource из заранее заданных событий.

    asyncio.Event в списке — «шлюз»: поток ждёт его установки перед следующим событием.
    В `log` пишется "closed", когда потребитель бросил или дочитал поток.
    """
    try:
        for event in events:
            await asyncio.sleep(0)
            if isinstance(event, asyncio.Event):
                await event.wait()
                continue
            yield event
    finally:
        log.append("closed")


class ScriptedRepository:
    """Фейковый репозиторий: каждый вызов отдаёт следующий сценарий событий."""

    def __init__(self, fetches=None, creates=None):
        self.fetches = list(fetches or [])
        self.creates = list(creates or [])
        self.created = []
        self.fetch_calls = 0
        self.log = []

    def fetch_all(self):
        self.fetch_calls += 1
        return scripted_stream(self.fetches.pop(0), self.log)

    def create(self, entity):
        self.created.append(entity)
        return scripted_stream(self.creates.pop(0), self.log)


@pytest.fixture
def scripted_repository():
    return ScriptedRepository
