"""Tests for per-project write serialization."""

import asyncio

import pytest

from tracevault.core.write_queue import WriteQueue, write_queue_for


@pytest.mark.asyncio
@pytest.mark.unit
class TestWriteQueue:
    """Tests for WriteQueue."""

    async def test_runs_in_submission_order(self) -> None:
        queue = WriteQueue("p")
        order: list[int] = []

        def op(i: int):
            async def run() -> int:
                await asyncio.sleep(0.001 * (5 - i))
                order.append(i)
                return i

            return run

        results = await asyncio.gather(*(queue.run(op(i)) for i in range(5)))

        assert results == [0, 1, 2, 3, 4]
        assert order == [0, 1, 2, 3, 4]

    async def test_waiting_and_busy(self) -> None:
        queue = WriteQueue("p")
        release = asyncio.Event()

        async def blocker() -> None:
            await release.wait()

        async def noop() -> None:
            return None

        first = asyncio.create_task(queue.run(blocker))
        await asyncio.sleep(0)
        second = asyncio.create_task(queue.run(noop))
        await asyncio.sleep(0)

        assert queue.busy
        assert queue.waiting == 1

        release.set()
        await asyncio.gather(first, second)
        assert not queue.busy
        assert queue.waiting == 0

    async def test_failure_releases_queue(self) -> None:
        queue = WriteQueue("p")

        async def boom() -> None:
            raise RuntimeError("commit failed")

        async def ok() -> str:
            return "ok"

        with pytest.raises(RuntimeError):
            await queue.run(boom)
        assert await queue.run(ok) == "ok"

    async def test_registry_returns_same_queue(self) -> None:
        assert write_queue_for("a") is write_queue_for("a")
        assert write_queue_for("a") is not write_queue_for("b")
