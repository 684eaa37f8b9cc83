import asyncio
from typing import Awaitable, Callable, Dict, Generic, TypeVar

T = TypeVar("T")


class InFlight(Generic[T]):
    """
    Coalesces identical lookups that are running at the same time.

    The first caller for a key starts the lookup as a task; callers arriving while it is
    still running await the same task. The key is forgotten once the task finishes, so
    results are never cached here. Callers keep their own caches for that.
    """

    def __init__(self) -> None:
        self._tasks: Dict[str, asyncio.Task[T]] = {}

    def __len__(self) -> int:
        return len(self._tasks)

    async def run(self, key: str, factory: Callable[[], Awaitable[T]]) -> T:
        task = self._tasks.get(key)
        if task is None:
            task = asyncio.ensure_future(factory())
            self._tasks[key] = task
            task.add_done_callback(lambda _: self._forget(key, task))
        return await asyncio.shield(task)

    def _forget(self, key: str, task: "asyncio.Task[T]") -> None:
        if self._tasks.get(key) is task:
            del self._tasks[key]
