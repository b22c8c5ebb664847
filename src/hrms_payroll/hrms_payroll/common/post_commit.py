from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaskOutcome:
    name: str
    ok: bool
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {"task": self.name, "ok": self.ok, "error": self.error}


class PostCommitTasks:
    """Side effects that run after a primary state change has been stored.

    Every task gets its own failure boundary: an exception is logged and
    recorded in the outcome list, the remaining tasks still run, and nothing
    is rolled back.
    """

    def __init__(self):
        self._tasks: list[tuple[str, Callable[[], Any]]] = []

    def add(self, name: str, fn: Callable[..., Any], *args, **kwargs) -> None:
        self._tasks.append((name, lambda: fn(*args, **kwargs)))

    def __len__(self) -> int:
        return len(self._tasks)

    def run(self) -> list[TaskOutcome]:
        outcomes: list[TaskOutcome] = []
        for name, task in self._tasks:
            try:
                task()
                outcomes.append(TaskOutcome(name=name, ok=True))
            except Exception as e:
                logger.exception("Post-commit task %s failed", name)
                outcomes.append(TaskOutcome(name=name, ok=False, error=str(e)))
        self._tasks.clear()
        return outcomes
