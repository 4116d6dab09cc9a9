"""Statement counting on an engine, used to check query budgets of loaders."""
from typing import Any

from sqlalchemy import Engine, event
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncEngine


class QueryCounter:
    """Counts statements executed on an engine while active.

    Usage::

        with QueryCounter(engine) as counter:
            await service.get_session_with_sets(...)
        assert counter.select_count <= 3
    """

    def __init__(self, engine: Engine | AsyncEngine):
        self._engine = engine.sync_engine if isinstance(engine, AsyncEngine) else engine
        self.statements: list[str] = []

    def _before_cursor_execute(
        self,
        conn: Connection,
        cursor: Any,
        statement: str,
        parameters: Any,
        context: Any,
        executemany: bool,
    ) -> None:
        self.statements.append(statement)

    @property
    def count(self) -> int:
        return len(self.statements)

    @property
    def select_count(self) -> int:
        return sum(1 for s in self.statements if s.lstrip().upper().startswith("SELECT"))

    def reset(self) -> None:
        self.statements.clear()

    def __enter__(self) -> "QueryCounter":
        event.listen(self._engine, "before_cursor_execute", self._before_cursor_execute)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        event.remove(self._engine, "before_cursor_execute", self._before_cursor_execute)
        return False
