"""
Query id shared by every log line of one CLI run or calendar fetch batch.

Worker threads only see the id when they run inside a copy of the
submitting context (contextvars.copy_context).
"""

import contextvars
import uuid

_query_id: contextvars.ContextVar[str | None] = contextvars.ContextVar("query_id", default=None)


def get_query_id() -> str | None:
    return _query_id.get()


class QueryContext:
    """Bind a query id (new unless given) for the duration of a with-block."""

    def __init__(self, query_id: str | None = None):
        self.query_id = query_id or f"qry-{uuid.uuid4().hex[:16]}"
        self._token: contextvars.Token | None = None

    def __enter__(self) -> "QueryContext":
        self._token = _query_id.set(self.query_id)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        _query_id.reset(self._token)
