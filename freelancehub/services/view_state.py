"""
Optimistic list state for client-side views.

A view applies the expected outcome of a mutation immediately, then runs the
real storage call.  Each mutation moves from ``pending`` to ``committed``
(the server record replaces the optimistic one) or to ``rolled_back`` (the
view returns to its state before the mutation and keeps the error).
"""
import copy
import itertools
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from freelancehub.services.storage import Result

Record = Dict[str, Any]


class MutationState(str, Enum):
    pending = "pending"
    committed = "committed"
    rolled_back = "rolled_back"


@dataclass
class Mutation:
    action: str
    record_id: Optional[str]
    state: MutationState = MutationState.pending
    error: Optional[str] = None


def _as_record(data: Any) -> Optional[Record]:
    if data is None or isinstance(data, bool):
        return None
    if hasattr(data, "model_dump"):
        return data.model_dump(mode="json")
    return dict(data)


class OptimisticView:
    def __init__(self, records: Optional[List[Record]] = None, key: str = "id"):
        self.key = key
        self._records: List[Record] = [dict(r) for r in records or []]
        self.history: List[Mutation] = []
        self._temp_ids = itertools.count(1)

    @property
    def records(self) -> List[Record]:
        return [dict(r) for r in self._records]

    def reload(self, records: List[Record]) -> None:
        """Replace the whole view with a fresh server listing."""
        self._records = [dict(r) for r in records]

    def _index(self, record_id: str) -> int:
        for index, record in enumerate(self._records):
            if record.get(self.key) == record_id:
                return index
        return -1

    def _run(self, mutation: Mutation, snapshot: List[Record], commit: Callable[[], Result],
             reconcile: Callable[[Result], None]) -> Mutation:
        self.history.append(mutation)
        try:
            result = commit()
        except Exception:
            self._records = snapshot
            mutation.state = MutationState.rolled_back
            raise
        if not result.ok:
            self._records = snapshot
            mutation.state = MutationState.rolled_back
            mutation.error = result.error
            return mutation
        reconcile(result)
        mutation.state = MutationState.committed
        return mutation

    def insert(self, record: Record, commit: Callable[[], Result]) -> Mutation:
        snapshot = copy.deepcopy(self._records)
        pending = dict(record)
        temp_id = pending.get(self.key) or f"pending-{next(self._temp_ids)}"
        pending[self.key] = temp_id
        self._records.insert(0, pending)

        def reconcile(result: Result) -> None:
            index = self._index(temp_id)
            saved = _as_record(result.data)
            if index >= 0 and saved is not None:
                self._records[index] = saved

        return self._run(Mutation("insert", temp_id), snapshot, commit, reconcile)

    def replace(self, record_id: str, changes: Record, commit: Callable[[], Result]) -> Mutation:
        snapshot = copy.deepcopy(self._records)
        index = self._index(record_id)
        if index >= 0:
            self._records[index] = {**self._records[index], **changes}

        def reconcile(result: Result) -> None:
            current = self._index(record_id)
            saved = _as_record(result.data)
            if current >= 0 and saved is not None:
                self._records[current] = saved

        return self._run(Mutation("replace", record_id), snapshot, commit, reconcile)

    def remove(self, record_id: str, commit: Callable[[], Result]) -> Mutation:
        snapshot = copy.deepcopy(self._records)
        self._records = [r for r in self._records if r.get(self.key) != record_id]
        return self._run(Mutation("remove", record_id), snapshot, commit, lambda result: None)
