"""
Scenario replay: drive a ``MockClient`` from a scripted list of steps and
record every event and callback it produces, in order.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from firemock.client import MockClient
from firemock.core.events import EventType
from firemock.core.snapshot import Snapshot
from firemock.errors import FiremockError
from firemock.io.loaders.scenario_loader import ScenarioFileSpec, ScenarioStep

logger = logging.getLogger(__name__)


class EventRecord(BaseModel):
    """One observed event or operation callback."""

    sequence: int
    source: str  # listener path, or the step that produced a callback
    event: str
    key: Optional[str] = None
    prev_name: Optional[str] = None
    value: Any = None
    priority: Any = None
    error: Optional[str] = None


class ScenarioResult(BaseModel):
    records: List[EventRecord] = Field(default_factory=list)
    final_data: Any = None
    pending: int = 0

    def events(self, event: str) -> List[EventRecord]:
        return [record for record in self.records if record.event == event]


class ScenarioRunner:
    def __init__(self, spec: ScenarioFileSpec):
        self.spec = spec
        self._records: List[EventRecord] = []

    def _record(self, **fields: Any) -> None:
        self._records.append(EventRecord(sequence=len(self._records) + 1, **fields))

    def _listener(self, path: str, event_type: EventType):
        def _on_event(snapshot: Snapshot, prev_name: Optional[str] = None) -> None:
            self._record(
                source=f"/{path}",
                event=event_type.value,
                key=snapshot.key,
                prev_name=prev_name,
                value=snapshot.val(),
                priority=snapshot.get_priority(),
            )

        return _on_event

    def _callback(self, step: ScenarioStep):
        def _on_complete(error: Optional[BaseException] = None) -> None:
            self._record(
                source=f"{step.op} /{step.path}",
                event="error" if error is not None else "ok",
                error=str(error) if error is not None else None,
            )

        return _on_complete

    def _build_client(self) -> MockClient:
        if self.spec.use_default_data:
            return MockClient(self.spec.url)
        return MockClient(self.spec.url, self.spec.data)

    def run(self) -> ScenarioResult:
        client = self._build_client()
        root = client.root()
        for listen in self.spec.listen:
            for event_type in listen.events:
                root.child(listen.path).on(event_type, self._listener(listen.path, event_type))
        root.flush()

        for step in self.spec.steps:
            self._run_step(root, step)
        logger.debug("Scenario finished with %d record(s)", len(self._records))
        return ScenarioResult(records=list(self._records), final_data=root.get_data(), pending=root.pending)

    def _run_step(self, root: MockClient, step: ScenarioStep) -> None:
        ref = root.child(step.path)
        callback = self._callback(step)
        if step.op == "set":
            ref.set(step.value, callback)
        elif step.op == "update":
            ref.update(step.value, callback)
        elif step.op == "remove":
            ref.remove(callback)
        elif step.op == "set_priority":
            ref.set_priority(step.priority, callback)
        elif step.op == "set_with_priority":
            ref.set_with_priority(step.value, step.priority, callback)
        elif step.op == "push":
            ref.push(step.value, callback)
        elif step.op == "fail_next":
            ref.fail_next(step.kind, FiremockError(step.message or f"{step.kind} failed"))
        elif step.op == "flush":
            ref.flush()


def run_scenario(spec: ScenarioFileSpec) -> ScenarioResult:
    return ScenarioRunner(spec).run()


__all__ = ["EventRecord", "ScenarioResult", "ScenarioRunner", "run_scenario"]
