from __future__ import annotations

"""Schema and loader for scripted replay scenarios.

Expected format:

    url: "Mock://"
    data: {a: 1}            # omit for empty; use_default_data: true for the default set
    listen:
      - path: ""
        events: [child_added, child_moved]
    steps:
      - {op: set, path: b, value: {.priority: 5, .value: 2}}
      - {op: set_priority, path: a, priority: 10}
      - {op: fail_next, kind: remove, message: PERMISSION_DENIED}
      - {op: remove, path: a}
      - {op: flush}
"""

import os
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field, ValidationError, model_validator

from firemock.core.events import EventType
from firemock.core.ordering import Priority
from firemock.io.loaders.errors import LoaderError
from firemock.io.loaders.fixture_loader import load_fixture, read_data_file

StepOp = Literal["set", "update", "remove", "set_priority", "set_with_priority", "push", "fail_next", "flush"]


class ListenSpec(BaseModel):
    path: str = ""
    events: List[EventType] = Field(default_factory=lambda: [EventType.VALUE])


class ScenarioStep(BaseModel):
    op: StepOp
    path: str = ""
    value: Any = None
    priority: Priority = None
    kind: Optional[str] = None
    message: Optional[str] = None

    @model_validator(mode="after")
    def check_required_fields(self) -> "ScenarioStep":
        if self.op in ("set_priority", "set_with_priority") and self.priority is None:
            raise ValueError(f"'{self.op}' steps need a priority")
        if self.op == "update" and not isinstance(self.value, dict):
            raise ValueError("'update' steps need a mapping value")
        if self.op == "fail_next" and not self.kind:
            raise ValueError("'fail_next' steps need a kind")
        return self


class ScenarioFileSpec(BaseModel):
    url: str = "Mock://"
    data: Any = None
    fixture: Optional[str] = None
    use_default_data: bool = False
    listen: List[ListenSpec] = Field(default_factory=list)
    steps: List[ScenarioStep] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_data_source(self) -> "ScenarioFileSpec":
        sources = sum([self.data is not None, self.fixture is not None, self.use_default_data])
        if sources > 1:
            raise ValueError("Use only one of 'data', 'fixture' and 'use_default_data'")
        return self


def load_scenario(path: str) -> ScenarioFileSpec:
    raw = read_data_file(path) or {}
    try:
        spec = ScenarioFileSpec.model_validate(raw)
    except ValidationError as exc:
        raise LoaderError(path, "Invalid scenario definition", cause=exc) from exc
    if spec.fixture is not None:
        fixture_path = spec.fixture
        if not os.path.isabs(fixture_path):
            fixture_path = os.path.join(os.path.dirname(path), fixture_path)
        spec = spec.model_copy(update={"data": load_fixture(fixture_path), "fixture": None})
    return spec


__all__ = ["ListenSpec", "ScenarioFileSpec", "ScenarioStep", "load_scenario"]
