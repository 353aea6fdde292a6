"""
Task snapshot models - ongoing task, steps, and object regions.

Parsed from the backend's camelCase JSON with Pydantic. The render loop
treats a parsed snapshot as immutable for the duration of a frame.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class SnapshotModel(BaseModel):
    """Base model accepting camelCase or snake_case keys, ignoring extras."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


class ObjectState(str, Enum):
    PRESENT = "Present"
    MISSING = "Missing"
    UNCERTAIN = "Uncertain"
    UNKNOWN_OBJECT = "UnknownObject"


class TaskType(str, Enum):
    TOOL_KIT = "ToolKit"
    ITEM_KIT = "ItemKit"
    QA = "QA"


class TaskInstanceState(str, Enum):
    COMPLETED = "Completed"
    ABANDONED = "Abandoned"
    IN_PROGRESS = "InProgress"
    PAUSED = "Paused"


class ObjectRegion(SnapshotModel):
    """Rectangle of a tracked object in stream pixel space."""

    id: int | None = None
    name: str = ""
    x: float
    y: float
    width: float = Field(..., ge=0)
    height: float = Field(..., ge=0)

    @model_validator(mode="before")
    @classmethod
    def flatten_coordinates(cls, data):
        # Some payloads nest the rectangle under "coordinates"
        if isinstance(data, dict) and isinstance(data.get("coordinates"), dict):
            data = {**data, **data["coordinates"]}
            data.pop("coordinates")
        return data

    def as_rect(self) -> tuple[float, float, float, float]:
        return self.x, self.y, self.width, self.height


class Step(SnapshotModel):
    """A single expected object-state transition."""

    id: int | None = None
    order_num: int | None = None
    ex_init_state: ObjectState = ObjectState.PRESENT
    ex_subs_state: ObjectState = ObjectState.MISSING
    object: ObjectRegion

    def action_label(self) -> str:
        """Human-readable verb for the transition."""
        if (
            self.ex_init_state == ObjectState.PRESENT
            and self.ex_subs_state == ObjectState.MISSING
        ):
            return "remove"
        if (
            self.ex_init_state == ObjectState.MISSING
            and self.ex_subs_state == ObjectState.PRESENT
        ):
            return "replace"
        return f"{self.ex_init_state.value} -> {self.ex_subs_state.value}"


class OngoingTaskInstance(SnapshotModel):
    id: int | None = None
    state: TaskInstanceState | None = None
    current_order_num: int | None = None
    current_order_num_remaining_steps: list[Step] = Field(default_factory=list)


class OngoingTask(SnapshotModel):
    """
    Snapshot of the task currently running at a location.

    ``steps`` are all steps of the task; the ongoing instance (if any)
    lists the steps still remaining at the current order number.
    """

    id: int | None = None
    name: str = ""
    type: TaskType | None = None
    steps: list[Step] = Field(default_factory=list)
    ongoing_instance: OngoingTaskInstance | None = None
    max_order_num: int | None = None

    def remaining_steps(self) -> list[Step]:
        if self.ongoing_instance is None:
            return []
        return list(self.ongoing_instance.current_order_num_remaining_steps)

    def remaining_regions(self) -> list[ObjectRegion]:
        return [step.object for step in self.remaining_steps()]

    def all_regions(self) -> list[ObjectRegion]:
        return [step.object for step in self.steps]


def parse_task_snapshot(data: dict | None) -> OngoingTask | None:
    """
    Parse a raw task snapshot.

    Returns None for a missing snapshot, which means "draw no overlay".

    Raises:
        pydantic.ValidationError: If the payload is malformed
    """
    if not data:
        return None
    return OngoingTask.model_validate(data)
