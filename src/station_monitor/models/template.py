"""
Template data models - named rectangular regions in stream pixel space.

A template is either untracked (definition-time, no presence signal) or
tracked (live detection with a presence flag). The variant is decided once
by ``parse_template`` when raw data is ingested; drawing code only checks
``is_tracked``.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, ValidationError


@dataclass(frozen=True)
class Template:
    """
    Axis-aligned labeled rectangle.

    Attributes:
        name: Display label
        x: Left edge in surface pixels
        y: Top edge in surface pixels
        width: Width in pixels (>= 0)
        height: Height in pixels (>= 0)
    """

    name: str
    x: float
    y: float
    width: float
    height: float

    def __post_init__(self):
        if not all(map(math.isfinite, (self.x, self.y, self.width, self.height))):
            raise ValueError(f"Template '{self.name}' has a non-finite coordinate")
        if self.width < 0 or self.height < 0:
            raise ValueError(
                f"Template '{self.name}' has negative size: {self.width}x{self.height}"
            )

    @property
    def is_tracked(self) -> bool:
        return False

    @property
    def bottom_right(self) -> tuple[float, float]:
        return self.x + self.width, self.y + self.height


@dataclass(frozen=True)
class UntrackedTemplate(Template):
    """Template without a live presence signal (editor / definition time)."""


@dataclass(frozen=True)
class TrackedTemplate(Template):
    """Template carrying a live presence signal from detection."""

    present: bool = False

    @property
    def is_tracked(self) -> bool:
        return True


class TemplateRecord(BaseModel):
    """Raw template mapping as stored in template files."""

    model_config = ConfigDict(
        extra="ignore", allow_inf_nan=False, coerce_numbers_to_str=True
    )

    name: str
    x: float
    y: float
    width: float = Field(..., ge=0)
    height: float = Field(..., ge=0)
    present: bool | None = None


def parse_template(data: dict) -> Template:
    """
    Build a template from a raw mapping.

    A mapping with a ``present`` key becomes a ``TrackedTemplate``,
    anything else an ``UntrackedTemplate``.

    Raises:
        ValueError: If the item is not a mapping, a field is missing or
            not a finite number, or the size is negative
    """
    try:
        record = TemplateRecord.model_validate(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'template'}: {err['msg']}"
            for err in e.errors()
        )
        raise ValueError(f"Invalid template {data!r}: {problems}") from None

    fields = record.model_dump(exclude={"present"})
    if "present" in record.model_fields_set:
        return TrackedTemplate(present=bool(record.present), **fields)
    return UntrackedTemplate(**fields)


def parse_templates(items: Iterable[dict]) -> list[Template]:
    """Parse a list of raw template mappings, keeping their order."""
    return [parse_template(item) for item in items]


def template_to_dict(template: Template) -> dict:
    """Serialize a template back to its raw mapping form."""
    data = {
        "name": template.name,
        "x": template.x,
        "y": template.y,
        "width": template.width,
        "height": template.height,
    }
    if isinstance(template, TrackedTemplate):
        data["present"] = template.present
    return data
