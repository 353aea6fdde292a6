"""
Detector model - the camera/detector device feeding a location's stream.
"""

from dataclasses import dataclass, field
from enum import Enum


class DetectorState(str, Enum):
    OFF = "Off"
    STANDBY = "Standby"
    STREAMING = "Streaming"
    MONITORING = "Monitoring"
    LOCATING = "Locating"


_STATE_BY_NAME = {state.value: state for state in DetectorState}


def parse_detector_state(state: str) -> list[DetectorState]:
    """
    Parse the backend's comma-separated detector state string.

    Unknown names are dropped, e.g. "Streaming, Bogus,Monitoring" ->
    [STREAMING, MONITORING].
    """
    parsed = []
    for name in state.split(","):
        name = name.strip()
        if name in _STATE_BY_NAME:
            parsed.append(_STATE_BY_NAME[name])
    return parsed


@dataclass(frozen=True)
class Detector:
    """Detector assigned to a location."""

    id: int | None
    name: str = ""
    mac_address: str = ""
    state: list[DetectorState] = field(default_factory=list)

    @property
    def is_streamable(self) -> bool:
        return bool(self.id)

    @classmethod
    def from_dict(cls, data: dict) -> "Detector":
        raw_state = data.get("state", "")
        if isinstance(raw_state, str):
            state = parse_detector_state(raw_state)
        else:
            state = [DetectorState(s) for s in raw_state]
        return cls(
            id=data.get("id"),
            name=data.get("name", ""),
            mac_address=data.get("macAddress", data.get("mac_address", "")),
            state=state,
        )
