import dataclasses

LAND = "LAND"
DELAY = "DELAY"
AUTO = "AUTO"
INVALID = "INVALID"


@dataclasses.dataclass
class Command:
    type: str
    value: str | None = None
    extra: str | None = None
