import dataclasses
from typing import List, Optional, Sequence

from airtime.objects.command import Command, LAND, DELAY, AUTO, INVALID
from airtime.objects.runway import Runway
from constants import (
    CMD_LAND_TOKENS,
    CMD_DELAY_TOKENS,
    CMD_AUTO_TOKENS,
    MSG_NO_INPUT,
    MSG_RUNWAY_NOT_FOUND,
    MSG_RUNWAY_NOT_ELIGIBLE,
    MSG_UNKNOWN_COMMAND,
    MSG_LAND_CLEARANCE,
    MSG_DELAY,
    MSG_AUTO,
)


@dataclasses.dataclass
class Selection:
    command: Command
    runway: Optional[Runway]
    ack_msg: str


class CommandParser:
    """Parses controller runway selections for one inbound flight."""

    def parse(self, text: str) -> Command:
        """Turn raw controller input into a single command."""
        parts = (text or "").upper().split()
        if not parts:
            return Command(DELAY)

        token = parts[0]
        if token in CMD_LAND_TOKENS:
            if len(parts) < 2:
                return Command(INVALID, token)
            return Command(LAND, parts[1])
        if token in CMD_DELAY_TOKENS:
            return Command(DELAY)
        if token in CMD_AUTO_TOKENS:
            return Command(AUTO)
        if token.isdigit():
            return Command(LAND, token, "INDEX")
        if len(parts) == 1:
            # bare runway name
            return Command(LAND, token)
        return Command(INVALID, text.strip())

    def resolve(self, text: str, eligible: Sequence[Runway],
                all_runways: Sequence[Runway] = ()) -> Selection:
        """Parse `text` and match it against the runways offered to the flight."""
        if not (text or "").strip():
            return Selection(Command(DELAY), None, MSG_NO_INPUT)

        cmd = self.parse(text)
        if cmd.type == DELAY:
            return Selection(cmd, None, MSG_DELAY)
        if cmd.type == AUTO:
            return Selection(cmd, None, MSG_AUTO)
        if cmd.type == INVALID:
            return Selection(cmd, None, MSG_UNKNOWN_COMMAND.format(cmd=cmd.value))

        return self._handle_landing(cmd, list(eligible), list(all_runways))

    def _handle_landing(self, cmd: Command, eligible: List[Runway], all_runways: List[Runway]) -> Selection:
        if cmd.extra == "INDEX":
            index = int(cmd.value) - 1
            if 0 <= index < len(eligible):
                runway = eligible[index]
                return Selection(cmd, runway, MSG_LAND_CLEARANCE.format(rwy=runway.name))
            return Selection(Command(INVALID, cmd.value), None, MSG_RUNWAY_NOT_FOUND.format(rwy=cmd.value))

        runway = next((r for r in eligible if r.name.upper() == cmd.value), None)
        if runway:
            return Selection(cmd, runway, MSG_LAND_CLEARANCE.format(rwy=runway.name))

        if any(r.name.upper() == cmd.value for r in all_runways):
            return Selection(Command(INVALID, cmd.value), None, MSG_RUNWAY_NOT_ELIGIBLE.format(rwy=cmd.value))
        return Selection(Command(INVALID, cmd.value), None, MSG_RUNWAY_NOT_FOUND.format(rwy=cmd.value))
