""" Non-player characters and their schedules. """

import math
import logging
from collections.abc import Sequence, Mapping
from typing import Any, Optional, TYPE_CHECKING

from gaslight import config
from gaslight.script import Script, UnknownScriptError

if TYPE_CHECKING:
    from gaslight.core.game import Game

logger = logging.getLogger(__name__)

# (start_hour, end_hour, location_id) or with a trailing list of weekdays,
# Sunday is day 0
ScheduleEntry = Sequence[Any]

class NPCDefinition:
    """ Static, authored description of an npc.

    Hooks are scripts (names, instructions or callables) run with params
    `{"npc": npc_id}`. Any hook may be left as None, which means do nothing.
    If a schedule is given and no on_move, on_move follows that schedule.
    """

    def __init__(
            self,
            npc_id:str,
            name:str,
            *,
            description:str="",
            uname:Optional[str]=None,
            speech_color:Optional[str]=None,
            schedule:Optional[Sequence[ScheduleEntry]]=None,
            scripts:Optional[Mapping[str, Script]]=None,
            generate:Optional[Script]=None,
            on_move:Optional[Script]=None,
            on_approach:Optional[Script]=None,
            on_first_approach:Optional[Script]=None,
            on_wait:Optional[Script]=None,
            after_update:Optional[Script]=None,
            on_leave_player:Optional[Script]=None,
    ) -> None:
        self.npc_id = npc_id
        self.name = name
        self.description = description
        # what the player calls them before learning their name
        self.uname = uname or "stranger"
        self.speech_color = speech_color
        self.schedule = list(schedule) if schedule is not None else None
        self.scripts:dict[str, Script] = dict(scripts or {})

        self.generate = generate
        self.on_approach = on_approach
        self.on_first_approach = on_first_approach
        self.on_wait = on_wait
        self.after_update = after_update
        self.on_leave_player = on_leave_player
        if on_move is None and self.schedule is not None:
            self.on_move:Optional[Script] = self._follow_own_schedule
        else:
            self.on_move = on_move

    def __repr__(self) -> str:
        return f'NPCDefinition({self.npc_id})'

    def _follow_own_schedule(self, game:"Game", params:Mapping[str, Any]) -> None:
        assert self.schedule is not None
        follow_schedule(game, game.get_npc(self.npc_id), self.schedule)

    def script(self, name:str) -> Script:
        try:
            return self.scripts[name]
        except KeyError:
            raise UnknownScriptError(f'{self.npc_id}:{name}') from None

class NPC:
    def __init__(self, definition:NPCDefinition) -> None:
        self.definition = definition
        self.stats:dict[str, float] = dict(vars(config.Settings.stats.NPC_DEFAULTS))
        self.location:Optional[str] = None
        self.name_known = 0

    def __repr__(self) -> str:
        return f'NPC({self.npc_id}@{self.location})'

    @property
    def npc_id(self) -> str:
        return self.definition.npc_id

    @property
    def display_name(self) -> str:
        if self.name_known:
            return self.definition.name
        return self.definition.uname

    def stat(self, name:str) -> float:
        return self.stats.get(name, 0)

    def set_stat(self, name:str, value:float) -> None:
        self.stats[name] = value

    def follow_schedule(self, game:"Game", schedule:Sequence[ScheduleEntry]) -> None:
        follow_schedule(game, self, schedule)

    def to_dict(self) -> dict[str, Any]:
        return {
            "npcId": self.npc_id,
            "location": self.location,
            "stats": dict(self.stats),
            "nameKnown": self.name_known,
        }

    def load_dict(self, data:Mapping[str, Any]) -> None:
        if data["npcId"] != self.npc_id:
            raise ValueError(f'npc data for {data["npcId"]} loaded into {self.npc_id}')
        self.location = data.get("location")
        self.stats = dict(data.get("stats", {}))
        self.name_known = int(data.get("nameKnown", 0))

def schedule_location(schedule:Sequence[ScheduleEntry], hour:int, weekday:int) -> Optional[str]:
    """ location from the first matching schedule entry, None if none match

    an entry (start, end, location) matches if start <= hour < end. if start >
    end the window spans midnight. an optional fourth element restricts the
    entry to those weekdays. """
    for entry in schedule:
        if len(entry) < 3:
            raise ValueError(f'schedule entry needs start, end and location: {entry!r}')
        start, end, location_id = entry[0], entry[1], entry[2]
        if len(entry) > 3 and entry[3] is not None:
            if weekday not in [d % 7 for d in entry[3]]:
                continue
        if start <= end:
            if start <= hour < end:
                return location_id
        elif hour >= start or hour < end:
            return location_id
    return None

def follow_schedule(game:"Game", npc:NPC, schedule:Sequence[ScheduleEntry]) -> None:
    """ moves npc to wherever their schedule says they are now

    if no entry matches, the npc stays where they are. """
    location_id = schedule_location(schedule, math.floor(game.hour_of_day), game.weekday)
    if location_id is None or location_id == npc.location:
        return
    game.set_npc_location(npc, location_id)
