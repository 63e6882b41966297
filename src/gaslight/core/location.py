""" Places the player and npcs can be. """

from collections.abc import Callable, Sequence, Mapping
from typing import Any, Optional, TYPE_CHECKING

from gaslight.script import Script

if TYPE_CHECKING:
    from gaslight.core.game import Game

# returns a reason the way is barred, or None to let the player through
AccessCheck = Callable[["Game"], Optional[str]]

class Link:
    """ A route from one location to another taking some minutes. """

    def __init__(self, dest:str, minutes:float=5, label:Optional[str]=None, on_follow:Optional[Script]=None, check_access:Optional[AccessCheck]=None) -> None:
        if minutes < 0:
            raise ValueError(f'link to {dest} has negative travel time {minutes}')
        self.dest = dest
        self.minutes = minutes
        self.label = label
        self.on_follow = on_follow
        self.check_access = check_access

    def __repr__(self) -> str:
        return f'Link({self.dest}, {self.minutes}m)'

class LocationDefinition:
    """ Hooks are run with params `{"location": location_id}` and may be None. """

    def __init__(
            self,
            location_id:str,
            name:str,
            *,
            description:str="",
            links:Sequence[Link]=(),
            discovered:bool=False,
            on_arrive:Optional[Script]=None,
            on_first_arrive:Optional[Script]=None,
            on_tick:Optional[Script]=None,
            on_wait:Optional[Script]=None,
    ) -> None:
        self.location_id = location_id
        self.name = name
        self.description = description
        self.links = list(links)
        # whether the player knows about this place from the start
        self.discovered = discovered
        self.on_arrive = on_arrive
        self.on_first_arrive = on_first_arrive
        self.on_tick = on_tick
        self.on_wait = on_wait

    def __repr__(self) -> str:
        return f'LocationDefinition({self.location_id})'

    def link_to(self, dest:str) -> Optional[Link]:
        for link in self.links:
            if link.dest == dest:
                return link
        return None

class Location:
    def __init__(self, definition:LocationDefinition) -> None:
        self.definition = definition
        self.num_visits = 0
        self.discovered = definition.discovered

    def __repr__(self) -> str:
        return f'Location({self.location_id})'

    @property
    def location_id(self) -> str:
        return self.definition.location_id

    @property
    def name(self) -> str:
        return self.definition.name

    def to_dict(self) -> dict[str, Any]:
        return {"locationId": self.location_id, "numVisits": self.num_visits, "discovered": self.discovered}

    def load_dict(self, data:Mapping[str, Any]) -> None:
        if data["locationId"] != self.location_id:
            raise ValueError(f'location data for {data["locationId"]} loaded into {self.location_id}')
        self.num_visits = int(data.get("numVisits", 0))
        self.discovered = bool(data.get("discovered", self.definition.discovered))
