""" Registry of everything authored content provides to the runtime.

Initialization order matters: content modules register scripts, npcs, cards
and locations first, then a Game is constructed which locks the registry. Any
registration after that point is an error so that every game sees the same
content for its whole lifetime.
"""

import logging
from typing import TypeVar, TYPE_CHECKING

from gaslight import util
from gaslight.script import ScriptRegistry, RegistryLockedError

if TYPE_CHECKING:
    from gaslight.core.npc import NPCDefinition
    from gaslight.core.card import CardDefinition
    from gaslight.core.location import LocationDefinition

class DuplicateDefinitionError(ValueError):
    pass

class UnknownDefinitionError(ValueError):
    pass

class UnknownNPCError(UnknownDefinitionError):
    pass

class UnknownCardError(UnknownDefinitionError):
    pass

class UnknownLocationError(UnknownDefinitionError):
    pass

T = TypeVar('T')

class ContentRegistry:
    def __init__(self) -> None:
        self.logger = logging.getLogger(util.fullname(self))
        self.scripts = ScriptRegistry()
        self.npcs:dict[str, "NPCDefinition"] = {}
        self.cards:dict[str, "CardDefinition"] = {}
        self.locations:dict[str, "LocationDefinition"] = {}

    @property
    def locked(self) -> bool:
        return self.scripts.locked

    def _register(self, kind:str, registry:dict[str, T], key:str, definition:T) -> T:
        if self.locked:
            raise RegistryLockedError(f'cannot register {kind} {key} after content is locked')
        if key in registry:
            raise DuplicateDefinitionError(f'duplicate {kind} id: {key}')
        registry[key] = definition
        self.logger.debug(f'registered {kind} {key}')
        return definition

    def register_npc(self, definition:"NPCDefinition") -> "NPCDefinition":
        return self._register("npc", self.npcs, definition.npc_id, definition)

    def register_card(self, definition:"CardDefinition") -> "CardDefinition":
        return self._register("card", self.cards, definition.card_id, definition)

    def register_location(self, definition:"LocationDefinition") -> "LocationDefinition":
        return self._register("location", self.locations, definition.location_id, definition)

    def npc(self, npc_id:str) -> "NPCDefinition":
        try:
            return self.npcs[npc_id]
        except KeyError:
            raise UnknownNPCError(f'npc not found: {npc_id}') from None

    def card(self, card_id:str) -> "CardDefinition":
        try:
            return self.cards[card_id]
        except KeyError:
            raise UnknownCardError(f'card not found: {card_id}') from None

    def location(self, location_id:str) -> "LocationDefinition":
        try:
            return self.locations[location_id]
        except KeyError:
            raise UnknownLocationError(f'location not found: {location_id}') from None

    def lock(self) -> None:
        if not self.locked:
            self.logger.info(f'content locked: {len(self.scripts)} scripts, {len(self.npcs)} npcs, {len(self.cards)} cards, {len(self.locations)} locations')
        self.scripts.lock()
