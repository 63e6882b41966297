""" Gaslight core data model """

from .content import ContentRegistry, DuplicateDefinitionError, UnknownDefinitionError, UnknownNPCError, UnknownCardError, UnknownLocationError
from .scene import Scene
from .npc import NPCDefinition, NPC, follow_schedule, schedule_location
from .card import CardDefinition, Card, Reminder, Urgency
from .location import LocationDefinition, Location, Link
from .player import Player
from .game import Game, Counters
