""" Gaslight game, a central repository for all world state.

Game is the context every script runs against. It owns the clock, the player,
the npcs and locations that have been materialized, and the scene stack.
"""

import enum
import logging
import datetime
from collections.abc import Mapping
from typing import Any, Optional, Union

import numpy as np

from gaslight import config, util
from gaslight.script import Script, Params, Instruction, is_instruction
from gaslight.core.content import ContentRegistry
from gaslight.core.scene import Scene, ContentItem
from gaslight.core.npc import NPC
from gaslight.core.card import Card, Reminder
from gaslight.core.location import Location
from gaslight.core.player import Player

SECONDS_PER_DAY = 86400
SECONDS_PER_HOUR = 3600

class Counters(enum.IntEnum):
    def _generate_next_value_(name, start, count, last_values): # type: ignore
        """generate consecutive automatic numbers starting from zero"""
        return count
    SCRIPTS_RUN = enum.auto()
    TICKS = enum.auto()
    SECONDS_ELAPSED = enum.auto()
    NPCS_MATERIALIZED = enum.auto()
    NPC_MOVES = enum.auto()
    CARD_UPDATES = enum.auto()
    CARDS_ADDED = enum.auto()
    CARDS_REMOVED = enum.auto()
    ACTIONS_TAKEN = enum.auto()

class Game:
    def __init__(self, content:ContentRegistry, seed:Optional[int]=None, start_time:Optional[int]=None) -> None:
        self.logger = logging.getLogger(util.fullname(self))

        # content must be completely registered before the clock starts
        self.content = content
        self.content.lock()

        self.random = np.random.default_rng(seed)
        if start_time is None:
            start_time = util.parse_timestamp(config.Settings.clock.START_TIME)
        self.time:int = start_time

        self.player = Player()
        # insertion order is materialization order, which is tick order
        self.npcs:dict[str, NPC] = {}
        self.locations:dict[str, Location] = {}
        self.npcs_present:list[str] = []

        # never empty, the first frame is the root
        self.scenes:list[Scene] = [Scene()]

        self.card_serial = 0
        self.counters = [0.] * len(Counters)

    # clock

    @property
    def hour_of_day(self) -> float:
        return (self.time % SECONDS_PER_DAY) / SECONDS_PER_HOUR

    @property
    def date(self) -> datetime.datetime:
        return datetime.datetime.fromtimestamp(self.time, datetime.timezone.utc)

    @property
    def weekday(self) -> int:
        """ day of week, Sunday is 0 """
        return (self.date.weekday() + 1) % 7

    def day_start(self, days_ahead:int=0) -> int:
        """ timestamp of midnight, days_ahead from today """
        return (self.time // SECONDS_PER_DAY + days_ahead) * SECONDS_PER_DAY

    def time_lapse(self, minutes:Optional[float]=None, seconds:Optional[int]=None, until_hour:Optional[float]=None) -> int:
        """ advances the clock, returns the number of seconds that passed

        every advance, however small, runs a tick: npc schedules, then card
        updates, then location ticks. """
        total = 0
        if minutes is not None:
            if minutes < 0:
                raise ValueError(f'cannot lapse negative time: {minutes} minutes')
            total += int(round(minutes * 60))
        if seconds is not None:
            if seconds < 0:
                raise ValueError(f'cannot lapse negative time: {seconds} seconds')
            total += int(seconds)
        if until_hour is not None:
            if not 0 <= until_hour <= 24:
                raise ValueError(f'until_hour must be between 0 and 24, got {until_hour}')
            if self.hour_of_day < until_hour:
                total += int(round((until_hour - self.hour_of_day) * SECONDS_PER_HOUR))

        if total == 0:
            return 0

        self.time += total
        self.counters[Counters.SECONDS_ELAPSED] += total
        self.tick()
        return total

    def tick(self) -> None:
        """ per tick updates in a fixed order

        npcs resolve their schedules before cards look at them so a card can
        override where an npc is (e.g. waiting for a date). """
        self.counters[Counters.TICKS] += 1
        self.logger.debug(f'tick at {self.date.isoformat()}')

        for npc in list(self.npcs.values()):
            self.run_hook(npc.definition.on_move, {"npc": npc.npc_id})

        # cards removed by an earlier card's update are skipped
        for card in list(self.player.cards):
            if not self.player.has_card(card):
                continue
            self.counters[Counters.CARD_UPDATES] += 1
            card.definition.after_update(self, card)

        for location in list(self.locations.values()):
            self.run_hook(location.definition.on_tick, {"location": location.location_id})

    # scripts

    def run(self, script:Script, params:Optional[Params]=None) -> Any:
        self.counters[Counters.SCRIPTS_RUN] += 1
        return self.content.scripts.run(self, script, params)

    def run_all(self, scripts:Any) -> None:
        """ runs a single instruction or each of a list of instructions """
        if scripts is None:
            return
        if is_instruction(scripts) or isinstance(scripts, str) or callable(scripts):
            self.run(scripts)
            return
        for script in scripts:
            self.run(script)

    def run_hook(self, hook:Optional[Script], params:Optional[Params]=None) -> Any:
        """ runs an optional hook, absent hooks do nothing """
        if hook is None:
            return None
        return self.run(hook, params)

    # npcs and locations

    def get_npc(self, npc_id:str) -> NPC:
        """ the npc with this id, created on first lookup """
        npc = self.npcs.get(npc_id)
        if npc is not None:
            return npc

        definition = self.content.npc(npc_id)
        npc = NPC(definition)
        self.logger.debug(f'materializing {npc_id}')
        self.counters[Counters.NPCS_MATERIALIZED] += 1
        # cached before any hooks so they can look the npc up
        self.npcs[npc_id] = npc
        self.run_hook(definition.generate, {"npc": npc_id})
        self.run_hook(definition.on_move, {"npc": npc_id})
        return npc

    def get_location(self, location_id:str) -> Location:
        location = self.locations.get(location_id)
        if location is None:
            location = Location(self.content.location(location_id))
            self.locations[location_id] = location
        return location

    @property
    def location(self) -> Optional[Location]:
        if self.player.location is None:
            return None
        return self.get_location(self.player.location)

    def scene_npc(self) -> Optional[NPC]:
        if self.scene.npc is None:
            return None
        return self.get_npc(self.scene.npc)

    def set_npc_location(self, npc:NPC, location_id:Optional[str]) -> None:
        old_location = npc.location
        if old_location == location_id:
            return
        # farewells happen while the npc is still here, speaking as the scene npc
        if old_location is not None and old_location == self.player.location and npc.definition.on_leave_player is not None and not self.player.sleeping and not self.in_scene:
            self.scene.npc = npc.npc_id
            self.run(npc.definition.on_leave_player, {"npc": npc.npc_id})

        npc.location = location_id
        self.counters[Counters.NPC_MOVES] += 1
        self.logger.debug(f'{npc.npc_id} moved from {old_location} to {location_id}')
        self.update_npcs_present()

    def update_npcs_present(self) -> None:
        self.npcs_present = [npc.npc_id for npc in self.npcs.values() if npc.location is not None and npc.location == self.player.location]

    def move_player(self, location_id:str) -> Location:
        location = self.get_location(location_id)
        self.player.location = location_id
        location.num_visits += 1
        location.discovered = True
        self.update_npcs_present()
        return location

    # cards

    def add_card(self, card_id:str, **fields:Any) -> Card:
        definition = self.content.card(card_id)
        self.card_serial += 1
        card = Card(definition, f'{card_id}-{self.card_serial}', fields)
        self.player.cards.append(card)
        self.counters[Counters.CARDS_ADDED] += 1
        self.logger.info(f'added card {card.instance_id}')
        definition.on_added(self, card)
        return card

    def get_card(self, card_id:str) -> Optional[Card]:
        return self.player.get_card(card_id)

    def remove_card(self, card:Union[str, Card]) -> bool:
        """ removes a card if present, safe to call from its own hooks """
        removed = self.player.remove_card(card)
        if removed is None:
            return False
        self.counters[Counters.CARDS_REMOVED] += 1
        self.logger.info(f'removed card {removed.instance_id}')
        return True

    def add_quest(self, quest_id:str, silent:bool=False, **fields:Any) -> Optional[Card]:
        if self.player.has_card(quest_id):
            return None
        card = self.add_card(quest_id, **fields)
        if not silent:
            self.add({"type": "text", "content": [f'Quest received: {card.definition.display_name(self, card)}'], "color": config.Settings.text.QUEST_COLOR})
        return card

    def complete_quest(self, quest_id:str) -> bool:
        card = self.player.get_card(quest_id)
        if card is None or card.completed:
            return False
        card.completed = True
        self.logger.info(f'completed quest {card.instance_id}')
        return True

    def reminders(self) -> list[Reminder]:
        reminders:list[Reminder] = []
        for card in list(self.player.cards):
            reminders.extend(card.definition.reminders(self, card))
        return reminders

    # scenes

    @property
    def scene(self) -> Scene:
        return self.scenes[-1]

    @property
    def in_scene(self) -> bool:
        return self.scene.has_options

    def add(self, item:Union[str, ContentItem, list[Any]]) -> None:
        """ appends content to the top scene frame

        strings become paragraphs, lists add each element. """
        if isinstance(item, str):
            self.scene.add_content({"type": "paragraph", "content": [item]})
        elif isinstance(item, list):
            for x in item:
                self.add(x)
        elif isinstance(item, Mapping) and item.get("type") == "button":
            self.scene.options.append(dict(item))
        else:
            self.scene.add_content(dict(item))

    def add_option(self, label:str, script:Instruction) -> None:
        self.scene.add_option(label, script)

    def push_scene(self) -> Scene:
        parent = self.scene
        scene = Scene(npc=parent.npc, hide_npc_image=parent.hide_npc_image)
        self.scenes.append(scene)
        return scene

    def pop_scene(self) -> Optional[Scene]:
        """ leaves the top frame, discarding whatever was pending in it

        at the root there is nothing to pop, so the root's pending choices are
        discarded instead. """
        if len(self.scenes) == 1:
            self.scenes[0].options.clear()
            self.scenes[0].pages.clear()
            return None
        return self.scenes.pop()

    def dismiss_scene(self) -> None:
        root = self.scenes[0]
        self.scenes = [Scene(npc=root.npc, hide_npc_image=root.hide_npc_image)]

    def take_action(self, script:Script, params:Optional[Params]=None) -> Any:
        """ runs a choice the player made """
        self.counters[Counters.ACTIONS_TAKEN] += 1
        keep_pages = is_instruction(script) and script[0] == "advanceScene" # type: ignore[index]
        self.scene.clear(keep_pages=keep_pages)
        result = self.run(script, params)
        self.after_action()
        return result

    def choose(self, index:int) -> Any:
        if not 0 <= index < len(self.scene.options):
            raise ValueError(f'no option {index}, there are {len(self.scene.options)} options')
        return self.take_action(self.scene.options[index]["script"])

    def after_action(self) -> None:
        for npc_id in list(self.npcs_present):
            self.run_hook(self.get_npc(npc_id).definition.after_update, {"npc": npc_id})

        # complete nested frames give way to their parent, but not before the
        # player has seen their content
        while len(self.scenes) > 1 and self.scene.is_complete:
            if self.scene.content:
                self.scene.add_option("Continue", ["exitScene", {}])
                break
            self.scenes.pop()

        # a frame resumed with pages still queued needs a way forward
        if not self.scene.options and self.scene.pages:
            self.scene.add_option("Continue", ["advanceScene", {}])

        if len(self.scenes) == 1 and not self.scene.options:
            self.scene.npc = None
