""" The player: stats, inventory, cards, whereabouts. """

import logging
from collections.abc import Mapping
from typing import Any, Optional, Union

import numpy as np

from gaslight import config, util
from gaslight.core.card import Card, CardDefinition

class Player:
    def __init__(self, name:str="You") -> None:
        self.logger = logging.getLogger(util.fullname(self))
        self.name = name
        self.stats:dict[str, float] = {}
        self.inventory:dict[str, int] = {}
        # insertion order is the order cards are updated in
        self.cards:list[Card] = []
        self.location:Optional[str] = None
        # named timestamps, see recordTime and timeElapsed
        self.timers:dict[str, int] = {}
        self.sleeping = False

    def stat(self, name:str) -> float:
        return self.stats.get(name, 0)

    def add_stat(self, name:str, change:float) -> float:
        """ adjusts a stat, clamped to configured bounds, returns actual change """
        old_value = self.stat(name)
        new_value = util.clip(old_value + change, config.Settings.stats.MIN, config.Settings.stats.MAX)
        self.stats[name] = new_value
        return new_value - old_value

    def skill_value(self, skill:str) -> float:
        value = self.stat(skill)
        based_on = config.skill_based_on(skill)
        if based_on is not None:
            value += self.stat(based_on)
        return value

    def skill_test(self, r:np.random.Generator, skill:str, difficulty:float) -> bool:
        """ one d100 roll against skill value minus difficulty

        difficulty zero (or less) always succeeds. otherwise the roll must come
        in under the margin, so a difficulty beyond the skill value always
        fails. """
        if difficulty <= 0:
            return True
        margin = self.skill_value(skill) - difficulty
        roll = int(r.integers(1, config.Settings.skills.DICE_SIDES + 1))
        success = roll < margin
        self.logger.debug(f'skill test {skill} vs {difficulty}: rolled {roll} against {margin} {"success" if success else "failure"}')
        return success

    def item_count(self, item:str) -> int:
        return self.inventory.get(item, 0)

    def add_item(self, item:str, count:int=1) -> None:
        new_count = self.item_count(item) + count
        if new_count < 0:
            raise ValueError(f'cannot remove {-count} {item}, only have {self.item_count(item)}')
        if new_count == 0:
            self.inventory.pop(item, None)
        else:
            self.inventory[item] = new_count

    def get_card(self, card_id:str) -> Optional[Card]:
        for card in self.cards:
            if card.card_id == card_id:
                return card
        return None

    def has_card(self, card:Union[str, Card]) -> bool:
        if isinstance(card, Card):
            return any(c is card for c in self.cards)
        return self.get_card(card) is not None

    def remove_card(self, card:Union[str, Card]) -> Optional[Card]:
        """ removes a card, returns it or None if it wasn't there """
        for i, c in enumerate(self.cards):
            if (isinstance(card, Card) and c is card) or c.card_id == card:
                return self.cards.pop(i)
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "stats": dict(self.stats),
            "inventory": dict(self.inventory),
            "cards": [c.to_dict() for c in self.cards],
            "location": self.location,
            "timers": dict(self.timers),
            "sleeping": self.sleeping,
        }

    def load_dict(self, data:Mapping[str, Any], definitions:Mapping[str, CardDefinition]) -> None:
        self.name = data.get("name", self.name)
        self.stats = dict(data.get("stats", {}))
        self.inventory = dict(data.get("inventory", {}))
        self.cards = [Card.from_dict(c, definitions) for c in data.get("cards", [])]
        self.location = data.get("location")
        self.timers = dict(data.get("timers", {}))
        self.sleeping = bool(data.get("sleeping", False))
