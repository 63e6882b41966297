""" Cards: typed, stateful entities owned by the player.

Quests, dates, relationships and the like are all cards. A CardDefinition is
registered once per card id and supplies hooks, a Card is one instance with a
bag of author defined fields.
"""

import enum
import logging
from collections.abc import Mapping
from typing import Any, Optional, TYPE_CHECKING

from gaslight import util

if TYPE_CHECKING:
    from gaslight.core.game import Game

PRIMITIVE_TYPES = (str, int, float, bool, type(None))

class Urgency(enum.Enum):
    INFO = "info"
    URGENT = "urgent"

class Reminder:
    def __init__(self, text:str, urgency:Urgency=Urgency.INFO, card_id:Optional[str]=None) -> None:
        self.text = text
        self.urgency = urgency
        self.card_id = card_id

    def __repr__(self) -> str:
        return f'Reminder({self.text!r}, {self.urgency.value})'

    def __eq__(self, other:Any) -> bool:
        if not isinstance(other, Reminder):
            return NotImplemented
        return (self.text, self.urgency, self.card_id) == (other.text, other.urgency, other.card_id)

class CardDefinition:
    """ Hooks and display logic for a type of card.

    Subclasses override what they need, every hook defaults to doing nothing.

    after_update is called once per clock tick for each active card. Several
    ticks may elapse between calls (e.g. sleeping through the night) so it
    must test its governing condition against the current time rather than
    counting ticks, and calling it twice without time passing must be
    harmless.
    """

    def __init__(self, card_id:str, name:str, description:str="", card_type:str="Quest") -> None:
        self.logger = logging.getLogger(util.fullname(self))
        self.card_id = card_id
        self.name = name
        self.description = description
        self.card_type = card_type

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({self.card_id})'

    def display_name(self, game:"Game", card:"Card") -> str:
        return self.name

    def display_description(self, game:"Game", card:"Card") -> str:
        return self.description

    def on_added(self, game:"Game", card:"Card") -> None:
        pass

    def after_update(self, game:"Game", card:"Card") -> None:
        pass

    def reminders(self, game:"Game", card:"Card") -> list[Reminder]:
        return []

class Card:
    def __init__(self, definition:CardDefinition, instance_id:str, fields:Optional[Mapping[str, Any]]=None) -> None:
        self.definition = definition
        self.instance_id = instance_id
        self.fields:dict[str, Any] = {}
        if fields:
            for k, v in fields.items():
                self[k] = v

    def __repr__(self) -> str:
        return f'Card({self.card_id}, {self.instance_id})'

    @property
    def card_id(self) -> str:
        return self.definition.card_id

    @property
    def card_type(self) -> str:
        return self.definition.card_type

    def __getitem__(self, key:str) -> Any:
        return self.fields[key]

    def __setitem__(self, key:str, value:Any) -> None:
        if not isinstance(value, PRIMITIVE_TYPES):
            raise ValueError(f'card field {key} must be a primitive, got {type(value)}')
        self.fields[key] = value

    def __contains__(self, key:str) -> bool:
        return key in self.fields

    def get(self, key:str, default:Any=None) -> Any:
        return self.fields.get(key, default)

    @property
    def completed(self) -> bool:
        return bool(self.fields.get("completed", False))

    @completed.setter
    def completed(self, value:bool) -> None:
        self.fields["completed"] = value

    @property
    def failed(self) -> bool:
        return bool(self.fields.get("failed", False))

    @failed.setter
    def failed(self, value:bool) -> None:
        self.fields["failed"] = value

    def to_dict(self) -> dict[str, Any]:
        return {
            "cardTypeId": self.card_id,
            "instanceId": self.instance_id,
            "fields": dict(self.fields),
        }

    @classmethod
    def from_dict(cls, data:Mapping[str, Any], definitions:Mapping[str, CardDefinition]) -> "Card":
        try:
            definition = definitions[data["cardTypeId"]]
        except KeyError:
            raise ValueError(f'no card definition for {data["cardTypeId"]}') from None
        return cls(definition, data["instanceId"], data.get("fields", {}))
