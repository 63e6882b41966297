""" Scene frames: accumulated content and pending choices. """

import copy
from typing import Any, Optional

from gaslight.script import Instruction

ContentItem = dict[str, Any]
Option = dict[str, Any]

class Scene:
    """ One frame of the scene stack.

    The presentation layer renders the top frame: its content items in order
    and its options as buttons. Pages are queued instruction lists that
    advanceScene runs one at a time.
    """

    def __init__(self, npc:Optional[str]=None, hide_npc_image:bool=False) -> None:
        self.content:list[ContentItem] = []
        self.options:list[Option] = []
        self.pages:list[list[Instruction]] = []
        self.npc = npc
        self.hide_npc_image = hide_npc_image

    def __repr__(self) -> str:
        return f'Scene(npc={self.npc}, content={len(self.content)}, options={len(self.options)}, pages={len(self.pages)})'

    @property
    def has_options(self) -> bool:
        return len(self.options) > 0

    @property
    def is_complete(self) -> bool:
        """ nothing left for the player to choose or continue to """
        return not self.options and not self.pages

    def add_content(self, item:ContentItem) -> None:
        if "type" not in item:
            raise ValueError(f'content item must have a type: {item!r}')
        self.content.append(item)

    def add_option(self, label:str, script:Instruction) -> Option:
        option = {"type": "button", "label": label, "script": script}
        self.options.append(option)
        return option

    def clear(self, keep_pages:bool=False) -> None:
        """ clears content and options, keeps npc and display flags """
        self.content.clear()
        self.options.clear()
        if not keep_pages:
            self.pages.clear()

    def to_dict(self) -> dict[str, Any]:
        return {
            "content": copy.deepcopy(self.content),
            "options": copy.deepcopy(self.options),
            "pages": copy.deepcopy(self.pages),
            "npc": self.npc,
            "hideNpcImage": self.hide_npc_image,
        }

    @classmethod
    def from_dict(cls, data:dict[str, Any]) -> "Scene":
        scene = cls(npc=data.get("npc"), hide_npc_image=data.get("hideNpcImage", False))
        scene.content = [dict(x) for x in data.get("content", [])]
        scene.options = [dict(x) for x in data.get("options", [])]
        scene.pages = [list(p) for p in data.get("pages", [])]
        return scene
