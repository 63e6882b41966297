""" Scene stack scripts: scene, scenes, menu, advanceScene, exitScene,
replaceScene.

A frame is captured when a script starts working on it. If a nested script
exits that frame (e.g. a page ending in exit) the captured frame is no longer
on top and the outer script stops touching the stack.
"""

import copy
import logging
from typing import Any

from gaslight import core
from gaslight.script import ScriptRegistry, Params, Instruction

logger = logging.getLogger(__name__)

CONTINUE_LABEL = "Continue"

def _on_stack(game:core.Game, frame:core.Scene) -> bool:
    return any(s is frame for s in game.scenes)

def _add_continue(game:core.Game, frame:core.Scene) -> None:
    if game.scene is frame and not frame.options and frame.pages:
        frame.add_option(CONTINUE_LABEL, ["advanceScene", {}])

def scene(game:core.Game, params:Params) -> None:
    frame = game.push_scene()
    logger.debug(f'push scene, depth {len(game.scenes)}')
    for instruction in params.get("instructions", []):
        game.run(instruction)
        if not _on_stack(game, frame):
            break

def scenes(game:core.Game, params:Params) -> None:
    """ runs the first page now, the rest wait behind "Continue" """
    pages = copy.deepcopy(list(params.get("pages", [])))
    if not pages:
        return
    frame = game.scene
    frame.pages[0:0] = pages[1:]
    game.run_all(pages[0])
    _add_continue(game, frame)

def advance_scene(game:core.Game, params:Params) -> None:
    """ runs queued pages until one of them shows something

    params["push"] is a list of pages to run before anything already queued.
    """
    frame = game.scene
    frame.pages[0:0] = copy.deepcopy(list(params.get("push", [])))
    while frame.pages and game.scene is frame:
        page = frame.pages.pop(0)
        game.run_all(page)
        if frame.content or frame.options:
            break
    _add_continue(game, frame)

def menu(game:core.Game, params:Params) -> None:
    """ each entry is an option. non-exit entries come back to this menu after
    their content, exit entries don't. conditions are checked each time the
    menu is shown. """
    menu_instruction:Instruction = ["menu", dict(params)]
    for entry in params.get("entries", []):
        condition = entry.get("condition")
        if condition is not None and not game.run(condition):
            continue
        pages:list[Any] = [list(entry.get("content", []))]
        if not entry.get("exit", False):
            pages.append([menu_instruction])
        game.add_option(entry["label"], ["advanceScene", {"push": pages}])

def exit_scene(game:core.Game, params:Params) -> None:
    game.pop_scene()
    logger.debug(f'pop scene, depth {len(game.scenes)}')
    game.run_all(params.get("then", []))

def replace_scene(game:core.Game, params:Params) -> None:
    frame = game.scene
    frame.clear()
    for instruction in params.get("instructions", []):
        game.run(instruction)
        if not _on_stack(game, frame):
            break

def register(registry:ScriptRegistry) -> None:
    registry.register_all({
        "scene": scene,
        "scenes": scenes,
        "advanceScene": advance_scene,
        "menu": menu,
        "exitScene": exit_scene,
        "replaceScene": replace_scene,
    })
