""" Predicate scripts, each returns a bool. """

from typing import Optional

from gaslight import core, util
from gaslight.script import ScriptRegistry, Params

def _in_bounds(value:float, params:Params) -> bool:
    if "min" in params and value < params["min"]:
        return False
    if "max" in params and value > params["max"]:
        return False
    return True

def _npc(game:core.Game, params:Params) -> Optional[core.NPC]:
    npc_id = params.get("npc") or game.scene.npc
    if npc_id is None:
        return None
    return game.get_npc(npc_id)

def not_(game:core.Game, params:Params) -> bool:
    predicate = params.get("predicate")
    if predicate is None:
        return True
    return not game.run(predicate)

def and_(game:core.Game, params:Params) -> bool:
    for predicate in params.get("predicates", []):
        if not game.run(predicate):
            return False
    return True

def or_(game:core.Game, params:Params) -> bool:
    for predicate in params.get("predicates", []):
        if game.run(predicate):
            return True
    return False

def has_item(game:core.Game, params:Params) -> bool:
    return game.player.item_count(params["item"]) >= params.get("count", 1)

def has_stat(game:core.Game, params:Params) -> bool:
    return _in_bounds(game.player.stat(params["stat"]), params)

def npc_stat(game:core.Game, params:Params) -> bool:
    """ with neither min nor max, true if the stat is positive. the npc
    defaults to the one in the current scene. """
    npc = _npc(game, params)
    if npc is None:
        return False
    value = npc.stat(params["stat"])
    if "min" not in params and "max" not in params:
        return value > 0
    return _in_bounds(value, params)

def has_card(game:core.Game, params:Params) -> bool:
    return game.player.has_card(params["cardId"])

def card_completed(game:core.Game, params:Params) -> bool:
    card = game.player.get_card(params["cardId"])
    return card is not None and card.completed

def hour_between(game:core.Game, params:Params) -> bool:
    return util.hour_in_range(game.hour_of_day, params["start"], params["end"])

def time_elapsed(game:core.Game, params:Params) -> bool:
    """ true if at least minutes have passed since the timer was recorded, or
    if it never was. """
    recorded = game.player.timers.get(params["timer"])
    if recorded is None:
        return True
    return game.time - recorded >= params["minutes"] * 60

def in_location(game:core.Game, params:Params) -> bool:
    return game.player.location == params["location"]

def location_discovered(game:core.Game, params:Params) -> bool:
    location_id = params.get("location")
    if location_id is None:
        return False
    return game.get_location(location_id).discovered

def in_scene(game:core.Game, params:Params) -> bool:
    return game.in_scene

def npc_present(game:core.Game, params:Params) -> bool:
    return params["npc"] in game.npcs_present

def register(registry:ScriptRegistry) -> None:
    registry.register_all({
        "not": not_,
        "and": and_,
        "or": or_,
        "hasItem": has_item,
        "hasStat": has_stat,
        "npcStat": npc_stat,
        "hasCard": has_card,
        "cardCompleted": card_completed,
        "hourBetween": hour_between,
        "timeElapsed": time_elapsed,
        "inScene": in_scene,
        "inLocation": in_location,
        "locationDiscovered": location_discovered,
        "npcPresent": npc_present,
    })
