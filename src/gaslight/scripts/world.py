""" Scripts that act on the world: time, movement, stats, quests, npcs. """

import logging
from typing import Any, Optional

from gaslight import config, core
from gaslight.script import ScriptRegistry, Params, InstructionError

logger = logging.getLogger(__name__)

def _npc(game:core.Game, params:Params) -> Optional[core.NPC]:
    npc_id = params.get("npc") or game.scene.npc
    if npc_id is None:
        return None
    return game.get_npc(npc_id)

def _stat_change_item(stat:str, change:float) -> dict[str, Any]:
    if change > 0:
        color = config.Settings.text.STAT_UP_COLOR
        text = f'+{change:g} {stat}'
    else:
        color = config.Settings.text.STAT_DOWN_COLOR
        text = f'{change:g} {stat}'
    return {"type": "text", "content": [text], "color": color}

# time

def time_lapse(game:core.Game, params:Params) -> int:
    return game.time_lapse(
        minutes=params.get("minutes"),
        seconds=params.get("seconds"),
        until_hour=params.get("untilHour"),
    )

def record_time(game:core.Game, params:Params) -> None:
    game.player.timers[params["timer"]] = game.time

def wait(game:core.Game, params:Params) -> bool:
    """ waits at the current location, returns True if not interrupted

    time passes in chunks. after each chunk npcs present then the location
    get a chance to react. if any of them starts a scene the wait stops and
    `then` is skipped. """
    minutes = params.get("minutes", config.Settings.clock.DEFAULT_WAIT_MINUTES)
    if minutes < 0:
        raise ValueError(f'cannot wait negative minutes: {minutes}')
    if "text" in params:
        game.add(params["text"])

    chunk_size = config.Settings.clock.WAIT_CHUNK_MINUTES
    remaining = minutes
    while remaining > 0:
        chunk = min(remaining, chunk_size)
        game.time_lapse(minutes=chunk)
        remaining -= chunk

        for npc_id in list(game.npcs_present):
            npc = game.get_npc(npc_id)
            game.run_hook(npc.definition.on_wait, {"npc": npc_id, "minutes": chunk})
            if game.in_scene:
                logger.debug(f'wait interrupted by {npc_id}')
                return False

        location = game.location
        if location is not None:
            game.run_hook(location.definition.on_wait, {"location": location.location_id, "minutes": chunk})
        if game.in_scene:
            logger.debug('wait interrupted by location')
            return False

    game.run_all(params.get("then"))
    return True

# movement

def move(game:core.Game, params:Params) -> None:
    game.move_player(params["location"])

def go(game:core.Game, params:Params) -> bool:
    """ follows a link from the current location, returns True if we went """
    location_id = params["location"]
    destination = game.content.location(location_id)
    current = game.location
    link = current.definition.link_to(location_id) if current is not None else None
    if link is None:
        game.add(f"You can't see a way to {destination.name}.")
        return False

    if link.check_access is not None:
        reason = link.check_access(game)
        if reason:
            game.add(reason)
            return False

    if link.on_follow is not None:
        game.run(link.on_follow)
        if game.in_scene:
            return False

    is_first_visit = game.get_location(location_id).num_visits == 0
    game.time_lapse(minutes=params.get("minutes", link.minutes))
    game.run("move", {"location": location_id})

    if is_first_visit:
        game.run_hook(destination.on_first_arrive, {"location": location_id})
    game.run_hook(destination.on_arrive, {"location": location_id})
    return True

def discover_location(game:core.Game, params:Params) -> bool:
    """ marks a location known to the player, returns False if it already was """
    location = game.get_location(params["location"])
    if location.discovered:
        return False
    location.discovered = True
    if "text" in params:
        game.add({"type": "text", "content": [params["text"]], "color": params.get("color", config.Settings.text.DISCOVER_COLOR)})
    return True

# stats and items

def add_stat(game:core.Game, params:Params) -> float:
    """ returns the change actually made after clamping """
    stat = params["stat"]
    change = params["change"]
    chance = params.get("chance", 1.0)
    if not 0. <= chance <= 1.:
        raise ValueError(f'addStat chance must be between 0 and 1, got {chance}')
    if chance < 1. and game.random.random() >= chance:
        return 0
    actual = game.player.add_stat(stat, change)
    if actual != 0 and not params.get("hidden", False):
        game.add(_stat_change_item(stat, actual))
    return actual

def add_npc_stat(game:core.Game, params:Params) -> float:
    npc = _npc(game, params)
    if npc is None:
        raise InstructionError('addNpcStat needs an npc or an npc in the scene')
    change = params["change"]
    if change == 0:
        return 0
    stat = params["stat"]
    old_value = npc.stat(stat)
    new_value = old_value + change
    if "min" in params:
        new_value = max(params["min"], new_value)
    if "max" in params:
        new_value = min(params["max"], new_value)
    npc.set_stat(stat, new_value)
    if new_value != old_value and not params.get("hidden", False):
        game.add(_stat_change_item(f'{npc.display_name} {stat}', new_value - old_value))
    return new_value - old_value

def set_npc_location(game:core.Game, params:Params) -> None:
    game.set_npc_location(game.get_npc(params["npc"]), params.get("location"))

def add_item(game:core.Game, params:Params) -> None:
    game.player.add_item(params["item"], params.get("count", 1))

# quests

def add_quest(game:core.Game, params:Params) -> None:
    args = dict(params.get("args", {}))
    silent = bool(args.pop("silent", False))
    game.add_quest(params["questId"], silent=silent, **args)

def complete_quest(game:core.Game, params:Params) -> None:
    game.complete_quest(params["questId"])

# npcs

def approach(game:core.Game, params:Params) -> None:
    npc = game.get_npc(params["npc"])
    npc.stats["approach_count"] = npc.stat("approach_count") + 1
    game.scene.npc = npc.npc_id
    game.scene.hide_npc_image = False

    definition = npc.definition
    if npc.stat("approach_count") == 1 and definition.on_first_approach is not None:
        hook = definition.on_first_approach
    else:
        hook = definition.on_approach
    if hook is None:
        game.add(f"{npc.display_name} isn't interested in talking to you.")
        return
    game.run(hook, {"npc": npc.npc_id})

def interact(game:core.Game, params:Params) -> Any:
    npc_id = params.get("npc") or game.scene.npc
    if npc_id is None:
        raise InstructionError("interact needs an npc or an npc in the scene")
    npc = game.get_npc(npc_id)
    script = npc.definition.script(params["script"])
    game.time_lapse(minutes=1)
    return game.run(script, {"npc": npc_id, **params.get("params", {})})

def end_conversation(game:core.Game, params:Params) -> None:
    game.add(params.get("text") or "You politely end the conversation.")
    reply = params.get("reply")
    if reply:
        game.run("say", {"parts": [reply]})

def end_scene(game:core.Game, params:Params) -> None:
    if "text" in params:
        game.add(params["text"])

def register(registry:ScriptRegistry) -> None:
    registry.register_all({
        "timeLapse": time_lapse,
        "recordTime": record_time,
        "wait": wait,
        "move": move,
        "go": go,
        "discoverLocation": discover_location,
        "addStat": add_stat,
        "addNpcStat": add_npc_stat,
        "setNpcLocation": set_npc_location,
        "addItem": add_item,
        "addQuest": add_quest,
        "completeQuest": complete_quest,
        "approach": approach,
        "interact": interact,
        "endConversation": end_conversation,
        "endScene": end_scene,
    })
