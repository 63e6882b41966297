""" Control flow combinators: seq, when, cond, random, skillCheck.

These are ordinary scripts that run nested instructions through the game.
"""

import logging
from typing import Any

from gaslight import core
from gaslight.script import ScriptRegistry, Params, is_instruction

logger = logging.getLogger(__name__)

def seq(game:core.Game, params:Params) -> None:
    for instruction in params.get("instructions", []):
        game.run(instruction)

def when(game:core.Game, params:Params) -> bool:
    """ runs then if condition is truthy, returns whether it ran """
    if not game.run(params["condition"]):
        return False
    game.run_all(params.get("then", []))
    return True

def _run_expression(game:core.Game, expression:Any) -> Any:
    if isinstance(expression, list) and not is_instruction(expression):
        game.run_all(expression)
        return None
    return game.run(expression)

def cond(game:core.Game, params:Params) -> Any:
    for branch in params.get("branches", []):
        if game.run(branch["condition"]):
            return _run_expression(game, branch["then"])
    default = params.get("default")
    if default is not None:
        return _run_expression(game, default)
    return None

def random(game:core.Game, params:Params) -> Any:
    """ runs one child chosen uniformly at random

    a `when` child only joins the pool if its condition holds, and what's
    pooled is its `then` list. falsy children are skipped. """
    pool:list[Any] = []
    for child in params.get("children", []):
        if not child:
            continue
        if is_instruction(child) and child[0] == "when":
            if game.run(child[1]["condition"]):
                pool.append(list(child[1].get("then", [])))
        else:
            pool.append(child)

    if not pool:
        return None
    choice = pool[int(game.random.integers(len(pool)))]
    if is_instruction(choice):
        return game.run(choice)
    game.run_all(choice)
    return None

def skill_check(game:core.Game, params:Params) -> bool:
    skill = params["skill"]
    difficulty = params.get("difficulty", 0)
    success = game.player.skill_test(game.random, skill, difficulty)

    on_success = params.get("onSuccess")
    on_failure = params.get("onFailure")
    if success:
        game.run_all(on_success)
    else:
        game.run_all(on_failure)
    return success

def register(registry:ScriptRegistry) -> None:
    registry.register_all({
        "seq": seq,
        "when": when,
        "cond": cond,
        "random": random,
        "skillCheck": skill_check,
    })
