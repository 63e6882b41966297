""" Scripts that put content and options into the current scene. """

import re
from collections.abc import Sequence
from typing import Any, Union

from gaslight import core, util
from gaslight.script import ScriptRegistry, Params, Instruction, InstructionError, UnknownScriptError, is_instruction

InlineContent = Union[str, dict[str, Any]]

RE_INTERPOLATE = re.compile(r'\{\{|\}\}|\{([^{}]+)\}')

def interpolate(game:core.Game, template:str) -> list[InlineContent]:
    """ splits a string on {script} expressions, running each one

    {{ and }} are literal braces. scripts returning strings or numbers are
    spliced into the text, scripts returning content dicts are kept inline.
    """
    if "{" not in template and "}" not in template:
        return [template]

    result:list[InlineContent] = []
    literal = ""
    pos = 0
    for m in RE_INTERPOLATE.finditer(template):
        literal += template[pos:m.start()]
        pos = m.end()
        token = m.group(0)
        if token == "{{":
            literal += "{"
        elif token == "}}":
            literal += "}"
        else:
            value = game.run(m.group(1).strip())
            if isinstance(value, dict) and "type" in value:
                if literal:
                    result.append(literal)
                    literal = ""
                result.append(value)
            elif value is not None:
                literal += str(value)
    literal += template[pos:]
    if literal:
        result.append(literal)
    return result

def resolve_parts(game:core.Game, parts:Sequence[Any]) -> list[InlineContent]:
    resolved:list[InlineContent] = []
    for part in parts:
        if isinstance(part, str):
            resolved.extend(interpolate(game, part))
        elif is_instruction(part):
            value = game.run(part)
            if isinstance(value, dict) and "type" in value:
                resolved.append(value)
            elif value is not None:
                resolved.append(str(value))
        else:
            raise InstructionError(f'text parts must be strings or instructions, got {part!r}')
    # merge adjacent strings
    merged:list[InlineContent] = []
    for part in resolved:
        if isinstance(part, str) and merged and isinstance(merged[-1], str):
            merged[-1] = merged[-1] + part
        else:
            merged.append(part)
    return merged

def paragraph(game:core.Game, params:Params) -> None:
    game.add({"type": "paragraph", "content": resolve_parts(game, params.get("parts", []))})

def text(game:core.Game, params:Params) -> None:
    item:dict[str, Any] = {"type": "text", "content": resolve_parts(game, params.get("parts", []))}
    if "color" in params:
        item["color"] = params["color"]
    game.add(item)

def say(game:core.Game, params:Params) -> None:
    item:dict[str, Any] = {"type": "speech", "content": resolve_parts(game, params.get("parts", []))}
    npc = game.scene_npc()
    if npc is not None:
        item["npc"] = npc.npc_id
        if npc.definition.speech_color:
            item["color"] = npc.definition.speech_color
    game.add(item)

def _option_target(game:core.Game, script:Any, params:dict[str, Any]) -> Instruction:
    """ turns an option's script into the instruction it will run

    "npc:name" runs the scene npc's script, "global:name" a registry script.
    an unprefixed name prefers the scene npc's script if there is one. """
    if is_instruction(script):
        return [script[0], {**script[1], **params}]
    if not isinstance(script, str):
        raise InstructionError(f'option script must be a name or instruction, got {script!r}')

    npc = game.scene_npc()
    if script.startswith("npc:"):
        name = script[len("npc:"):]
        if npc is None:
            raise InstructionError(f'option {script} needs an npc in the scene')
        npc.definition.script(name)
        return ["interact", {"npc": npc.npc_id, "script": name, "params": params}]
    if script.startswith("global:"):
        name = script[len("global:"):]
    else:
        name = script
        if npc is not None and name in npc.definition.scripts:
            return ["interact", {"npc": npc.npc_id, "script": name, "params": params}]
    if name not in game.content.scripts:
        raise UnknownScriptError(name)
    return [name, params]

def option(game:core.Game, params:Params) -> None:
    label = params["label"]
    script = params.get("script")
    if script is None:
        script = util.label_to_script_name(label)
    game.add_option(label, _option_target(game, script, dict(params.get("params", {}))))

def npc_leave_option(game:core.Game, params:Params) -> None:
    end_params = {k: params[k] for k in ("text", "reply") if params.get(k) is not None}
    game.add_option(params.get("label", "Leave"), ["endConversation", end_params])

def npc_name(game:core.Game, params:Params) -> str:
    npc = game.scene_npc() if "npc" not in params else game.get_npc(params["npc"])
    if npc is None:
        return ""
    return npc.display_name

def player_name(game:core.Game, params:Params) -> str:
    return game.player.name

def learn_npc_name(game:core.Game, params:Params) -> None:
    npc = game.scene_npc() if "npc" not in params else game.get_npc(params["npc"])
    if npc is not None:
        npc.name_known = 1

def hide_npc_image(game:core.Game, params:Params) -> None:
    game.scene.hide_npc_image = True

def show_npc_image(game:core.Game, params:Params) -> None:
    game.scene.hide_npc_image = False

def register(registry:ScriptRegistry) -> None:
    registry.register_all({
        "paragraph": paragraph,
        "text": text,
        "say": say,
        "option": option,
        "npcLeaveOption": npc_leave_option,
        "npcName": npc_name,
        "playerName": player_name,
        "learnNpcName": learn_npc_name,
        "hideNpcImage": hide_npc_image,
        "showNpcImage": show_npc_image,
    })
