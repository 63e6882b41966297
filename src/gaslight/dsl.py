""" Instruction builders for authoring content.

These are pure functions, they build fresh `[script_name, params]` lists and
touch no game state. e.g.

    dsl.scene(
        dsl.say("Evening."),
        dsl.branch("Buy a drink", dsl.add_stat("money", -2), dsl.text("You sip.")),
        dsl.branch("Leave", dsl.exit(dsl.text("You step outside."))),
    )
"""

import copy
from typing import Any, Optional

from gaslight.script import Instruction, InstructionError, is_instruction

Condition = Any
Page = list[Instruction]

def _instr(name:str, **params:Any) -> Instruction:
    return [name, params]

def _page(value:Any) -> Page:
    """ a page is a list of instructions, a bare instruction is a page of one """
    if is_instruction(value):
        return [value]
    if isinstance(value, (list, tuple)) and all(is_instruction(x) for x in value):
        return list(value)
    raise InstructionError(f'expected an instruction or list of instructions, got {value!r}')

# content

def text(*parts:Any) -> Instruction:
    return _instr("text", parts=list(parts))

def paragraph(*parts:Any) -> Instruction:
    return _instr("paragraph", parts=list(parts))

def say(*parts:Any) -> Instruction:
    return _instr("say", parts=list(parts))

def option(label:str, script:Any=None, params:Optional[dict[str, Any]]=None) -> Instruction:
    if script is None:
        return _instr("option", label=label, params=dict(params or {}))
    return _instr("option", label=label, script=script, params=dict(params or {}))

def npc_leave_option(label:str="Leave", text:Optional[str]=None, reply:Optional[str]=None) -> Instruction:
    params:dict[str, Any] = {"label": label}
    if text is not None:
        params["text"] = text
    if reply is not None:
        params["reply"] = reply
    return ["npcLeaveOption", params]

def learn_npc_name(npc:Optional[str]=None) -> Instruction:
    if npc is None:
        return _instr("learnNpcName")
    return _instr("learnNpcName", npc=npc)

def hide_npc_image() -> Instruction:
    return _instr("hideNpcImage")

def show_npc_image() -> Instruction:
    return _instr("showNpcImage")

# control flow

def seq(*instructions:Instruction) -> Instruction:
    return _instr("seq", instructions=list(instructions))

def when(condition:Condition, *then:Instruction) -> Instruction:
    return _instr("when", condition=condition, then=list(then))

def unless(condition:Condition, *then:Instruction) -> Instruction:
    return when(not_(condition), *then)

def cond(*args:Any) -> Instruction:
    """ cond(c1, e1, c2, e2, ..., [default])

    the first branch whose condition is truthy runs. a trailing odd argument
    is the default. """
    if len(args) < 2:
        raise InstructionError(f'cond requires at least a condition and an expression, got {len(args)} arguments')
    branches = []
    for i in range(0, len(args) - 1, 2):
        branches.append({"condition": args[i], "then": args[i+1]})
    if len(args) % 2 == 1:
        return _instr("cond", branches=branches, default=args[-1])
    return _instr("cond", branches=branches)

def random(*children:Instruction) -> Instruction:
    return _instr("random", children=list(children))

def skill_check(skill:str, difficulty:float=0, on_success:Optional[Any]=None, on_failure:Optional[Any]=None) -> Instruction:
    params:dict[str, Any] = {"skill": skill, "difficulty": difficulty}
    if on_success is not None:
        params["onSuccess"] = on_success
    if on_failure is not None:
        params["onFailure"] = on_failure
    return ["skillCheck", params]

# predicates

def not_(predicate:Condition) -> Instruction:
    return _instr("not", predicate=predicate)

def and_(*predicates:Condition) -> Instruction:
    return _instr("and", predicates=list(predicates))

def or_(*predicates:Condition) -> Instruction:
    return _instr("or", predicates=list(predicates))

def has_item(item:str, count:int=1) -> Instruction:
    return _instr("hasItem", item=item, count=count)

def has_stat(stat:str, min:Optional[float]=None, max:Optional[float]=None) -> Instruction:
    params:dict[str, Any] = {"stat": stat}
    if min is not None:
        params["min"] = min
    if max is not None:
        params["max"] = max
    return ["hasStat", params]

def npc_stat(npc:Optional[str], stat:str, min:Optional[float]=None, max:Optional[float]=None) -> Instruction:
    params:dict[str, Any] = {"stat": stat}
    if npc is not None:
        params["npc"] = npc
    if min is not None:
        params["min"] = min
    if max is not None:
        params["max"] = max
    return ["npcStat", params]

def has_card(card_id:str) -> Instruction:
    return _instr("hasCard", cardId=card_id)

def card_completed(card_id:str) -> Instruction:
    return _instr("cardCompleted", cardId=card_id)

def hour_between(start:float, end:float) -> Instruction:
    return _instr("hourBetween", start=start, end=end)

def time_elapsed(timer:str, minutes:float) -> Instruction:
    return _instr("timeElapsed", timer=timer, minutes=minutes)

def in_scene() -> Instruction:
    return _instr("inScene")

def npc_present(npc:str) -> Instruction:
    return _instr("npcPresent", npc=npc)

def in_location(location:str) -> Instruction:
    return _instr("inLocation", location=location)

def location_discovered(location:str) -> Instruction:
    return _instr("locationDiscovered", location=location)

# world

def time_lapse(minutes:float) -> Instruction:
    return _instr("timeLapse", minutes=minutes)

def add_stat(stat:str, change:float, chance:Optional[float]=None, hidden:bool=False) -> Instruction:
    params:dict[str, Any] = {"stat": stat, "change": change}
    if chance is not None:
        params["chance"] = chance
    if hidden:
        params["hidden"] = True
    return ["addStat", params]

def add_npc_stat(stat:str, change:float, npc:Optional[str]=None, min:Optional[float]=None, max:Optional[float]=None, hidden:bool=False) -> Instruction:
    params:dict[str, Any] = {"stat": stat, "change": change}
    if npc is not None:
        params["npc"] = npc
    if min is not None:
        params["min"] = min
    if max is not None:
        params["max"] = max
    if hidden:
        params["hidden"] = True
    return ["addNpcStat", params]

def set_npc_location(npc:str, location:Optional[str]) -> Instruction:
    return _instr("setNpcLocation", npc=npc, location=location)

def record_time(timer:str) -> Instruction:
    return _instr("recordTime", timer=timer)

def add_item(item:str, count:int=1) -> Instruction:
    return _instr("addItem", item=item, count=count)

def add_quest(quest_id:str, **args:Any) -> Instruction:
    return _instr("addQuest", questId=quest_id, args=args)

def complete_quest(quest_id:str) -> Instruction:
    return _instr("completeQuest", questId=quest_id)

def move(location:str) -> Instruction:
    return _instr("move", location=location)

def go(location:str, minutes:Optional[float]=None) -> Instruction:
    if minutes is None:
        return _instr("go", location=location)
    return _instr("go", location=location, minutes=minutes)

def wait(minutes:Optional[float]=None, then:Optional[Any]=None, text:Optional[str]=None) -> Instruction:
    params:dict[str, Any] = {}
    if minutes is not None:
        params["minutes"] = minutes
    if text is not None:
        params["text"] = text
    if then is not None:
        params["then"] = then
    return ["wait", params]

def discover_location(location:str, text:Optional[str]=None) -> Instruction:
    if text is None:
        return _instr("discoverLocation", location=location)
    return _instr("discoverLocation", location=location, text=text)

def approach(npc:str) -> Instruction:
    return _instr("approach", npc=npc)

def interact(npc:str, script:str, params:Optional[dict[str, Any]]=None) -> Instruction:
    return _instr("interact", npc=npc, script=script, params=dict(params or {}))

def end_conversation(text:Optional[str]=None, reply:Optional[str]=None) -> Instruction:
    params:dict[str, Any] = {}
    if text is not None:
        params["text"] = text
    if reply is not None:
        params["reply"] = reply
    return ["endConversation", params]

def end_scene(text:Optional[str]=None) -> Instruction:
    if text is None:
        return _instr("endScene")
    return _instr("endScene", text=text)

# scenes

def scene(*instructions:Instruction) -> Instruction:
    """ a block of content and choices in its own scene frame """
    return _instr("scene", instructions=list(instructions))

def scenes(*pages:Any) -> Instruction:
    """ pages shown one after another, each advanced with "Continue" """
    if not pages:
        raise InstructionError("scenes requires at least one page")
    return _instr("scenes", pages=[_page(p) for p in pages])

def menu_item(label:str, *content:Instruction, exit:bool=False, condition:Optional[Condition]=None) -> dict[str, Any]:
    item:dict[str, Any] = {"label": label, "content": list(content), "exit": exit}
    if condition is not None:
        item["condition"] = condition
    return item

def menu(*entries:dict[str, Any]) -> Instruction:
    for entry in entries:
        if "label" not in entry:
            raise InstructionError(f'menu entry missing label: {entry!r}')
    return _instr("menu", entries=list(entries))

def branch(label:str, *instructions:Instruction) -> Instruction:
    """ an option that continues the current scene with instructions """
    return option(label, "global:advanceScene", {"push": [list(instructions)]})

def gated_branch(condition:Condition, label:str, *instructions:Instruction) -> Instruction:
    return when(condition, branch(label, *instructions))

def _append_epilogue(branch_instr:Instruction, epilogue:list[Instruction]) -> Instruction:
    name, params = branch_instr
    if name == "when":
        params["then"] = [_append_epilogue(x, epilogue) for x in params["then"]]
    elif name == "option" and "push" in params.get("params", {}):
        pages = params["params"]["push"]
        if pages:
            pages[-1].extend(copy.deepcopy(epilogue))
        else:
            pages.append(copy.deepcopy(epilogue))
    return branch_instr

def choice(*branches:Instruction, epilogue:Optional[list[Instruction]]=None) -> Instruction:
    """ several branches that rejoin: epilogue runs at the end of whichever
    branch the player takes. """
    if not epilogue:
        return seq(*branches)
    return seq(*(_append_epilogue(copy.deepcopy(b), list(epilogue)) for b in branches))

def exit(*then:Instruction) -> Instruction:
    """ leave the current scene frame, then run instructions in the parent """
    return _instr("exitScene", then=list(then))

def replace_scene(*instructions:Instruction) -> Instruction:
    return _instr("replaceScene", instructions=list(instructions))

def advance_scene(*pages:Any) -> Instruction:
    return _instr("advanceScene", push=[_page(p) for p in pages])
