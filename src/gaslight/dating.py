""" Dates: a card that has an npc wait for the player somewhere.

A date card stores the npc, when and where to meet, and whether the date has
started. While the npc is waiting the card holds them at the meeting point,
overriding their schedule. If the player doesn't show before the wait window
closes the npc gives up, affection drops and the card goes away.

Content registers a DatePlan per npc with register_date_plan, then adds a
date with schedule_date (or the scheduleDate script).
"""

import datetime
import logging
from typing import Any, Optional

from gaslight import config, core, util
from gaslight.script import Script, ScriptRegistry, Params, RegistryLockedError

logger = logging.getLogger(__name__)

DATE_CARD_ID = "date"
DATE_COLOR = "#f472b6"

class DatePlan:
    """ How a particular npc's dates go. Any script left as None falls back to
    the standard behavior. """

    def __init__(
            self,
            npc_id:str,
            npc_display_name:str,
            meet_location:str,
            meet_location_name:str,
            date_scene:Script,
            *,
            wait_minutes:Optional[float]=None,
            on_greeting:Optional[Script]=None,
            on_cancel:Optional[Script]=None,
            on_no_show:Optional[Script]=None,
            on_complete:Optional[Script]=None,
    ) -> None:
        self.npc_id = npc_id
        self.npc_display_name = npc_display_name
        self.meet_location = meet_location
        self.meet_location_name = meet_location_name
        self.date_scene = date_scene
        if wait_minutes is None:
            wait_minutes = config.Settings.dating.WAIT_MINUTES
        self.wait_minutes = wait_minutes
        self.on_greeting = on_greeting
        self.on_cancel = on_cancel
        self.on_no_show = on_no_show
        self.on_complete = on_complete

    def deadline(self, meet_time:int) -> int:
        return int(meet_time + self.wait_minutes * 60)

class DateCardDefinition(core.CardDefinition):
    def __init__(self) -> None:
        super().__init__(DATE_CARD_ID, "Date", "You have a date arranged.", card_type="Date")
        self.plans:dict[str, DatePlan] = {}

    def plan(self, card:core.Card) -> Optional[DatePlan]:
        return self.plans.get(card.get("npc"))

    def display_name(self, game:core.Game, card:core.Card) -> str:
        plan = self.plan(card)
        return f'Date with {plan.npc_display_name}' if plan else self.name

    def display_description(self, game:core.Game, card:core.Card) -> str:
        plan = self.plan(card)
        if plan is None:
            return self.description
        meet = datetime.datetime.fromtimestamp(card["meet_time"], datetime.timezone.utc)
        return f'Meet {plan.npc_display_name} at {plan.meet_location_name} at {util.human_hour(meet.hour + meet.minute / 60)}, {meet.strftime("%a %d %b")}'

    def on_added(self, game:core.Game, card:core.Card) -> None:
        plan = self.plan(card)
        if plan is not None and not card.get("silent", False):
            game.add({"type": "text", "content": [f'You have a date with {plan.npc_display_name}.'], "color": DATE_COLOR})

    def after_update(self, game:core.Game, card:core.Card) -> None:
        if not game.player.has_card(card) or card.get("date_started") or card.completed or card.failed:
            return
        plan = self.plan(card)
        if plan is None:
            return

        meet_time = card["meet_time"]
        deadline = plan.deadline(meet_time)
        if game.time >= deadline:
            self.logger.info(f'{plan.npc_id} gave up waiting for the player')
            game.run(plan.on_no_show or "standardNoShow", {"npc": plan.npc_id})
        elif game.time >= meet_time:
            # npc schedules have already run this tick, so this sticks
            game.set_npc_location(game.get_npc(plan.npc_id), card.get("meet_location", plan.meet_location))

    def reminders(self, game:core.Game, card:core.Card) -> list[core.Reminder]:
        if card.get("date_started") or card.completed or card.failed:
            return []
        plan = self.plan(card)
        if plan is None:
            return []

        meet_time = card["meet_time"]
        meet_hour = util.human_hour((meet_time % core.game.SECONDS_PER_DAY) / core.game.SECONDS_PER_HOUR)
        days_away = meet_time // core.game.SECONDS_PER_DAY - game.time // core.game.SECONDS_PER_DAY
        if days_away == 1:
            return [core.Reminder(f'Date with {plan.npc_display_name} tomorrow at {meet_hour}', core.Urgency.INFO, self.card_id)]
        elif days_away > 1:
            return [core.Reminder(f'Date with {plan.npc_display_name} in {days_away} days at {meet_hour}', core.Urgency.INFO, self.card_id)]

        if game.time < meet_time:
            return [core.Reminder(f'Meet {plan.npc_display_name} in {plan.meet_location_name} at {meet_hour} today', core.Urgency.INFO, self.card_id)]
        if game.time < plan.deadline(meet_time):
            return [core.Reminder(f'{plan.npc_display_name} is waiting for you in {plan.meet_location_name}!', core.Urgency.URGENT, self.card_id)]
        return []

def _definition(game:core.Game) -> DateCardDefinition:
    definition = game.content.card(DATE_CARD_ID)
    assert isinstance(definition, DateCardDefinition)
    return definition

def date_card(game:core.Game) -> Optional[core.Card]:
    return game.player.get_card(DATE_CARD_ID)

def _card_and_plan(game:core.Game, params:Params) -> tuple[Optional[core.Card], Optional[DatePlan]]:
    card = date_card(game)
    if card is None:
        return None, None
    npc_id = params.get("npc") or card.get("npc")
    if npc_id != card.get("npc"):
        return None, None
    return card, _definition(game).plans.get(npc_id)

def register_date_plan(content:core.ContentRegistry, plan:DatePlan) -> None:
    if content.locked:
        raise RegistryLockedError(f'cannot register date plan for {plan.npc_id} after content is locked')
    definition = content.card(DATE_CARD_ID)
    assert isinstance(definition, DateCardDefinition)
    if plan.npc_id in definition.plans:
        raise core.DuplicateDefinitionError(f'duplicate date plan for {plan.npc_id}')
    definition.plans[plan.npc_id] = plan

def schedule_date(game:core.Game, npc_id:str, meet_time:int, silent:bool=False) -> Optional[core.Card]:
    """ adds a date card, unless one is already arranged """
    plan = _definition(game).plans.get(npc_id)
    if plan is None:
        raise ValueError(f'no date plan for {npc_id}')
    if date_card(game) is not None:
        return None
    return game.add_card(DATE_CARD_ID, npc=npc_id, meet_time=meet_time, meet_location=plan.meet_location, date_started=False, silent=silent)

def handle_date_approach(game:core.Game, npc_id:str) -> bool:
    """ for npc on_approach and on_wait hooks: if the player has come to meet
    this npc for a date, greet them and return True. """
    card = date_card(game)
    if card is None or card.get("npc") != npc_id or card.get("date_started"):
        return False
    plan = _definition(game).plans.get(npc_id)
    if plan is None:
        return False
    meet_time = card["meet_time"]
    if meet_time <= game.time < plan.deadline(meet_time) and game.player.location == card.get("meet_location"):
        game.run("dateApproach", {"npc": npc_id})
        return True
    return False

# scripts

def schedule_date_script(game:core.Game, params:Params) -> None:
    """ arrange a date `days` from today at `hour` """
    hour = params.get("hour", 18)
    meet_time = game.day_start(params.get("days", 1)) + int(hour * core.game.SECONDS_PER_HOUR)
    schedule_date(game, params["npc"], meet_time, silent=params.get("silent", False))

def standard_greeting(game:core.Game, params:Params) -> None:
    npc_id = game.scene.npc
    game.run("say", {"parts": [params.get("greeting", "You came! Shall we go?")]})
    game.add_option("Cancel the date", ["dateCancel", {"npc": npc_id}])
    game.add_option(params.get("goLabel", "Let's go"), ["dateStart", {"npc": npc_id}])

def standard_cancel(game:core.Game, params:Params) -> None:
    npc_id = game.scene.npc
    if npc_id is None:
        return
    penalty = params.get("penalty", config.Settings.dating.CANCEL_PENALTY)
    game.run("say", {"parts": [params.get("response", "Oh. Right. Maybe some other time, then.")]})
    game.run("addNpcStat", {"npc": npc_id, "stat": "affection", "change": -penalty, "min": 0})
    game.remove_card(DATE_CARD_ID)
    npc = game.get_npc(npc_id)
    game.run_hook(npc.definition.on_move, {"npc": npc_id})

def standard_no_show(game:core.Game, params:Params) -> None:
    card, plan = _card_and_plan(game, params)
    if card is None or plan is None:
        return
    penalty = params.get("penalty", config.Settings.dating.NO_SHOW_PENALTY)
    game.add(params.get("narration", f'{plan.npc_display_name} waited for you, but you never came.'))
    game.run("addNpcStat", {"npc": plan.npc_id, "stat": "affection", "change": -penalty, "min": 0, "hidden": True})
    card.failed = True
    game.remove_card(card)

def standard_complete(game:core.Game, params:Params) -> None:
    card, plan = _card_and_plan(game, params)
    if card is None or plan is None:
        return
    bonus = params.get("bonus", config.Settings.dating.COMPLETE_BONUS)
    game.run("addNpcStat", {"npc": plan.npc_id, "stat": "affection", "change": bonus, "max": 100})
    card.completed = True
    game.remove_card(card)
    npc = game.get_npc(plan.npc_id)
    game.run_hook(npc.definition.on_move, {"npc": plan.npc_id})

def date_approach(game:core.Game, params:Params) -> None:
    card, plan = _card_and_plan(game, params)
    if card is None or plan is None or card.get("date_started"):
        return
    # marking started stops the no-show check while the player decides
    card["date_started"] = True
    game.scene.npc = plan.npc_id
    game.scene.hide_npc_image = False
    game.run(plan.on_greeting or "standardGreeting")

def date_cancel(game:core.Game, params:Params) -> None:
    card, plan = _card_and_plan(game, params)
    if card is None or plan is None:
        return
    game.scene.npc = plan.npc_id
    game.run(plan.on_cancel or "standardCancel")

def date_start(game:core.Game, params:Params) -> None:
    card, plan = _card_and_plan(game, params)
    if card is None or plan is None:
        return
    if card.get("date_in_progress"):
        logger.debug(f'date with {plan.npc_id} already in progress')
        return
    card["date_started"] = True
    card["date_in_progress"] = True
    game.scene.npc = plan.npc_id
    game.run(plan.date_scene)

def date_complete(game:core.Game, params:Params) -> None:
    card, plan = _card_and_plan(game, params)
    if card is None or plan is None:
        return
    game.run(plan.on_complete or "standardComplete")

def end_date() -> list[Any]:
    """ instruction to end a date well, the last thing in a date scene """
    return ["dateComplete", {}]

def register(content:core.ContentRegistry) -> None:
    content.register_card(DateCardDefinition())
    registry:ScriptRegistry = content.scripts
    registry.register_all({
        "scheduleDate": schedule_date_script,
        "standardGreeting": standard_greeting,
        "standardCancel": standard_cancel,
        "standardNoShow": standard_no_show,
        "standardComplete": standard_complete,
        "dateApproach": date_approach,
        "dateCancel": date_cancel,
        "dateStart": date_start,
        "dateComplete": date_complete,
    })
