""" A small demo town: lodgings, a square and a tavern, and Tamsin, who keeps
a regular schedule and can be asked out. """

from typing import Any

from gaslight import core, dating, dsl
from gaslight.script import Params

START_LOCATION = "lodgings"

STARTING_STATS = {
    "charm": 40,
    "wits": 30,
    "agility": 20,
    "money": 10,
}

TAMSIN_SCHEDULE = [
    [9, 18, "square"],
    [20, 2, "tavern"],
]

def _tamsin_topics() -> list[Any]:
    return [
        dsl.option("Chat", "chat"),
        dsl.when(dsl.npc_stat("tamsin", "affection", min=10), dsl.option("Ask Tamsin out", "askOut")),
        dsl.npc_leave_option(),
    ]

def tamsin_approach(game:core.Game, params:Params) -> None:
    if dating.handle_date_approach(game, "tamsin"):
        return
    game.run(dsl.seq(
        dsl.say("Back again? ", ["playerName", {}], "."),
        *_tamsin_topics(),
    ))

def tamsin_wait(game:core.Game, params:Params) -> None:
    dating.handle_date_approach(game, "tamsin")

TAMSIN_FIRST_APPROACH = dsl.seq(
    dsl.paragraph("A young woman with ink stained fingers looks up from her notebook."),
    dsl.say("Oh! Hello. I'm Tamsin."),
    dsl.learn_npc_name(),
    *_tamsin_topics(),
)

TAMSIN_CHAT = dsl.seq(
    dsl.random(
        dsl.say("The trams are late again. They always are when it rains."),
        dsl.say("I'm writing a guide to the city. Nobody will read it."),
        dsl.when(dsl.hour_between(20, 2), dsl.say("The band here is dreadful. I love it.")),
    ),
    dsl.time_lapse(10),
    dsl.add_npc_stat("affection", 5, npc="tamsin", max=100),
    *_tamsin_topics(),
)

TAMSIN_ASK_OUT = dsl.seq(
    dsl.skill_check(
        "flirtation", difficulty=20,
        on_success=[
            dsl.say("I'd like that. Meet me at the Lamplighter tomorrow at six."),
            ["scheduleDate", {"npc": "tamsin", "hour": 18, "days": 1}],
        ],
        on_failure=[
            dsl.say("That's sweet. But no, I don't think so."),
            dsl.add_npc_stat("affection", -5, npc="tamsin", min=0),
        ],
    ),
    dsl.npc_leave_option(),
)

TAMSIN_DATE = dsl.scenes(
    [
        dsl.paragraph("You walk with Tamsin along the river as the lamps are lit."),
        dsl.say("I've always liked the water at night."),
    ],
    [
        dsl.choice(
            dsl.branch("Tell Tamsin about your day",
                dsl.say("You make it sound like an adventure."),
                dsl.add_npc_stat("affection", 5, max=100)),
            dsl.branch("Ask about the guide",
                dsl.say("Nobody has ever asked me that."),
                dsl.skill_check("etiquette", difficulty=10,
                    on_success=[dsl.add_npc_stat("affection", 10, max=100)])),
            epilogue=[
                dsl.time_lapse(90),
                dsl.paragraph("It's late when you finally say goodnight."),
                dating.end_date(),
            ],
        ),
    ],
)

def register(content:core.ContentRegistry) -> None:
    content.register_location(core.LocationDefinition(
        "lodgings", "Your Lodgings",
        description="A narrow room above a watchmaker's shop.",
        links=[core.Link("square", minutes=10)],
    ))
    content.register_location(core.LocationDefinition(
        "square", "Market Square",
        description="Stalls, pigeons and a clock that runs five minutes fast.",
        links=[core.Link("lodgings", minutes=10), core.Link("tavern", minutes=5)],
    ))
    content.register_location(core.LocationDefinition(
        "tavern", "The Lamplighter",
        description="Low ceilings, warm beer, a terrible band.",
        links=[core.Link("square", minutes=5)],
        on_first_arrive=dsl.add_quest("find-work"),
    ))

    content.register_card(core.CardDefinition(
        "find-work", "Find Work",
        "Rent is due at the end of the week. Somebody in town must be hiring.",
    ))

    content.register_npc(core.NPCDefinition(
        "tamsin", "Tamsin",
        description="A writer working on a guide to the city.",
        uname="young woman",
        speech_color="#a78bfa",
        schedule=TAMSIN_SCHEDULE,
        scripts={
            "chat": TAMSIN_CHAT,
            "askOut": TAMSIN_ASK_OUT,
        },
        on_first_approach=TAMSIN_FIRST_APPROACH,
        on_approach=tamsin_approach,
        on_wait=tamsin_wait,
    ))

    dating.register_date_plan(content, dating.DatePlan(
        "tamsin", "Tamsin", "tavern", "The Lamplighter",
        TAMSIN_DATE,
    ))

def start(game:core.Game) -> None:
    """ sets up a new game """
    for stat, value in STARTING_STATS.items():
        game.player.add_stat(stat, value)
    game.move_player(START_LOCATION)
    game.get_npc("tamsin")
    game.add(game.get_location(START_LOCATION).definition.description)
