from typing import Optional

import pytest

from gaslight import core, dsl, config

from . import SUNDAY, HOUR, texts, labels

class OrderCard(core.CardDefinition):
    def __init__(self, log:list) -> None:
        super().__init__("order", "Order")
        self.log = log

    def after_update(self, game, card):
        self.log.append("card")

def test_clock(game):
    assert game.hour_of_day == 12
    assert game.weekday == 0
    assert game.date.year == 1902
    assert game.day_start() == SUNDAY
    assert game.day_start(1) == SUNDAY + 24*HOUR

    game.time_lapse(minutes=13*60)
    assert game.hour_of_day == 1
    assert game.weekday == 1

def test_start_time_from_config(content):
    game = core.Game(content)
    assert game.time == SUNDAY + 12*HOUR

def test_tick_order(content):
    log:list = []
    content.register_npc(core.NPCDefinition("walker", "Walker", on_move=lambda g, p: log.append("npc")))
    content.register_card(OrderCard(log))
    content.register_location(core.LocationDefinition("park", "Park", on_tick=lambda g, p: log.append("location")))
    game = core.Game(content, start_time=SUNDAY)
    game.get_npc("walker")
    game.add_card("order")
    game.move_player("park")
    log.clear()

    game.time_lapse(minutes=5)
    assert log == ["npc", "card", "location"]
    assert game.counters[core.Counters.TICKS] == 1

def test_negative_time(game):
    with pytest.raises(ValueError):
        game.time_lapse(minutes=-1)
    with pytest.raises(ValueError):
        game.time_lapse(seconds=-1)
    with pytest.raises(ValueError):
        game.run(dsl.time_lapse(-5))
    with pytest.raises(ValueError):
        game.run(dsl.wait(-5))
    assert game.time == SUNDAY + 12*HOUR

def test_zero_time_no_tick(game):
    assert game.time_lapse(minutes=0) == 0
    assert game.counters[core.Counters.TICKS] == 0

def test_until_hour(game):
    assert game.time_lapse(until_hour=18) == 6*HOUR
    assert game.hour_of_day == 18
    # already past it today
    assert game.time_lapse(until_hour=9) == 0
    assert game.hour_of_day == 18
    assert game.run(["timeLapse", {"untilHour": 20}]) == 2*HOUR

def test_seed_determinism(content):
    game1 = core.Game(content, seed=42)
    game2 = core.Game(content, seed=42)
    assert [game1.random.integers(100) for _ in range(10)] == [game2.random.integers(100) for _ in range(10)]

def test_wait(game, calls):
    assert game.run(dsl.wait(30, then=["record", {"value": "done"}]))
    assert game.time == SUNDAY + 12*HOUR + 30*60
    assert game.counters[core.Counters.TICKS] == 3
    assert calls == ["done"]

def test_wait_interrupted(content, calls):
    def interrupt(game, params):
        if game.hour_of_day > 12.25:
            game.add("Somebody taps your shoulder.")
            game.add_option("Turn around", ["record", {"value": "turn"}])
    content.register_location(core.LocationDefinition("park", "Park"))
    content.register_npc(core.NPCDefinition("tapper", "Tapper", on_wait=interrupt))
    game = core.Game(content, start_time=SUNDAY + 12*HOUR)
    game.move_player("park")
    game.set_npc_location(game.get_npc("tapper"), "park")

    game.take_action(dsl.wait(60, then=["record", {"value": "done"}]))
    assert game.time == SUNDAY + 12*HOUR + 20*60
    assert texts(game.scene) == ["Somebody taps your shoulder."]
    assert labels(game.scene) == ["Turn around"]
    assert calls == []

def test_wait_location_hook(content, calls):
    content.register_location(core.LocationDefinition("park", "Park", on_wait=["record", {"value": "pigeons"}]))
    game = core.Game(content, start_time=SUNDAY)
    game.move_player("park")
    with config.override("clock", WAIT_CHUNK_MINUTES=15):
        game.run(dsl.wait(30))
    assert calls == ["pigeons", "pigeons"]

def test_go(content, calls):
    content.register_location(core.LocationDefinition("home", "Home", links=[core.Link("park", minutes=20)]))
    content.register_location(core.LocationDefinition(
        "park", "The Park",
        links=[core.Link("home")],
        on_first_arrive=["record", {"value": "first"}],
        on_arrive=["record", {"value": "arrive"}],
    ))
    content.register_location(core.LocationDefinition("moon", "The Moon"))
    game = core.Game(content, start_time=SUNDAY)
    game.move_player("home")

    assert game.run(dsl.go("park"))
    assert game.player.location == "park"
    assert game.time == SUNDAY + 20*60
    assert calls == ["first", "arrive"]

    assert game.run(dsl.go("home"))
    assert game.run(dsl.go("park"))
    assert calls == ["first", "arrive", "arrive"]
    assert game.location.num_visits == 2

    assert not game.run(dsl.go("moon"))
    assert game.player.location == "park"
    assert texts(game.scene)[-1] == "You can't see a way to The Moon."

    with pytest.raises(core.UnknownLocationError):
        game.run(dsl.go("atlantis"))

def test_link_validation():
    with pytest.raises(ValueError):
        core.Link("anywhere", minutes=-1)

def test_add_stat(game):
    assert game.run(dsl.add_stat("charm", 5)) == 5
    assert texts(game.scene) == ["+5 charm"]
    assert game.scene.content[0]["color"] == config.Settings.text.STAT_UP_COLOR

    # clamped to the configured maximum
    assert game.run(dsl.add_stat("charm", 200, hidden=True)) == 95
    assert game.player.stat("charm") == config.Settings.stats.MAX
    assert len(game.scene.content) == 1

    assert game.run(dsl.add_stat("charm", -10)) == -10
    assert texts(game.scene)[-1] == "-10 charm"

    with pytest.raises(ValueError):
        game.run(dsl.add_stat("charm", 1, chance=2))

def test_add_stat_chance(game):
    for _ in range(200):
        game.run(dsl.add_stat("luck", 0.5, chance=0.5, hidden=True))
    assert 30 < game.player.stat("luck") < 70

def test_items(game):
    game.run(dsl.add_item("coin", 3))
    game.run(dsl.add_item("coin", -2))
    assert game.player.item_count("coin") == 1
    with pytest.raises(ValueError):
        game.run(dsl.add_item("coin", -2))
    game.run(dsl.add_item("coin", -1))
    assert "coin" not in game.player.inventory

def test_skill_based_on(game):
    game.player.add_stat("agility", 30)
    game.player.add_stat("dancing", 10)
    assert game.player.skill_value("dancing") == 40
    assert game.player.skill_value("juggling") == 0

def test_go_access_check(content, calls):
    def needs_key(game:core.Game) -> Optional[str]:
        if game.player.item_count("key") == 0:
            return "The gate is locked."
        return None

    content.register_location(core.LocationDefinition("lane", "The Lane", links=[core.Link("garden", check_access=needs_key, on_follow=["record", {"value": "follow"}])]))
    content.register_location(core.LocationDefinition("garden", "The Garden"))
    game = core.Game(content, start_time=SUNDAY)
    game.move_player("lane")

    assert not game.run(dsl.go("garden"))
    assert texts(game.scene) == ["The gate is locked."]
    assert game.player.location == "lane"
    assert game.time == SUNDAY
    assert calls == []

    game.run(dsl.add_item("key"))
    assert game.run(dsl.go("garden"))
    assert game.player.location == "garden"
    assert calls == ["follow"]

def test_location_discovery(content):
    content.register_location(core.LocationDefinition("home", "Home", discovered=True, links=[core.Link("park")]))
    content.register_location(core.LocationDefinition("park", "The Park"))
    content.register_location(core.LocationDefinition("docks", "The Docks"))
    game = core.Game(content, start_time=SUNDAY)

    assert game.run(dsl.location_discovered("home"))
    assert not game.run(dsl.location_discovered("park"))
    assert not game.run(["locationDiscovered", {}])

    game.move_player("home")
    assert game.run(dsl.in_location("home"))
    assert not game.run(dsl.in_location("park"))

    assert game.run(dsl.go("park"))
    assert game.run(dsl.location_discovered("park"))
    assert game.run(dsl.in_location("park"))

    game.scene.clear()
    assert game.run(dsl.discover_location("docks", text="You hear about the docks."))
    assert game.get_location("docks").discovered
    assert texts(game.scene) == ["You hear about the docks."]
    assert game.scene.content[0]["color"] == config.Settings.text.DISCOVER_COLOR

    # only news the first time
    assert not game.run(dsl.discover_location("docks", text="You hear about the docks."))
    assert len(game.scene.content) == 1

def test_wait_text(game):
    assert game.run(dsl.wait(30, text="You lean on the wall."))
    assert texts(game.scene) == ["You lean on the wall."]
    assert game.time == SUNDAY + 12*HOUR + 30*60
