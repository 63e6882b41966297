import os
import tempfile

import numpy as np
import pytest

from gaslight import core, config, dating, sim
from gaslight.serialization import util as s_util, save_game

from . import SUNDAY, HOUR, texts, labels

def test_to_int():
    with tempfile.TemporaryFile() as fp:
        v1 = 42
        bytes_written = s_util.int_to_f(v1, fp)
        fp.flush()
        assert bytes_written == fp.tell()
        fp.seek(0)
        v2 = s_util.int_from_f(fp)
        assert v2 == v1
        assert bytes_written == fp.tell()

def test_negative_time():
    with tempfile.TemporaryFile() as fp:
        s_util.int_to_f(SUNDAY, fp, blen=8, signed=True)
        fp.seek(0)
        assert s_util.int_from_f(fp, blen=8, signed=True) == SUNDAY

def test_msgpack():
    data = {"content": [{"type": "text", "content": ["hi"], "color": "#fff"}], "pages": [[["text", {"parts": ["later"]}]]], "npc": None}
    with tempfile.TemporaryFile() as fp:
        bytes_written = s_util.msgpack_to_f(data, fp)
        bytes_written += s_util.strs_to_f(["a", "b"], fp)
        assert bytes_written == fp.tell()
        fp.seek(0)
        assert s_util.msgpack_from_f(fp) == data
        assert s_util.strs_from_f(fp) == ["a", "b"]

def test_random_state():
    r = np.random.default_rng(7)
    r.integers(100, size=10)
    with tempfile.TemporaryFile() as fp:
        s_util.random_state_to_f(r, fp)
        fp.seek(0)
        r2 = s_util.random_state_from_f(fp)
    assert list(r.integers(100, size=10)) == list(r2.integers(100, size=10))

def test_debug_string():
    with tempfile.TemporaryFile() as fp:
        s_util.debug_string_w("player", fp)
        fp.seek(0)
        with pytest.raises(ValueError):
            s_util.debug_string_r("npcs", fp)

def test_card_saver(content):
    content.register_card(core.CardDefinition("note", "Note"))
    sg = sim.initialize_save_game(content)
    card = core.Card(content.card("note"), "note-3", {"text": "hi", "count": 2, "done": False, "when": 1.5})
    with tempfile.TemporaryFile() as fp:
        bytes_written = sg.save_object(card, fp)
        assert bytes_written == fp.tell()
        fp.seek(0)
        load_context = save_game.LoadContext(sg)
        load_context.debug = sg.debug
        card2 = sg.load_object(core.Card, fp, load_context)
    assert card2.card_id == "note"
    assert card2.instance_id == "note-3"
    assert card2.fields == card.fields

def test_wrong_type_marker(content):
    sg = sim.initialize_save_game(content)
    with tempfile.TemporaryFile() as fp:
        sg.save_object(core.Scene(), fp)
        fp.seek(0)
        load_context = save_game.LoadContext(sg)
        load_context.debug = True
        with pytest.raises(save_game.SaveFormatError):
            sg.load_object(core.Player, fp, load_context)

def test_save_load_game(demo_content, demo_game, tmp_path):
    game = demo_game
    game.take_action(["go", {"location": "square"}])
    game.take_action(["approach", {"npc": "tamsin"}])
    game.run(["addQuest", {"questId": "find-work", "args": {}}])
    game.player.add_item("coin", 3)
    game.player.timers["letter"] = game.time
    game.run(["discoverLocation", {"location": "tavern"}])
    assert game.in_scene

    sg = sim.initialize_save_game(demo_content, save_path=str(tmp_path))
    filename = sg.save(game, str(tmp_path / "test.gaslight"))
    assert os.path.exists(filename)
    # no temp files left behind
    assert os.listdir(tmp_path) == ["test.gaslight"]

    g2 = sg.load(filename)
    assert g2.time == game.time
    assert g2.card_serial == game.card_serial
    assert g2.player.to_dict() == game.player.to_dict()
    assert list(g2.npcs.keys()) == list(game.npcs.keys())
    assert [n.to_dict() for n in g2.npcs.values()] == [n.to_dict() for n in game.npcs.values()]
    assert g2.npcs_present == game.npcs_present
    assert {k: v.to_dict() for k, v in g2.locations.items()} == {k: v.to_dict() for k, v in game.locations.items()}
    assert g2.get_location("tavern").discovered
    assert g2.get_location("tavern").num_visits == 0
    assert [s.to_dict() for s in g2.scenes] == [s.to_dict() for s in game.scenes]
    assert g2.counters == game.counters

    # the two games carry on identically, including random draws
    game.choose(0)
    g2.choose(0)
    assert texts(g2.scene) == texts(game.scene)
    assert labels(g2.scene) == labels(game.scene)
    assert g2.random.integers(1000) == game.random.integers(1000)

def test_save_with_date(content, tmp_path):
    content.register_location(core.LocationDefinition("cafe", "The Cafe"))
    content.register_npc(core.NPCDefinition("ada", "Ada"))
    dating.register_date_plan(content, dating.DatePlan("ada", "Ada", "cafe", "The Cafe", "endScene"))
    game = core.Game(content, seed=1, start_time=SUNDAY)
    dating.schedule_date(game, "ada", SUNDAY + 18*HOUR)

    sg = sim.initialize_save_game(content, save_path=str(tmp_path))
    g2 = sg.load(sg.save(game, str(tmp_path / "date.gaslight")))
    card = dating.date_card(g2)
    assert card is not None
    assert card.definition is content.card("date")
    assert card["meet_time"] == SUNDAY + 18*HOUR

    # the loaded card still runs its lifecycle
    g2.time_lapse(seconds=SUNDAY + 18*HOUR + 7200 - g2.time)
    assert dating.date_card(g2) is None

def test_format_version(demo_content, demo_game, tmp_path):
    sg = sim.initialize_save_game(demo_content, save_path=str(tmp_path))
    filename = sg.save(demo_game, str(tmp_path / "old.gaslight"))
    with config.override("save", FORMAT_VERSION=config.Settings.save.FORMAT_VERSION + 1):
        with pytest.raises(save_game.SaveFormatError):
            sg.load(filename)

def test_list_save_games(demo_content, demo_game, tmp_path):
    sg = sim.initialize_save_game(demo_content, save_path=str(tmp_path))
    sg.save(demo_game)
    sg.autosave(demo_game)
    save_games = sg.list_save_games()
    assert len(save_games) == 2
    assert all(s.game_time == demo_game.time for s in save_games)
    assert save_games[0].save_date >= save_games[1].save_date

def test_unserializable_scene(demo_content, demo_game, tmp_path):
    demo_game.add_option("Callable", lambda g, p: None) # type: ignore
    sg = sim.initialize_save_game(demo_content, save_path=str(tmp_path))
    with pytest.raises(TypeError):
        sg.save(demo_game, str(tmp_path / "bad.gaslight"))
    assert os.listdir(tmp_path) == []
