import pytest

from gaslight import core, dsl

from . import SUNDAY, HOUR, texts

class DeadlineCard(core.CardDefinition):
    """ fails once the deadline field passes """

    def __init__(self, card_id:str, log:list) -> None:
        super().__init__(card_id, card_id.title())
        self.log = log

    def after_update(self, game, card):
        self.log.append(card.card_id)
        if card.failed:
            return
        if game.time >= card["deadline"]:
            card.failed = True
            game.player.add_stat("shame", 1)

    def reminders(self, game, card):
        if card.failed:
            return []
        return [core.Reminder(f'{self.name} is due', core.Urgency.URGENT, self.card_id)]

class RemovingCard(core.CardDefinition):
    """ removes another card when it updates """

    def __init__(self, card_id:str, victim:str, log:list) -> None:
        super().__init__(card_id, card_id.title())
        self.victim = victim
        self.log = log

    def after_update(self, game, card):
        self.log.append(card.card_id)
        game.remove_card(self.victim)

@pytest.fixture
def log() -> list:
    return []

def test_after_update_idempotent(content, log):
    content.register_card(DeadlineCard("essay", log))
    game = core.Game(content, start_time=SUNDAY)
    card = game.add_card("essay", deadline=SUNDAY + HOUR)

    game.time_lapse(minutes=30)
    assert not card.failed

    # several hours in one go, the card only sees the end state
    game.time_lapse(minutes=300)
    assert card.failed
    assert game.player.stat("shame") == 1

    # running it again without time passing changes nothing
    card.definition.after_update(game, card)
    game.tick()
    assert game.player.stat("shame") == 1
    assert log == ["essay"] * 4

def test_update_order(content, log):
    content.register_card(DeadlineCard("b", log))
    content.register_card(DeadlineCard("a", log))
    content.register_card(DeadlineCard("c", log))
    game = core.Game(content, start_time=SUNDAY)
    for card_id in ["c", "a", "b"]:
        game.add_card(card_id, deadline=SUNDAY + 24*HOUR)

    game.time_lapse(minutes=1)
    assert log == ["c", "a", "b"]

def test_removed_during_update(content, log):
    content.register_card(RemovingCard("bully", "victim", log))
    content.register_card(DeadlineCard("victim", log))
    content.register_card(DeadlineCard("bystander", log))
    game = core.Game(content, start_time=SUNDAY)
    game.add_card("bully")
    game.add_card("victim", deadline=SUNDAY + 24*HOUR)
    game.add_card("bystander", deadline=SUNDAY + 24*HOUR)

    game.time_lapse(minutes=1)
    assert log == ["bully", "bystander"]
    assert not game.player.has_card("victim")
    assert game.counters[core.Counters.CARDS_REMOVED] == 1

def test_remove_self(content):
    class OneShot(core.CardDefinition):
        def after_update(self, game, card):
            game.remove_card(card)
    content.register_card(OneShot("oneshot", "One Shot"))
    game = core.Game(content, start_time=SUNDAY)
    game.add_card("oneshot")
    game.time_lapse(minutes=1)
    assert game.player.cards == []
    assert not game.remove_card("oneshot")

def test_add_quest(content):
    content.register_card(core.CardDefinition("find-work", "Find Work"))
    game = core.Game(content, start_time=SUNDAY)

    game.run(dsl.add_quest("find-work"))
    assert game.run(dsl.has_card("find-work"))
    assert texts(game.scene) == ["Quest received: Find Work"]

    # adding it again does nothing
    game.run(dsl.add_quest("find-work"))
    assert len(game.player.cards) == 1
    assert len(game.scene.content) == 1

    assert not game.run(dsl.card_completed("find-work"))
    game.run(dsl.complete_quest("find-work"))
    assert game.run(dsl.card_completed("find-work"))
    assert not game.complete_quest("find-work")

def test_silent_quest(content):
    content.register_card(core.CardDefinition("secret", "Secret"))
    game = core.Game(content, start_time=SUNDAY)
    game.run(dsl.add_quest("secret", silent=True))
    assert game.player.has_card("secret")
    assert game.scene.content == []

def test_unknown_card(game):
    with pytest.raises(core.UnknownCardError):
        game.add_card("nope")

def test_card_fields(content):
    definition = content.register_card(core.CardDefinition("note", "Note"))
    card = core.Card(definition, "note-1", {"text": "hi", "count": 2})
    card["read"] = True
    card["where"] = None
    with pytest.raises(ValueError):
        card["list"] = [1, 2]
    with pytest.raises(ValueError):
        core.Card(definition, "note-2", {"nested": {"a": 1}})

    card2 = core.Card.from_dict(card.to_dict(), content.cards)
    assert card2.fields == card.fields
    assert card2.instance_id == "note-1"

    with pytest.raises(ValueError):
        core.Card.from_dict({"cardTypeId": "unknown", "instanceId": "x"}, content.cards)

def test_reminders(content, log):
    content.register_card(DeadlineCard("essay", log))
    content.register_card(core.CardDefinition("quiet", "Quiet"))
    game = core.Game(content, start_time=SUNDAY)
    game.add_card("quiet")
    game.add_card("essay", deadline=SUNDAY + HOUR)
    assert game.reminders() == [core.Reminder("Essay is due", core.Urgency.URGENT, "essay")]

    game.time_lapse(minutes=60)
    assert game.reminders() == []

def test_instance_ids(content):
    content.register_card(core.CardDefinition("note", "Note"))
    game = core.Game(content, start_time=SUNDAY)
    a = game.add_card("note")
    game.remove_card(a)
    b = game.add_card("note")
    assert a.instance_id != b.instance_id
