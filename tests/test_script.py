import pytest

from gaslight import core
from gaslight.script import ScriptRegistry, UnknownScriptError, DuplicateScriptError, RegistryLockedError, InstructionError, is_instruction

from . import record

def test_unknown_script(game):
    with pytest.raises(UnknownScriptError) as excinfo:
        game.run("noSuchScript")
    assert excinfo.value.name == "noSuchScript"
    assert "script not found: noSuchScript" in str(excinfo.value)

    with pytest.raises(UnknownScriptError):
        game.run(["noSuchScript", {}])

def test_duplicate_script():
    registry = ScriptRegistry()
    registry.register("foo", lambda g, p: None)
    with pytest.raises(DuplicateScriptError):
        registry.register("foo", lambda g, p: None)
    assert len(registry) == 1

def test_empty_name():
    registry = ScriptRegistry()
    with pytest.raises(ValueError):
        registry.register("", lambda g, p: None)

def test_registry_locked_by_game(content):
    core.Game(content)
    assert content.locked
    with pytest.raises(RegistryLockedError):
        content.scripts.register("late", lambda g, p: None)
    with pytest.raises(RegistryLockedError):
        content.register_location(core.LocationDefinition("late", "Too Late"))

def test_decorator():
    registry = ScriptRegistry()

    @registry.script("double")
    def double(game, params):
        return params["x"] * 2

    assert "double" in registry
    assert registry.get("double") is double
    assert registry.run(None, ["double", {"x": 3}]) == 6 # type: ignore

def test_runs_once_with_params(game, calls):
    game.run(record("a"))
    assert calls == ["a"]

    # explicit params win over the instruction's own
    game.run(record("a"), {"value": "b"})
    assert calls == ["a", "b"]

    game.run("record", {"value": "c"})
    assert calls == ["a", "b", "c"]

def test_callable_script(game):
    seen = []
    result = game.run(lambda g, p: seen.append(p["x"]) or "done", {"x": 1})
    assert result == "done"
    assert seen == [1]

def test_bad_script(game):
    with pytest.raises(InstructionError):
        game.run(42) # type: ignore

def test_is_instruction():
    assert is_instruction(["foo", {}])
    assert is_instruction(("foo", {"a": 1}))
    assert not is_instruction(["foo"])
    assert not is_instruction(["foo", "bar"])
    assert not is_instruction([["foo", {}], ["bar", {}]])
    assert not is_instruction("foo")

