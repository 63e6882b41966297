""" Script registry and dispatch.

A script is anything we can run against the game:
 * a name registered in a ScriptRegistry
 * an instruction, `[name, params]`, which is a serializable call
 * a callable taking (game, params)

Everything that runs content goes through ScriptRegistry.run
"""

import logging
from collections.abc import Mapping, Callable
from typing import Any, Union, TYPE_CHECKING

from gaslight import util

if TYPE_CHECKING:
    from gaslight.core.game import Game

Params = Mapping[str, Any]
ScriptFn = Callable[["Game", Params], Any]
Instruction = list[Any]
Script = Union[str, Instruction, tuple[str, Params], ScriptFn]

class UnknownScriptError(ValueError):
    def __init__(self, name:str) -> None:
        super().__init__(f'script not found: {name}')
        self.name = name

class DuplicateScriptError(ValueError):
    pass

class RegistryLockedError(ValueError):
    pass

class InstructionError(ValueError):
    """ malformed instruction or builder arguments """
    pass

def is_instruction(value:Any) -> bool:
    return isinstance(value, (list, tuple)) and len(value) == 2 and isinstance(value[0], str) and isinstance(value[1], Mapping)

class ScriptRegistry:
    """ Mapping from script name to behavior.

    Names are unique, registering a name twice is an error. Once locked (which
    happens when a game starts its clock) no more scripts can be registered.
    """

    def __init__(self) -> None:
        self.logger = logging.getLogger(util.fullname(self))
        self._scripts:dict[str, ScriptFn] = {}
        self.locked = False

    def __contains__(self, name:str) -> bool:
        return name in self._scripts

    def __len__(self) -> int:
        return len(self._scripts)

    def register(self, name:str, fn:ScriptFn) -> None:
        if self.locked:
            raise RegistryLockedError(f'cannot register script {name} after registry is locked')
        if not name:
            raise ValueError("script name must be non-empty")
        if name in self._scripts:
            raise DuplicateScriptError(f'duplicate script name: {name}')
        self._scripts[name] = fn

    def register_all(self, scripts:Mapping[str, ScriptFn]) -> None:
        for name, fn in scripts.items():
            self.register(name, fn)

    def script(self, name:str) -> Callable[[ScriptFn], ScriptFn]:
        """ decorator form of register """
        def decorator(fn:ScriptFn) -> ScriptFn:
            self.register(name, fn)
            return fn
        return decorator

    def lock(self) -> None:
        if not self.locked:
            self.logger.info(f'locking script registry with {len(self._scripts)} scripts')
        self.locked = True

    def get(self, name:str) -> ScriptFn:
        try:
            return self._scripts[name]
        except KeyError:
            raise UnknownScriptError(name) from None

    def resolve(self, script:Script, params:Params|None=None) -> tuple[ScriptFn, dict[str, Any]]:
        """ turns any script-shaped value into a behavior and its params

        params given explicitly override any params in an instruction. """
        call_params:dict[str, Any] = {}
        if isinstance(script, str):
            fn = self.get(script)
        elif is_instruction(script):
            name, instruction_params = script # type: ignore[misc]
            fn = self.get(name)
            call_params.update(instruction_params)
        elif callable(script):
            fn = script
        else:
            raise InstructionError(f'cannot run {script!r}, expected a name, instruction or callable')

        if params:
            call_params.update(params)
        return fn, call_params

    def run(self, game:"Game", script:Script, params:Params|None=None) -> Any:
        fn, call_params = self.resolve(script, params)
        if isinstance(script, str):
            self.logger.debug(f'run {script}')
        elif is_instruction(script):
            self.logger.debug(f'run {script[0]}') # type: ignore[index]
        return fn(game, call_params)
