import logging
from typing import Any

import pytest

from gaslight import core, scripts, dating, sim
from gaslight.story import demo
from gaslight.script import Params

from . import SUNDAY, HOUR

# some logging to turn on if we like
#logging.getLogger("gaslight").level = logging.DEBUG
#logging.getLogger("gaslight.script").level = logging.DEBUG

@pytest.fixture
def calls() -> list[Any]:
    return []

@pytest.fixture
def content(calls:list[Any]) -> core.ContentRegistry:
    """ built in scripts plus "record", which notes its value in calls """
    content = core.ContentRegistry()
    scripts.register_scripts(content.scripts)
    dating.register(content)

    def record(game:core.Game, params:Params) -> Any:
        calls.append(params.get("value"))
        return params.get("result")
    content.scripts.register("record", record)

    return content

@pytest.fixture
def game(content:core.ContentRegistry) -> core.Game:
    """ a game at noon on a Sunday. register any content before asking for this """
    return core.Game(content, seed=0, start_time=SUNDAY + 12*HOUR)

@pytest.fixture
def demo_content() -> core.ContentRegistry:
    return sim.initialize_content()

@pytest.fixture
def demo_game(demo_content:core.ContentRegistry) -> core.Game:
    game = core.Game(demo_content, seed=0, start_time=SUNDAY + 12*HOUR)
    demo.start(game)
    return game
