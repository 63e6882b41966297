from typing import Any

from gaslight import core, util

# midnight at the start of a Sunday
SUNDAY = util.parse_timestamp("1902-01-05T00:00:00")
HOUR = core.game.SECONDS_PER_HOUR

def texts(scene:core.Scene) -> list[str]:
    """ the plain text of each content item in a scene """
    return ["".join(x for x in item["content"] if isinstance(x, str)) for item in scene.content]

def labels(scene:core.Scene) -> list[str]:
    return [option["label"] for option in scene.options]

def record(value:Any=None, result:Any=None) -> list[Any]:
    """ instruction for the "record" test script """
    params:dict[str, Any] = {}
    if value is not None:
        params["value"] = value
    if result is not None:
        params["result"] = result
    return ["record", params]

TRUE = ["not", {"predicate": ["hasItem", {"item": "nothing"}]}]
FALSE = ["hasItem", {"item": "nothing"}]
