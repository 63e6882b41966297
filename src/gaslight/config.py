import toml # type: ignore
import importlib.resources
import types
import contextlib
from typing import Dict, Optional, Any, List, TextIO, Iterator

def merge(a:Dict[str, Any], b:Dict[str, Any], path:Optional[List[str]]=None) -> Dict[str, Any]:
    """ recursively merges b into a

    b[key] overrides a[key] if key present in both. raises an exception if
    b[key] and a[key] are not of the same type.

    inspired by https://stackoverflow.com/a/51653724/553580
    """

    if path is None: path = []
    for key in b:
        if key in a:
            if isinstance(a[key], dict) and isinstance(b[key], dict):
                merge(a[key], b[key], path + [str(key)])
            elif a[key].__class__ == b[key].__class__:
                a[key] = b[key]
            else:
                raise ValueError('Conflict at %s' % '.'.join(path + [str(key)]))
        else:
            a[key] = b[key]
    return a

def dict_to_simplenamespace(d:Dict[str, Any]) -> types.SimpleNamespace:
    """ Converts a dict recursively to a SimpleNamespace. """
    d = d.copy()
    for key in d:
        if isinstance(d[key], dict):
            d[key] = dict_to_simplenamespace(d[key])

    return types.SimpleNamespace(**d)

def load_config(config_file:Optional[TextIO]=None) -> types.SimpleNamespace:
    config = toml.loads(importlib.resources.read_text("gaslight.data", "config.toml"))
    if config_file:
        override = toml.load(config_file)
        merge(config, override)

    global Settings
    Settings = dict_to_simplenamespace(config)

    return Settings

@contextlib.contextmanager
def override(section:str, **values:Any) -> Iterator[types.SimpleNamespace]:
    """ temporarily replaces values in one section of Settings

    handy in tests, e.g. `with config.override("dating", WAIT_MINUTES=30)` """
    namespace = getattr(Settings, section)
    old_values = {k: getattr(namespace, k) for k in values}
    for k, v in values.items():
        setattr(namespace, k, v)
    try:
        yield namespace
    finally:
        for k, v in old_values.items():
            setattr(namespace, k, v)

def skill_based_on(skill:str) -> Optional[str]:
    """ the main stat a skill draws on, if any """
    return getattr(Settings.skills.BASED_ON, skill, None)

# it's ok to reload the config with a file elsewhere, but we start with the
# built-in config
Settings = load_config()
