""" Built in scripts every game needs. """

from gaslight.script import ScriptRegistry

from . import control, predicates, content, scene, world

def register_scripts(registry:ScriptRegistry) -> None:
    control.register(registry)
    predicates.register(registry)
    content.register(registry)
    scene.register(registry)
    world.register(registry)
