""" Text mode runner for gaslight stories. """

import sys
import logging
import warnings
from collections.abc import Sequence
from typing import Any, Optional, TextIO

from gaslight import util, core, config, dating, scripts
from gaslight.story import demo
from gaslight.serialization import save_game

def initialize_content() -> core.ContentRegistry:
    content = core.ContentRegistry()
    scripts.register_scripts(content.scripts)
    dating.register(content)
    demo.register(content)
    return content

def initialize_save_game(content:core.ContentRegistry, debug:bool=True, save_path:Optional[str]=None) -> save_game.GameSaver:
    sg = save_game.GameSaver(content, debug=debug, save_path=save_path)

    sg.register_saver(core.Game, save_game.GameStateSaver(sg))
    sg.register_saver(core.Player, save_game.PlayerSaver(sg))
    sg.register_saver(core.Card, save_game.CardSaver(sg))
    sg.register_saver(core.NPC, save_game.NPCSaver(sg))
    sg.register_saver(core.Location, save_game.LocationSaver(sg))
    sg.register_saver(core.Scene, save_game.SceneSaver(sg))

    return sg

def render_inline(parts:Sequence[Any]) -> str:
    rendered = []
    for part in parts:
        if isinstance(part, str):
            rendered.append(part)
        elif isinstance(part, dict):
            rendered.append(str(part.get("text", "")))
        else:
            rendered.append(str(part))
    return "".join(rendered)

def render_content(game:core.Game, item:dict[str, Any]) -> str:
    text = render_inline(item.get("content", []))
    if item["type"] == "speech":
        speaker = "Someone"
        if item.get("npc"):
            speaker = game.get_npc(item["npc"]).display_name
        return f'{speaker}: "{text}"'
    return text

class TextInterface:
    """ A read-eval loop over a game.

    Numbers pick an option from the current scene. Outside a scene the player
    can look, go, wait, talk, save and quit. """

    def __init__(self, game:core.Game, game_saver:save_game.GameSaver, stdin:TextIO=sys.stdin, stdout:TextIO=sys.stdout) -> None:
        self.logger = logging.getLogger(util.fullname(self))
        self.game = game
        self.game_saver = game_saver
        self.stdin = stdin
        self.stdout = stdout
        self.keep_running = True

    def write(self, s:str="") -> None:
        self.stdout.write(s)
        self.stdout.write("\n")

    def show_scene(self) -> None:
        for item in self.game.scene.content:
            self.write(render_content(self.game, item))
        for i, option in enumerate(self.game.scene.options):
            self.write(f'  {i+1}. {option["label"]}')

    def show_location(self) -> None:
        game = self.game
        location = game.location
        self.write(f'{util.human_hour(game.hour_of_day)}, {game.date.strftime("%A %d %B %Y")}')
        if location is None:
            self.write("You are nowhere.")
            return
        self.write(f'{location.name}. {location.definition.description}')
        if game.npcs_present:
            names = ", ".join(f'{game.get_npc(x).display_name} ({x})' for x in game.npcs_present)
            self.write(f'Here: {names}')
        exits = ", ".join(f'{game.get_location(l.dest).name} ({l.dest}, {l.minutes:g}m)' for l in location.definition.links)
        self.write(f'Exits: {exits}')
        for reminder in game.reminders():
            marker = "!" if reminder.urgency == core.Urgency.URGENT else "-"
            self.write(f' {marker} {reminder.text}')

    def show_cards(self) -> None:
        if not self.game.player.cards:
            self.write("Nothing to do.")
        for card in self.game.player.cards:
            definition = card.definition
            self.write(f'{definition.display_name(self.game, card)}: {definition.display_description(self.game, card)}')

    def act(self, script:Any) -> None:
        self.game.take_action(script)
        self.show_scene()

    def handle(self, line:str) -> None:
        words = line.split()
        if not words:
            return
        command, args = words[0].lower(), words[1:]

        if command.isdigit():
            index = int(command) - 1
            if not 0 <= index < len(self.game.scene.options):
                self.write("No such option.")
                return
            self.game.choose(index)
            self.show_scene()
            return
        if command in ("quit", "q"):
            self.keep_running = False
            return
        if self.game.in_scene:
            self.write("Choose one of the options.")
            return

        if command in ("look", "l"):
            self.show_location()
        elif command == "go" and args:
            self.act(["go", {"location": args[0]}])
        elif command == "wait":
            minutes = float(args[0]) if args else config.Settings.clock.DEFAULT_WAIT_MINUTES
            self.act(["wait", {"minutes": minutes, "text": f'You wait {util.human_timespan(minutes * 60)}.'}])
        elif command in ("talk", "approach") and args:
            if args[0] not in self.game.npcs_present:
                self.write("They aren't here.")
                return
            self.act(["approach", {"npc": args[0]}])
        elif command == "cards":
            self.show_cards()
        elif command == "saves":
            for sg in self.game_saver.list_save_games():
                self.write(f'{sg.filename} {sg.save_date.strftime("%Y-%m-%d %H:%M")}')
        elif command == "save":
            filename = self.game_saver.save(self.game, args[0] if args else None)
            self.write(f'Saved to {filename}')
        else:
            self.write("Try: look, go <place>, wait [minutes], talk <npc>, cards, save, saves, quit")

    def run(self) -> None:
        self.show_scene()
        self.show_location()
        while self.keep_running:
            self.stdout.write("> ")
            self.stdout.flush()
            line = self.stdin.readline()
            if not line:
                break
            try:
                self.handle(line)
            except ValueError as e:
                # bad input or an unavailable action, the game state is intact
                self.logger.warning(f'could not handle {line.strip()!r}: {e}')
                self.write(f'Cannot do that: {e}')

def main() -> None:
    logging.basicConfig(
            format="%(asctime)s %(name)-12s %(levelname)-8s %(message)s",
            filename=config.Settings.sim.LOG_FILE,
            filemode="w",
            level=logging.INFO
    )
    # send warnings to the logger
    logging.captureWarnings(True)
    # turn warnings into exceptions
    warnings.filterwarnings("error")

    content = initialize_content()
    sg = initialize_save_game(content)

    if len(sys.argv) > 1:
        game = sg.load(sys.argv[1])
    else:
        game = core.Game(content)
        demo.start(game)

    ui = TextInterface(game, sg)
    ui.run()

    counter_str = "\n".join(map(lambda x: f'{str(x[0])}:\t{x[1]}', zip(list(core.Counters), game.counters)))
    logging.info(f'counters:\n{counter_str}')
    logging.info("done.")

if __name__ == "__main__":
    main()
