import time
import io
import os
import glob
import abc
import datetime
import logging
import contextlib
import tempfile
from typing import Any, Generic, Optional, TypeVar

from gaslight import config, core, util
from gaslight.serialization import util as s_util

class SaveFormatError(ValueError):
    pass

class LoadContext:
    """ State for one load cycle. """

    def __init__(self, sg:"GameSaver") -> None:
        self.logger = logging.getLogger(util.fullname(self))
        self.save_game = sg
        self.debug = False
        self.content:core.ContentRegistry = sg.content
        self.game:core.Game = None # type: ignore

T = TypeVar("T")

class Saver(abc.ABC, Generic[T]):
    def __init__(self, save_game:"GameSaver"):
        self.save_game = save_game

    @abc.abstractmethod
    def save(self, obj:T, f:io.IOBase) -> int: ...
    @abc.abstractmethod
    def load(self, f:io.IOBase, load_context:LoadContext) -> T: ...

class SaveGame:
    def __init__(self, debug_flag:bool, save_date:datetime.datetime, format_version:int, game_time:int, filename:str=""):
        self.filename = filename
        self.debug_flag = debug_flag
        self.save_date = save_date
        self.format_version = format_version
        self.game_time = game_time

class GameSaver:
    """ Central point for saving a game.

    Dispatches to type specific savers. Content (scripts, definitions) is not
    saved, a save only makes sense loaded against the same ContentRegistry it
    was made with. """

    def __init__(self, content:core.ContentRegistry, debug:bool=True, save_path:Optional[str]=None) -> None:
        self.logger = logging.getLogger(util.fullname(self))

        self.debug = debug
        if save_path is None:
            save_path = config.Settings.save.PATH
        self._save_path:str = save_path
        self._save_file_glob = "save_*.gaslight"
        self._autosave_glob = "autosave.gaslight"
        self._save_register:dict[type, Saver] = {}

        self.content = content

    def _gen_save_filename(self) -> str:
        return f'save_{time.time()}.gaslight'

    def register_saver(self, klass:type, saver:Saver) -> None:
        """ Registers type specific save/load logic """
        self._save_register[klass] = saver

    def _save_metadata(self, game:core.Game, save_file:io.IOBase) -> int:
        bytes_written = 0
        bytes_written += s_util.bool_to_f(self.debug, save_file)
        bytes_written += s_util.int_to_f(config.Settings.save.FORMAT_VERSION, save_file, blen=2)
        bytes_written += s_util.to_len_pre_f(datetime.datetime.now().isoformat(), save_file)
        bytes_written += s_util.int_to_f(game.time, save_file, blen=8, signed=True)
        return bytes_written

    def _load_metadata(self, save_file:io.IOBase) -> SaveGame:
        debug_flag = s_util.bool_from_f(save_file)
        format_version = s_util.int_from_f(save_file, blen=2)
        save_date = datetime.datetime.fromisoformat(s_util.from_len_pre_f(save_file))
        game_time = s_util.int_from_f(save_file, blen=8, signed=True)
        return SaveGame(debug_flag, save_date, format_version, game_time)

    def save_object(self, obj:Any, f:io.IOBase, klass:Optional[type]=None) -> int:
        if klass is None:
            klass = type(obj)
        else:
            assert(isinstance(obj, klass))

        bytes_written = 0
        if self.debug:
            bytes_written += s_util.to_len_pre_f(f'__so:{util.fullname(klass)}', f)
        return bytes_written+self._save_register[klass].save(obj, f)

    def load_object(self, klass:type, f:io.IOBase, load_context:LoadContext) -> Any:
        if load_context.debug:
            klassname = s_util.from_len_pre_f(f)
            if klassname != f'__so:{util.fullname(klass)}':
                raise SaveFormatError(f'{klassname} not __so:{util.fullname(klass)} at {f.tell()}')
        return self._save_register[klass].load(f, load_context)

    def autosave(self, game:core.Game) -> str:
        return self.save(game, os.path.join(self._save_path, self._autosave_glob))

    def save(self, game:core.Game, save_filename:Optional[str]=None) -> str:
        self.logger.info("saving...")
        start_time = time.perf_counter()

        if save_filename is None:
            save_filename = os.path.join(self._save_path, self._gen_save_filename())
        save_dir = os.path.dirname(os.path.abspath(save_filename))
        os.makedirs(save_dir, exist_ok=True)
        bytes_written = 0
        with contextlib.ExitStack() as context_stack:
            # same directory so the rename below doesn't cross filesystems
            temp_save_file = context_stack.enter_context(tempfile.NamedTemporaryFile("wb", dir=save_dir, delete=False))
            self.logger.debug(f'saving to temp file {temp_save_file.name}')
            save_file:io.IOBase = temp_save_file # type: ignore
            try:
                # put metadata about the save game at the top for quick retrieval
                bytes_written += self._save_metadata(game, save_file)

                bytes_written += s_util.debug_string_w("game", save_file)
                bytes_written += self.save_object(game, save_file)
                save_file.flush()
            except Exception:
                os.remove(temp_save_file.name)
                raise

            # move the temp file into final home, so we only end up with good files
            os.replace(temp_save_file.name, save_filename)

        self.logger.info(f'saved {bytes_written}bytes to {save_filename} in {time.perf_counter()-start_time}s')

        return save_filename

    def list_save_games(self) -> list[SaveGame]:
        save_games = []
        for x in set(glob.glob(os.path.join(self._save_path, self._save_file_glob)) + glob.glob(os.path.join(self._save_path, self._autosave_glob))):
            with open(x, "rb") as f:
                save_game = self._load_metadata(f)
                save_game.filename = x
                save_games.append(save_game)
        save_games.sort(key=lambda x: x.save_date, reverse=True)
        return save_games

    def load(self, save_filename:str, save_file:Optional[io.IOBase]=None) -> core.Game:
        self.logger.info(f'loading {save_filename}')
        load_context = LoadContext(self)
        with contextlib.ExitStack() as context_stack:
            if save_file is None:
                save_file = context_stack.enter_context(open(save_filename, "rb"))
            self.logger.debug("loading metadata")
            save_game = self._load_metadata(save_file)
            if save_game.format_version != config.Settings.save.FORMAT_VERSION:
                raise SaveFormatError(f'save format {save_game.format_version} is not supported, expected {config.Settings.save.FORMAT_VERSION}')
            load_context.debug = save_game.debug_flag

            s_util.debug_string_r("game", save_file)
            game = self.load_object(core.Game, save_file, load_context)

            self.logger.info("load complete")
            return game

class SceneSaver(Saver[core.Scene]):
    def save(self, scene:core.Scene, f:io.IOBase) -> int:
        return s_util.msgpack_to_f(scene.to_dict(), f)

    def load(self, f:io.IOBase, load_context:LoadContext) -> core.Scene:
        return core.Scene.from_dict(s_util.msgpack_from_f(f))

class CardSaver(Saver[core.Card]):
    def save(self, card:core.Card, f:io.IOBase) -> int:
        s_util.check_primitive_fields(card.fields)
        bytes_written = 0
        bytes_written += s_util.to_len_pre_f(card.card_id, f)
        bytes_written += s_util.to_len_pre_f(card.instance_id, f)
        bytes_written += s_util.msgpack_to_f(card.fields, f)
        return bytes_written

    def load(self, f:io.IOBase, load_context:LoadContext) -> core.Card:
        card_id = s_util.from_len_pre_f(f)
        instance_id = s_util.from_len_pre_f(f)
        fields = s_util.msgpack_from_f(f)
        return core.Card(load_context.content.card(card_id), instance_id, fields)

class NPCSaver(Saver[core.NPC]):
    def save(self, npc:core.NPC, f:io.IOBase) -> int:
        bytes_written = 0
        bytes_written += s_util.to_len_pre_f(npc.npc_id, f)
        bytes_written += s_util.msgpack_to_f(npc.to_dict(), f)
        return bytes_written

    def load(self, f:io.IOBase, load_context:LoadContext) -> core.NPC:
        npc_id = s_util.from_len_pre_f(f)
        # built directly, generate and on_move already ran before the save
        npc = core.NPC(load_context.content.npc(npc_id))
        npc.load_dict(s_util.msgpack_from_f(f))
        return npc

class LocationSaver(Saver[core.Location]):
    def save(self, location:core.Location, f:io.IOBase) -> int:
        bytes_written = 0
        bytes_written += s_util.to_len_pre_f(location.location_id, f)
        bytes_written += s_util.int_to_f(location.num_visits, f)
        bytes_written += s_util.bool_to_f(location.discovered, f)
        return bytes_written

    def load(self, f:io.IOBase, load_context:LoadContext) -> core.Location:
        location_id = s_util.from_len_pre_f(f)
        location = core.Location(load_context.content.location(location_id))
        location.num_visits = s_util.int_from_f(f)
        location.discovered = s_util.bool_from_f(f)
        return location

class PlayerSaver(Saver[core.Player]):
    def save(self, player:core.Player, f:io.IOBase) -> int:
        bytes_written = 0
        data = player.to_dict()
        del data["cards"]
        bytes_written += s_util.msgpack_to_f(data, f)

        bytes_written += s_util.debug_string_w("cards", f)
        bytes_written += s_util.size_to_f(len(player.cards), f)
        for card in player.cards:
            bytes_written += self.save_game.save_object(card, f)
        return bytes_written

    def load(self, f:io.IOBase, load_context:LoadContext) -> core.Player:
        player = core.Player()
        player.load_dict(s_util.msgpack_from_f(f), load_context.content.cards)

        s_util.debug_string_r("cards", f)
        count = s_util.size_from_f(f)
        for _ in range(count):
            player.cards.append(self.save_game.load_object(core.Card, f, load_context))
        return player

class GameStateSaver(Saver[core.Game]):
    def save(self, game:core.Game, f:io.IOBase) -> int:
        bytes_written = 0
        bytes_written += s_util.debug_string_w("clock", f)
        bytes_written += s_util.int_to_f(game.time, f, blen=8, signed=True)
        bytes_written += s_util.int_to_f(game.card_serial, f)
        bytes_written += s_util.random_state_to_f(game.random, f)

        bytes_written += s_util.debug_string_w("player", f)
        bytes_written += self.save_game.save_object(game.player, f)

        # materialization order is tick order, so it's preserved
        bytes_written += s_util.debug_string_w("npcs", f)
        bytes_written += s_util.size_to_f(len(game.npcs), f)
        for npc in game.npcs.values():
            bytes_written += self.save_game.save_object(npc, f)
        bytes_written += s_util.strs_to_f(game.npcs_present, f)

        bytes_written += s_util.debug_string_w("locations", f)
        bytes_written += s_util.size_to_f(len(game.locations), f)
        for location in game.locations.values():
            bytes_written += self.save_game.save_object(location, f)

        bytes_written += s_util.debug_string_w("scenes", f)
        bytes_written += s_util.size_to_f(len(game.scenes), f)
        for scene in game.scenes:
            bytes_written += self.save_game.save_object(scene, f)

        bytes_written += s_util.debug_string_w("counters", f)
        bytes_written += s_util.msgpack_to_f(list(game.counters), f)
        return bytes_written

    def load(self, f:io.IOBase, load_context:LoadContext) -> core.Game:
        s_util.debug_string_r("clock", f)
        game_time = s_util.int_from_f(f, blen=8, signed=True)
        game = core.Game(load_context.content, start_time=game_time)
        load_context.game = game
        game.card_serial = s_util.int_from_f(f)
        game.random = s_util.random_state_from_f(f)

        s_util.debug_string_r("player", f)
        game.player = self.save_game.load_object(core.Player, f, load_context)

        s_util.debug_string_r("npcs", f)
        count = s_util.size_from_f(f)
        for _ in range(count):
            npc = self.save_game.load_object(core.NPC, f, load_context)
            game.npcs[npc.npc_id] = npc
        game.npcs_present = s_util.strs_from_f(f)

        s_util.debug_string_r("locations", f)
        count = s_util.size_from_f(f)
        for _ in range(count):
            location = self.save_game.load_object(core.Location, f, load_context)
            game.locations[location.location_id] = location

        s_util.debug_string_r("scenes", f)
        count = s_util.size_from_f(f)
        if count == 0:
            raise SaveFormatError("save has no root scene")
        game.scenes = [self.save_game.load_object(core.Scene, f, load_context) for _ in range(count)]

        s_util.debug_string_r("counters", f)
        counters = s_util.msgpack_from_f(f)
        # counters added since the save start from zero
        for i, value in enumerate(counters[:len(game.counters)]):
            game.counters[i] = value
        return game
