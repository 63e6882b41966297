import io
import json
from collections.abc import Collection, Mapping
from typing import Any

import numpy as np
import msgpack # type: ignore

from gaslight.core.card import PRIMITIVE_TYPES

def size_to_bytes(x:int) -> bytes:
    return x.to_bytes(4, byteorder="big", signed=False)

def size_to_f(x:int, f:io.IOBase) -> int:
    return f.write(size_to_bytes(x))

def size_from_f(f:io.IOBase) -> int:
    return int.from_bytes(f.read(4))

def int_to_f(x:int, f:io.IOBase, blen:int=4, signed:bool=False) -> int:
    return f.write(x.to_bytes(blen, byteorder="big", signed=signed))

def int_from_f(f:io.IOBase, blen:int=4, signed:bool=False) -> int:
    return int.from_bytes(f.read(blen), byteorder="big", signed=signed)

def bool_to_f(b:bool, f:io.IOBase) -> int:
    return int_to_f(1 if b else 0, f, blen=1)

def bool_from_f(f:io.IOBase) -> bool:
    return int_from_f(f, blen=1) == 1

def to_len_pre_f(s:str, f:io.IOBase, blen:int=2) -> int:
    b = s.encode("utf8")
    prefix = len(b).to_bytes(blen)
    i = f.write(prefix)
    i += f.write(b)
    return i

def from_len_pre_f(f:io.IOBase, blen:int=2) -> str:
    prefix = f.read(blen)
    l = int.from_bytes(prefix)
    b = f.read(l)
    return b.decode("utf8")

def strs_to_f(seq:Collection[str], f:io.IOBase) -> int:
    bytes_written = size_to_f(len(seq), f)
    for s in seq:
        bytes_written += to_len_pre_f(s, f)
    return bytes_written

def strs_from_f(f:io.IOBase) -> list[str]:
    count = size_from_f(f)
    return [from_len_pre_f(f) for _ in range(count)]

def debug_string_w(s:str, f:io.IOBase) -> int:
    return to_len_pre_f(s, f)

def debug_string_r(s:str, f:io.IOBase) -> str:
    f_pos = f.tell()
    s_actual = from_len_pre_f(f)
    if s != s_actual:
        raise ValueError(f'expected marker {s!r} at {f_pos}, got {s_actual!r}')
    return s_actual

def random_state_to_f(r:np.random.Generator, f:io.IOBase) -> int:
    # we assume this is a PCG64
    state = r.bit_generator.state
    s = json.dumps(state)
    return to_len_pre_f(s, f)

def random_state_from_f(f:io.IOBase) -> np.random.Generator:
    s = from_len_pre_f(f)
    state = json.loads(s)
    r = np.random.default_rng()
    r.bit_generator.state = state
    return r

def msgpack_to_f(obj:Any, f:io.IOBase) -> int:
    """ writes a length prefixed msgpack blob

    fine for anything json-like: scene content, instructions, stats. """
    b = msgpack.packb(obj, use_bin_type=True)
    bytes_written = size_to_f(len(b), f)
    bytes_written += f.write(b)
    return bytes_written

def msgpack_from_f(f:io.IOBase) -> Any:
    count = size_from_f(f)
    return msgpack.unpackb(f.read(count), raw=False)

def check_primitive_fields(fields:Mapping[str, Any]) -> None:
    for k, v in fields.items():
        if not isinstance(v, PRIMITIVE_TYPES):
            raise ValueError(f'field {k} is not a primitive, got {type(v)}')
