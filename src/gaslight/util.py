""" Utility methods broadly applicable across the codebase. """

import re
import logging
import datetime
from typing import Any

logger = logging.getLogger(__name__)

def fullname(o:Any) -> str:
    # from https://stackoverflow.com/a/2020083/553580
    # Python makes no guarantees as to whether the __module__ special
    # attribute is defined, so we take a more circumspect approach.

    if isinstance(o, type):
        klass = o
    else:
        klass = o.__class__

    module = klass.__module__
    if module is None or module == str.__class__.__module__:
        return klass.__qualname__  # Avoid reporting __builtin__
    else:
        return module + '.' + klass.__qualname__

RE_NON_ALNUM = re.compile(r'[^a-z0-9]')
def label_to_script_name(label:str) -> str:
    """ "Buy a Drink!" -> "buyadrink" """
    return RE_NON_ALNUM.sub('', label.lower())

def clip(x:float, min_x:float, max_x:float) -> float:
    return min(max_x, max(min_x, x))

def hour_in_range(hour:float, start:float, end:float) -> bool:
    """ true iff start <= hour < end, wrapping past midnight if start > end """
    if start <= end:
        return start <= hour < end
    else:
        return hour >= start or hour < end

def parse_timestamp(value:str) -> int:
    """ parses an iso-8601 datetime into unix seconds, treating naive as UTC """
    dt = datetime.datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=datetime.timezone.utc)
    return int(dt.timestamp())

def human_hour(hour:float) -> str:
    """ 18.5 -> "6:30pm" """
    h = int(hour) % 24
    m = int(round((hour - int(hour)) * 60)) % 60
    suffix = "am" if h < 12 else "pm"
    h12 = h % 12
    if h12 == 0:
        h12 = 12
    if m == 0:
        return f'{h12}{suffix}'
    return f'{h12}:{m:02d}{suffix}'

def human_timespan(timespan_sec:float) -> str:
    minutes = int(timespan_sec // 60)
    if minutes < 60:
        return f'{minutes} minutes'
    hours, minutes = divmod(minutes, 60)
    if minutes == 0:
        return f'{hours}h'
    return f'{hours}h {minutes}m'
