"""
General purpose helpers
"""

import copy
import secrets
import string
import threading
import time
from functools import wraps
from typing import Any, Callable, Dict
from urllib.parse import unquote


ALPHANUMERIC = string.ascii_uppercase + string.ascii_lowercase + string.digits


def debounce(func: Callable, wait: float) -> Callable:
    """
    Delay calls to func until wait seconds have passed without another call

    Only the arguments of the last call are used. The returned wrapper has a
    cancel() method that drops a pending call.
    """
    lock = threading.Lock()
    timer = None

    @wraps(func)
    def debounced(*args, **kwargs):
        nonlocal timer
        with lock:
            if timer is not None:
                timer.cancel()
            timer = threading.Timer(wait, func, args, kwargs)
            timer.daemon = True
            timer.start()

    def cancel():
        nonlocal timer
        with lock:
            if timer is not None:
                timer.cancel()
                timer = None

    debounced.cancel = cancel
    return debounced


def throttle(func: Callable, limit: float) -> Callable:
    """Call func at most once per limit seconds, dropping calls in between"""
    lock = threading.Lock()
    last_call = None

    @wraps(func)
    def throttled(*args, **kwargs):
        nonlocal last_call
        now = time.monotonic()
        with lock:
            if last_call is not None and now - last_call < limit:
                return None
            last_call = now
        return func(*args, **kwargs)

    return throttled


def random_string(length: int) -> str:
    """Random alphanumeric string"""
    return "".join(secrets.choice(ALPHANUMERIC) for _ in range(length))


def calculate_hash(text: str) -> int:
    """32-bit signed rolling hash (h = h * 31 + ord(c))"""
    value = 0
    for char in text:
        value = (value * 31 + ord(char)) & 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def format_bytes(num_bytes: float, decimals: int = 2) -> str:
    """Human readable size, e.g. 1536 -> '1.5 KB'"""
    if num_bytes == 0:
        return "0 Bytes"

    sizes = ["Bytes", "KB", "MB", "GB", "TB"]
    decimals = max(decimals, 0)

    index = 0
    value = float(num_bytes)
    while value >= 1024 and index < len(sizes) - 1:
        value /= 1024
        index += 1

    rounded = round(value, decimals)
    text = f"{rounded:.{decimals}f}".rstrip("0").rstrip(".") if decimals else str(int(rounded))
    return f"{text} {sizes[index]}"


def parse_query_string(query: str) -> Dict[str, str]:
    """Parse 'a=1&b=' into {'a': '1', 'b': ''}; later keys overwrite earlier ones"""
    params = {}
    query = query.lstrip("?")
    if not query:
        return params

    for pair in query.split("&"):
        if not pair:
            continue
        key, _, value = pair.partition("=")
        params[unquote(key)] = unquote(value)
    return params


def merge_dicts(target: Dict[str, Any], source: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge source into a copy of target"""
    output = dict(target)
    for key, value in source.items():
        if isinstance(value, dict) and isinstance(output.get(key), dict):
            output[key] = merge_dicts(output[key], value)
        else:
            output[key] = value
    return output


def deep_clone(value: Any) -> Any:
    """Independent copy of value; nested containers are copied, not shared"""
    return copy.deepcopy(value)
