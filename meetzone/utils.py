# meetzone/utils.py

import time
from functools import wraps

from loguru import logger


def format_time(seconds: float) -> str:
    """
    Format seconds as "xh ym zs", rounded to whole seconds.
    Zero components are left out.
    """
    h, rem = divmod(int(round(seconds)), 3600)
    m, s = divmod(rem, 60)
    out = []
    if h > 0:
        out.append(f"{h}h")
    if m > 0:
        out.append(f"{m}m")
    if s > 0 or not out:
        out.append(f"{s}s")
    return " ".join(out)


def format_contour_value(value: float) -> str:
    """Render a contour value without a trailing '.0' (20.0 -> '20')."""
    if value == int(value):
        return str(int(value))
    return f"{value:g}"


def log_timing(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        start = time.perf_counter()
        result = func(*args, **kwargs)
        elapsed = time.perf_counter() - start
        logger.debug("{} took {}", func.__name__, format_time(elapsed))
        return result

    return wrapper
