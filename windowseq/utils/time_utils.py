import functools
import time
from typing import Callable


def print_func_time(func: Callable) -> Callable:
    """prints the run time of every call, the last one is kept in `last_duration` (s)"""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            wrapper.last_duration = time.perf_counter() - start
            print(f'ran {func.__name__} in {wrapper.last_duration} s')

    wrapper.last_duration = None
    return wrapper
