import pathlib
import sys

from windowseq.json_seq import read_json_seq
from windowseq.sliding_window import sliding_window
from windowseq.utils.time_utils import print_func_time

ELEMENTS = 200_000
SIZES = [2, 16, 256]
_END = object()
TESTDATA = pathlib.Path(__file__).parent.parent.joinpath('testdata', 'client.qlog')


def rebuild_window(seq, size: int):
    """drops the head and copies the tail on every step"""
    it = iter(seq)
    window = []
    while len(window) < size:
        element = next(it, _END)
        if element is _END:
            break
        window.append(element)
    yield tuple(window)
    for element in it:
        window = window[1:] + [element]
        yield tuple(window)


def consume(windows):
    for _ in windows:
        pass


def iterateRebuildWindows(size: int):
    consume(rebuild_window(range(ELEMENTS), size))


def iterateSlidingWindows(size: int):
    consume(sliding_window(range(ELEMENTS), size))


@print_func_time
def windowJsonSeq(filepath: pathlib.Path):
    with sliding_window(read_json_seq(filepath), 2) as windows:
        for a, b in windows:
            if 'time' in a and 'time' in b:
                _ = b['time'] - a['time']


def main():
    for size in SIZES:
        print(f'window size {size}')
        rebuild = print_func_time(iterateRebuildWindows)
        sliding = print_func_time(iterateSlidingWindows)
        rebuild(size)
        sliding(size)
        print(f'speedup {rebuild.last_duration / sliding.last_duration:.2f}x')
    filepath = pathlib.Path(sys.argv[1]) if len(sys.argv) > 1 else TESTDATA
    windowJsonSeq(filepath)


if __name__ == "__main__":
    main()
