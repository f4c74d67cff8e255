from __future__ import annotations

from enum import Enum
from typing import Generic, Iterable, Iterator, Optional, TypeVar

from typing_extensions import Self

from windowseq.errors import InvalidArgument
from windowseq.ring_buffer import RingBuffer

T = TypeVar('T')

_END = object()


class State(Enum):
    FILLING = 1
    SLIDING = 2
    EXHAUSTED = 3


def _check_arguments(source, size):
    if source is None:
        raise InvalidArgument('source', 'must not be None')
    if isinstance(size, bool) or not isinstance(size, int):
        raise InvalidArgument('size', f'expected int, got {type(size).__name__}')
    if size <= 0:
        raise InvalidArgument('size', f'must be positive, got {size}')


class SlidingWindow(Generic[T]):
    """
    Lazy iterator over the overlapping windows of `size` consecutive source elements.

    The first window holds min(len(source), size) elements, so at least one window
    is always produced. Every following window is shifted by one element.
    Windows are tuple snapshots and never share state with each other.

    The source is only touched when the first window is pulled. The source iterator
    is closed on exhaustion, on a source error, on close() and when leaving a with block.
    """
    source: Iterable[T]
    size: int
    state: State
    buffer: Optional[RingBuffer[T]]
    iterator: Optional[Iterator[T]]

    def __init__(self, source: Iterable[T], size: int):
        _check_arguments(source, size)
        self.source = source
        self.size = size
        self.state = State.FILLING
        self.buffer = None
        self.iterator = None

    def __iter__(self) -> Self:
        return self

    def __next__(self) -> tuple[T, ...]:
        if self.state is State.EXHAUSTED:
            raise StopIteration
        try:
            if self.state is State.FILLING:
                window = self._fill()
            else:
                window = self._slide()
        except BaseException:
            self.close()
            raise
        if window is None:
            raise StopIteration
        return window

    def _fill(self) -> tuple[T, ...]:
        self.iterator = iter(self.source)
        self.buffer = RingBuffer(self.size)
        # no pull once the buffer is full
        while not self.buffer.full:
            element = next(self.iterator, _END)
            if element is _END:
                window = self.buffer.snapshot()
                self.close()
                return window
            self.buffer.append(element)
        self.state = State.SLIDING
        return self.buffer.snapshot()

    def _slide(self) -> Optional[tuple[T, ...]]:
        element = next(self.iterator, _END)
        if element is _END:
            self.close()
            return None
        self.buffer.append(element)
        return self.buffer.snapshot()

    def close(self):
        """stop the iteration and release the source iterator"""
        self.state = State.EXHAUSTED
        iterator = self.iterator
        self.iterator = None
        if iterator is not None and hasattr(iterator, 'close'):
            iterator.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        return f'SlidingWindow(size={self.size}, state={self.state.name})'


def sliding_window(source: Iterable[T], size: int) -> SlidingWindow[T]:
    """
    s -> (s0,s1,...s[size-1]), (s1,s2,...,s[size]), ...

    >>> list(sliding_window([1, 2, 3, 4, 5], 2))
    [(1, 2), (2, 3), (3, 4), (4, 5)]
    >>> list(sliding_window([1, 2, 3], 5))
    [(1, 2, 3)]
    >>> list(sliding_window([], 3))
    [()]
    """
    return SlidingWindow(source, size)


def windowed(source: Iterable[T], n: int = 2) -> Iterator[tuple[T, ...]]:
    """like sliding_window but only full windows of width n, a shorter source yields nothing"""
    windows = SlidingWindow(source, n)
    return _full_windows(windows)


def _full_windows(windows: SlidingWindow[T]) -> Iterator[tuple[T, ...]]:
    with windows:
        for window in windows:
            if len(window) == windows.size:
                yield window
