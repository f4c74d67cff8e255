from typing import Generic, Iterator, Optional, TypeVar

from windowseq.errors import InvalidArgument

T = TypeVar('T')


class RingBuffer(Generic[T]):
    """Buffer of at most capacity items, grows on append and overwrites the oldest item once full"""
    capacity: int
    items: list
    head: int
    length: int

    def __init__(self, capacity: int):
        if isinstance(capacity, bool) or not isinstance(capacity, int):
            raise InvalidArgument('capacity', f'expected int, got {type(capacity).__name__}')
        if capacity <= 0:
            raise InvalidArgument('capacity', f'must be positive, got {capacity}')
        self.capacity = capacity
        self.items = []
        self.head = 0
        self.length = 0

    def __len__(self) -> int:
        return self.length

    @property
    def full(self) -> bool:
        return self.length == self.capacity

    def append(self, item: T) -> Optional[T]:
        """append item, return the evicted item if the buffer was full"""
        if self.full:
            evicted = self.items[self.head]
            self.items[self.head] = item
            self.head = (self.head + 1) % self.capacity
            return evicted
        self.items.append(item)
        self.length += 1
        return None

    def snapshot(self) -> tuple[T, ...]:
        """copy of the content, oldest first"""
        end = self.head + self.length
        if end <= self.capacity:
            return tuple(self.items[self.head:end])
        return tuple(self.items[self.head:]) + tuple(self.items[:end - self.capacity])

    def __iter__(self) -> Iterator[T]:
        for i in range(self.length):
            yield self.items[(self.head + i) % self.capacity]

    def clear(self):
        self.items = []
        self.head = 0
        self.length = 0

    def __repr__(self) -> str:
        return f'RingBuffer({self.capacity}, {list(self)})'
