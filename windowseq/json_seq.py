from __future__ import annotations

import gzip
import io
import os
import pathlib
from typing import BinaryIO, Iterator, Optional

import simdjson
from typing_extensions import Self

RECORD_SEPARATOR = b'\x1e'


def trace_enabled() -> bool:
    return os.environ.get('WINDOWSEQ_TRACE') == '1'


def read_json_seq(filepath: str | pathlib.Path) -> JsonSeqReader:
    """the file is not opened before iteration starts"""
    return JsonSeqReader(pathlib.Path(filepath))


class JsonSeqReader:
    """
    Single pass iterator over the JSON objects of a JSON-SEQ or JSON lines file, like a qlog trace.

    Every object is parsed with one reused simdjson.Parser and copied to a dict,
    so records stay valid after the next line is parsed.
    The file is closed when the records run out or when close() is called.
    """
    filepath: pathlib.Path
    file_reader: Optional[BinaryIO]
    lines: Optional[Iterator[tuple[int, bytes]]]
    json_parser: simdjson.Parser
    offset: int
    opened: bool
    closed: bool

    def __init__(self, filepath: pathlib.Path):
        self.filepath = filepath
        self.file_reader = None
        self.lines = None
        self.json_parser = simdjson.Parser()
        self.offset = -1
        self.opened = False
        self.closed = False

    def open(self) -> BinaryIO:
        if str(self.filepath).endswith('.gz'):
            reader = gzip.open(self.filepath, 'rb')
        else:
            reader = io.open(self.filepath, 'rb')
        if trace_enabled():
            print(f'opened {self.filepath}')
        return reader

    def __iter__(self) -> Self:
        return self

    def __next__(self) -> dict:
        if self.closed:
            raise StopIteration
        if self.file_reader is None:
            self.file_reader = self.open()
            self.opened = True
        try:
            return self.next_record()
        except BaseException:
            self.close()
            raise

    def iterate_json_lines(self) -> Iterator[tuple[int, bytes]]:
        """iterate over tuple of offset and object line, other lines are skipped"""
        r = self.file_reader
        offset = r.tell()
        line = r.readline()
        while line:
            stripped = line.lstrip(RECORD_SEPARATOR).strip()
            if stripped.startswith(b'{') and stripped.endswith(b'}'):  # if json object
                yield offset, stripped
            offset = r.tell()
            line = r.readline()

    def next_record(self) -> dict:
        if self.lines is None:
            self.lines = self.iterate_json_lines()
        offset, line = next(self.lines)
        self.offset = offset
        try:
            return self.json_parser.parse(line).as_dict()
        except ValueError as e:
            raise ValueError(f'failed to parse json at offset {offset}: {line}') from e

    def close(self):
        if self.closed:
            return
        self.closed = True
        self.lines = None
        if self.file_reader is not None:
            self.file_reader.close()
            self.file_reader = None
            if trace_enabled():
                print(f'closed {self.filepath}')

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
