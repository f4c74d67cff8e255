import contextlib
import gzip
import io
import os
import pathlib
import tempfile
import unittest
from unittest import mock

from windowseq.json_seq import read_json_seq
from windowseq.sliding_window import sliding_window

TESTDATA = pathlib.Path(__file__).parent.joinpath('testdata', 'client.qlog')

EVENTS = b'\n'.join([
    b'{"time":1.5,"name":"transport:packet_sent"}',
    b'',
    b'{"time":2.0,"name":"transport:packet_received"}',
    b'not json',
    b'{"time":3.25,"name":"transport:packet_sent"}',
]) + b'\n'


class TestJsonSeq(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.folder = pathlib.Path(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    def write(self, name: str, content: bytes) -> pathlib.Path:
        path = self.folder.joinpath(name)
        if name.endswith('.gz'):
            with gzip.open(path, 'wb') as f:
                f.write(content)
        else:
            with io.open(path, 'wb') as f:
                f.write(content)
        return path

    def test_read_lines(self):
        records = list(read_json_seq(self.write('events.jsonl', EVENTS)))
        self.assertEqual([r['time'] for r in records], [1.5, 2.0, 3.25])
        self.assertTrue(all(isinstance(r, dict) for r in records))

    def test_read_gzip(self):
        records = list(read_json_seq(self.write('events.jsonl.gz', EVENTS)))
        self.assertEqual(len(records), 3)
        self.assertEqual(records[1]['name'], 'transport:packet_received')

    def test_record_separator(self):
        records = list(read_json_seq(TESTDATA))
        self.assertEqual(records[0]['qlog_format'], 'JSON-SEQ')
        self.assertEqual(len(records), 6)

    def test_records_survive_next_parse(self):
        reader = read_json_seq(TESTDATA)
        first = next(reader)
        second = next(reader)
        self.assertEqual(first['trace']['vantage_point']['type'], 'client')
        self.assertEqual(second['data']['header']['packet_number'], 0)
        reader.close()

    def test_not_opened_before_iteration(self):
        reader = read_json_seq(self.folder.joinpath('missing.jsonl'))
        self.assertFalse(reader.opened)
        self.assertRaises(FileNotFoundError, lambda: next(reader))

    def test_closed_on_exhaustion(self):
        reader = read_json_seq(self.write('events.jsonl', EVENTS))
        list(reader)
        self.assertTrue(reader.opened)
        self.assertTrue(reader.closed)
        self.assertIsNone(reader.file_reader)
        self.assertRaises(StopIteration, lambda: next(reader))

    def test_offset(self):
        reader = read_json_seq(self.write('events.jsonl', EVENTS))
        next(reader)
        self.assertEqual(reader.offset, 0)
        next(reader)
        self.assertEqual(reader.offset, len(b'{"time":1.5,"name":"transport:packet_sent"}\n\n'))
        reader.close()

    def test_parse_error(self):
        reader = read_json_seq(self.write('broken.jsonl', b'{"time":1.0}\n{"time": }\n'))
        self.assertEqual(next(reader), {'time': 1.0})
        with self.assertRaises(ValueError) as ctx:
            next(reader)
        self.assertIn('offset 13', str(ctx.exception))
        self.assertTrue(reader.closed)
        self.assertIsNone(reader.file_reader)
        self.assertRaises(StopIteration, lambda: next(reader))

    def test_trace(self):
        path = self.write('events.jsonl', EVENTS)
        out = io.StringIO()
        with mock.patch.dict(os.environ, {'WINDOWSEQ_TRACE': '1'}), contextlib.redirect_stdout(out):
            list(read_json_seq(path))
        self.assertEqual(out.getvalue().splitlines(), [f'opened {path}', f'closed {path}'])

    def test_no_trace_by_default(self):
        path = self.write('events.jsonl', EVENTS)
        out = io.StringIO()
        with mock.patch.dict(os.environ, {'WINDOWSEQ_TRACE': '0'}), contextlib.redirect_stdout(out):
            list(read_json_seq(path))
        self.assertEqual(out.getvalue(), '')


class TestWindowsOverJsonSeq(unittest.TestCase):
    def test_event_pairs(self):
        events = read_json_seq(TESTDATA)
        gaps = [b['time'] - a['time'] for a, b in sliding_window(filter(lambda e: 'time' in e, events), 2)]
        self.assertEqual(len(gaps), 4)
        self.assertAlmostEqual(gaps[0], 13.71)
        self.assertTrue(events.closed)

    def test_early_abandonment_closes_file(self):
        reader = read_json_seq(TESTDATA)
        with sliding_window(reader, 3) as windows:
            window = next(windows)
            self.assertEqual(len(window), 3)
            self.assertFalse(reader.closed)
        self.assertTrue(reader.closed)
        self.assertIsNone(reader.file_reader)

    def test_short_file_gives_partial_window(self):
        reader = read_json_seq(TESTDATA)
        windows = list(sliding_window(reader, 10))
        self.assertEqual(len(windows), 1)
        self.assertEqual(len(windows[0]), 6)
        self.assertTrue(reader.closed)


if __name__ == '__main__':
    unittest.main()
