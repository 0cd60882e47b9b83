import io
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from letor.data.io import LetorFile, read_records, save_records, write_records
from letor.data.record import Record
from letor.errors import EmptyInputError, FormatError
from letor_samples import SAMPLE_DATASET


class TestReadRecords(unittest.TestCase):
    def test_reads_sample_dataset_from_file(self):
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "train.txt"
            path.write_text(SAMPLE_DATASET, encoding="utf-8")
            records = list(read_records(path))
        self.assertEqual(len(records), 25)
        self.assertEqual([r.group_id for r in records].count(1), 10)
        self.assertEqual(records[0].description, "7555 rambo")

    def test_reads_from_stream(self):
        stream = io.StringIO("1 qid:1 1:1.0\n0 qid:2 1:2.0\n")
        self.assertEqual([r.group_id for r in read_records(stream)], [1, 2])

    def test_skips_blank_and_comment_lines(self):
        lines = ["", "   ", "\t", "# header comment", "   # indented comment", "2 qid:5 1:3.0 # doc"]
        records = list(read_records(lines))
        self.assertEqual(len(records), 1)
        self.assertEqual(records[0].group_id, 5)

    def test_fails_fast_with_line_number(self):
        lines = ["1 qid:1 1:1.0", "", "4 qid:1", "1 qid:2 1:1.0"]
        it = read_records(lines)
        self.assertEqual(next(it).group_id, 1)
        with self.assertRaises(FormatError) as ctx:
            next(it)
        self.assertEqual(ctx.exception.line_number, 3)
        self.assertIn("4 qid:1", str(ctx.exception))
        # the sequence is over after the failure
        with self.assertRaises(StopIteration):
            next(it)

    def test_error_names_the_file(self):
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "bad.txt"
            path.write_text("x qid:1 1:2.0\n", encoding="utf-8")
            with self.assertRaises(FormatError) as ctx:
                list(read_records(path))
        self.assertEqual(ctx.exception.source, str(path))
        self.assertIn("bad.txt:1", str(ctx.exception))

    def test_invalid_utf8_is_a_format_error(self):
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "latin1.txt"
            path.write_bytes(b"1 qid:1 1:1.0\n1 qid:1 1:1.0 # caf\xe9\n")
            it = read_records(path)
            self.assertEqual(next(it).label, 1)
            with self.assertRaises(FormatError) as ctx:
                next(it)
        self.assertEqual(ctx.exception.line_number, 2)
        self.assertEqual(ctx.exception.source, str(path))
        self.assertIn("UTF-8", str(ctx.exception))

    def test_crlf_line_endings(self):
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "crlf.txt"
            path.write_bytes(b"1 qid:1 1:1.0 # a\r\n0 qid:1 1:2.0\r\n")
            records = list(read_records(path))
        self.assertEqual([r.description for r in records], ["a", ""])

    def test_is_lazy(self):
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "train.txt"
            path.write_text("1 qid:1 1:1.0\nnot a record\n", encoding="utf-8")
            it = read_records(path)
            self.assertEqual(next(it).label, 1)
            with self.assertRaises(FormatError):
                next(it)


class TestLetorFile(unittest.TestCase):
    def test_iteration_is_restartable(self):
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "train.txt"
            path.write_text(SAMPLE_DATASET, encoding="utf-8")
            data = LetorFile(path)
            first = list(data)
            second = list(data)
        self.assertEqual(len(first), 25)
        self.assertEqual(first, second)

    def test_num_features_from_first_record(self):
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "train.txt"
            path.write_text("# comment\n\n1 qid:1 1:1.0 2:2.0 3:3.0\n1 qid:1 1:1.0\n", encoding="utf-8")
            self.assertEqual(LetorFile(path).num_features(), 3)

    def test_empty_file_has_no_feature_count(self):
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "empty.txt"
            path.write_text("\n# nothing here\n", encoding="utf-8")
            with self.assertRaises(EmptyInputError):
                LetorFile(path).num_features()

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            list(LetorFile("/nonexistent/train.txt"))


class TestWriteRecords(unittest.TestCase):
    def test_write_to_stream_in_order(self):
        records = [Record(1, 2, (1.0,), "a"), Record(0, 1, (2.0,))]
        out = io.StringIO()
        self.assertEqual(write_records(out, records), 2)
        self.assertEqual(out.getvalue(), "1 qid:2 1:1.0 # a\n0 qid:1 1:2.0 \n")

    def test_save_then_read_back(self):
        records = list(read_records(SAMPLE_DATASET.splitlines()))
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "nested" / "out.txt"
            self.assertEqual(save_records(path, records), 25)
            self.assertEqual(list(LetorFile(path)), records)
            self.assertEqual([p.name for p in path.parent.iterdir()], ["out.txt"])

    def test_failed_save_leaves_no_file(self):
        def exploding():
            yield Record(1, 1, (1.0,))
            raise KeyboardInterrupt

        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "out.txt"
            with self.assertRaises(KeyboardInterrupt):
                save_records(path, exploding())
            self.assertEqual(list(Path(td).iterdir()), [])

    def test_save_uses_atomic_replace(self):
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "out.txt"
            path.write_text("old\n", encoding="utf-8")
            with mock.patch("letor.data.io.os.replace", side_effect=OSError("disk full")):
                with self.assertRaises(OSError):
                    save_records(path, [Record(1, 1, (1.0,))])
            self.assertEqual(path.read_text(encoding="utf-8"), "old\n")


if __name__ == "__main__":
    unittest.main()
