import os
import tempfile
import unittest
from pathlib import Path

from letor.errors import ConfigurationError, EmptyInputError, FormatError
from letor.transform.csv_to_letor import default_output_paths, save_feature_map, transform_csv

TSV = (
    "QueryId\tDocId\tLabel\tbm25\ttitle_match\n"
    "1\td1\t3\t12.5\t1\n"
    "1\td2\t0\t3.25\t0\n"
    "2\td9\t1\t7.0\t0\n"
)


class TestTransformCsv(unittest.TestCase):
    def setUp(self):
        self._td = tempfile.TemporaryDirectory()
        self.dir = Path(self._td.name)

    def tearDown(self):
        self._td.cleanup()

    def _write(self, name: str, text: str) -> Path:
        p = self.dir / name
        p.write_text(text, encoding="utf-8")
        return p

    def test_all_other_columns_are_features(self):
        path = self._write("data.tsv", TSV)
        result = transform_csv(path, description_column="DocId")
        self.assertEqual(result.feature_names, ["bm25", "title_match"])
        self.assertEqual(len(result.records), 3)
        first = result.records[0]
        self.assertEqual((first.label, first.group_id), (3, 1))
        self.assertEqual(first.features, (12.5, 1.0))
        self.assertEqual(first.description, "d1")

    def test_explicit_feature_columns(self):
        path = self._write("data.tsv", TSV)
        result = transform_csv(path, feature_columns=["title_match"], description_column="DocId")
        self.assertEqual(result.feature_names, ["title_match"])
        self.assertEqual([r.features for r in result.records], [(1.0,), (0.0,), (0.0,)])

    def test_non_feature_text_column_without_description_fails(self):
        # DocId is not numeric and would be treated as a feature
        path = self._write("data.tsv", TSV)
        with self.assertRaises(FormatError) as ctx:
            transform_csv(path)
        self.assertEqual(ctx.exception.line_number, 2)

    def test_headers_file_and_custom_separator(self):
        headers = self._write("headers.csv", "qid,rel,f1,f2\n")
        data = self._write("data.csv", "7,2,0.5,1.5\n7,0,0.25,0.0\n")
        result = transform_csv(
            data, separator=",", headers=headers, label_column="rel", query_id_column="qid"
        )
        self.assertEqual([r.label for r in result.records], [2, 0])
        self.assertEqual(result.records[1].features, (0.25, 0.0))

    def test_bad_label(self):
        path = self._write("data.tsv", "QueryId\tLabel\tf\n1\t-2\t1.0\n")
        with self.assertRaises(FormatError) as ctx:
            transform_csv(path)
        self.assertIn("Label", str(ctx.exception))

    def test_missing_columns(self):
        path = self._write("data.tsv", TSV)
        with self.assertRaises(ConfigurationError):
            transform_csv(path, label_column="Relevance")
        with self.assertRaises(ConfigurationError):
            transform_csv(path, description_column="DocId", feature_columns=["nope"])

    def test_header_only_input(self):
        path = self._write("data.tsv", "QueryId\tLabel\tf\n")
        with self.assertRaises(EmptyInputError):
            transform_csv(path)

    def test_empty_file(self):
        path = self._write("empty.tsv", "")
        with self.assertRaises(EmptyInputError):
            transform_csv(path)

    def test_ragged_row(self):
        path = self._write("data.tsv", "QueryId\tLabel\tf\n1\t1\t0.5\n1\t0\t0.2\t9\n")
        with self.assertRaises(FormatError) as ctx:
            transform_csv(path)
        self.assertEqual(ctx.exception.source, str(path))


class TestTransformOutputs(unittest.TestCase):
    def test_default_output_paths(self):
        self.assertEqual(
            default_output_paths("/data/clicks.tsv"),
            (Path("clicks-letor.txt"), Path("clicks-features.txt")),
        )

    def test_feature_map(self):
        with tempfile.TemporaryDirectory() as td:
            path = save_feature_map(["bm25", "title_match"], "data.tsv", os.path.join(td, "features.txt"))
            text = path.read_text(encoding="utf-8")
        self.assertEqual(text, "#\tFeatures from data.tsv\n1\tbm25\n2\ttitle_match\n")


if __name__ == "__main__":
    unittest.main()
