from __future__ import annotations

import unittest

from app.mappers import json_path


class TestParseToken(unittest.TestCase):
    def test_plain_key(self) -> None:
        self.assertEqual(json_path.parse_token("status"), ("status", None))

    def test_key_with_index(self) -> None:
        self.assertEqual(json_path.parse_token("coding[12]"), ("coding", 12))

    def test_index_only(self) -> None:
        self.assertEqual(json_path.parse_token("[0]"), ("", 0))


class TestGet(unittest.TestCase):
    def setUp(self) -> None:
        self.document = {
            "code": {"coding": [{"code": "8867-4", "display": "Heart rate"}], "text": "HR"},
            "component": [
                {"valueQuantity": {"value": 120, "unit": "mmHg"}},
                {"valueQuantity": {"value": 80, "unit": "mmHg"}},
            ],
            "active": False,
            "tags": ["a", "b"],
        }

    def test_nested_key_and_index(self) -> None:
        self.assertEqual(json_path.get(self.document, "code.coding[0].display"), "Heart rate")
        self.assertEqual(json_path.get(self.document, "component[1].valueQuantity.value"), 80)

    def test_index_only_token_on_list(self) -> None:
        self.assertEqual(json_path.get(self.document["tags"], "[1]"), "b")

    def test_falsy_values_are_returned(self) -> None:
        self.assertIs(json_path.get(self.document, "active"), False)

    def test_missing_key_is_none(self) -> None:
        self.assertIsNone(json_path.get(self.document, "code.missing.deeper"))

    def test_out_of_range_index_is_none(self) -> None:
        self.assertIsNone(json_path.get(self.document, "code.coding[5].display"))

    def test_index_on_mapping_is_none(self) -> None:
        self.assertIsNone(json_path.get(self.document, "code[0]"))

    def test_key_on_list_is_none(self) -> None:
        self.assertIsNone(json_path.get(self.document, "tags.first"))

    def test_index_on_string_is_none(self) -> None:
        self.assertIsNone(json_path.get({"name": "abc"}, "name[0]"))

    def test_empty_path_and_none_value(self) -> None:
        self.assertIsNone(json_path.get(self.document, ""))
        self.assertIsNone(json_path.get(self.document, "   "))
        self.assertIsNone(json_path.get(self.document, None))
        self.assertIsNone(json_path.get(None, "code"))

    def test_scalar_root(self) -> None:
        self.assertIsNone(json_path.get(42, "value"))


if __name__ == "__main__":
    unittest.main()
