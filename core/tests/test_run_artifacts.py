"""Tests for run artifact helpers."""

import json
import os
import shutil
import tempfile
import unittest

from core.run_artifacts import write_harvest, write_run_report
from extraction.models import Field, Harvest, Operation, Struct


class TestRunArtifacts(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp_dir = tempfile.mkdtemp()

    def tearDown(self) -> None:
        shutil.rmtree(self.tmp_dir)

    def test_write_run_report(self) -> None:
        path = write_run_report({"stats": {"structs": 2}}, "abc123", self.tmp_dir)
        self.assertTrue(path.endswith("harvest-abc123.json"))
        with open(path, "r", encoding="utf-8") as f:
            payload = json.load(f)
        self.assertEqual(payload["scan_id"], "abc123")
        self.assertEqual(payload["stats"], {"structs": 2})
        self.assertIn("finished_utc", payload)

    def test_write_harvest_creates_parent_dirs(self) -> None:
        method = Operation(name="Get", package_name="p", related_struct=Field(name="s", type_name="S"))
        struct = Struct(name="S", package_name="p", operations=[method])
        output_file = os.path.join(self.tmp_dir, "nested", "harvest.json")

        write_harvest(Harvest(structs=[struct], operations=[method]), output_file)

        with open(output_file, "r", encoding="utf-8") as f:
            payload = json.load(f)
        self.assertEqual(payload["structs"][0]["operations"], ["Get"])
        self.assertEqual(payload["operations"][0]["related_struct"]["type_name"], "S")


if __name__ == "__main__":
    unittest.main()
