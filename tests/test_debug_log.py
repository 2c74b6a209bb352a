"""
Tests for the optional debug log (utils.debug_log).
"""

import json
import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import numpy as np

from core.mpr_planes import Plane
from utils import debug_log as debug_log_module


class TestDebugLog(unittest.TestCase):
    """debug_log writes JSON lines only when enabled or given a path."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.log_path = Path(self._tmp.name) / "debug.log"

    def tearDown(self):
        self._tmp.cleanup()

    def test_writes_json_line_with_converted_values(self):
        debug_log_module.debug_log(
            "test.location",
            "event",
            {"plane": Plane.CORONAL, "cursor": np.array([1.0, 2.0, 3.0])},
            log_path=self.log_path,
        )
        lines = self.log_path.read_text(encoding="utf-8").splitlines()
        self.assertEqual(len(lines), 1)
        payload = json.loads(lines[0])
        self.assertEqual(payload["location"], "test.location")
        self.assertEqual(payload["data"], {"plane": "coronal", "cursor": [1.0, 2.0, 3.0]})

    def test_appends(self):
        for _ in range(2):
            debug_log_module.debug_log("a", "b", log_path=self.log_path)
        self.assertEqual(len(self.log_path.read_text(encoding="utf-8").splitlines()), 2)

    def test_disabled_without_path_is_no_op(self):
        with mock.patch.object(debug_log_module, "DEBUG_LOG_ENABLED", False), \
                mock.patch.object(debug_log_module, "_PROJECT_ROOT", Path(self._tmp.name)):
            debug_log_module.debug_log("a", "b")
        self.assertFalse((Path(self._tmp.name) / ".cursor").exists())


if __name__ == "__main__":
    unittest.main()
