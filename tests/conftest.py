"""Pytest configuration for sqlsense tests."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

_TEST_CONFIG_DIR = Path(tempfile.mkdtemp(prefix="sqlsense-test-config-"))
os.environ.setdefault("SQLSENSE_CONFIG_DIR", str(_TEST_CONFIG_DIR))
os.environ.pop("SQLSENSE_SETTINGS_PATH", None)
