"""Run the RPEE unit tests.

Usage:
    python tests/run_tests.py [module-substring]
"""
import os
import sys
import tempfile
import unittest
from pathlib import Path

TESTS_DIR = Path(__file__).parent

# Logs go to a throwaway directory; must be set before rpee is imported
os.environ.setdefault("RPEE_LOG_DIR", tempfile.mkdtemp(prefix="rpee-test-logs-"))
sys.path.insert(0, str(TESTS_DIR.parent / "src"))


def build_suite(name_filter: str = "") -> unittest.TestSuite:
    """Discover test modules, optionally keeping only those whose name contains ``name_filter``."""
    pattern = f"test_*{name_filter}*.py" if name_filter else "test_*.py"
    return unittest.TestLoader().discover(str(TESTS_DIR), pattern=pattern)


if __name__ == "__main__":
    suite = build_suite(sys.argv[1] if len(sys.argv) > 1 else "")
    result = unittest.TextTestRunner(verbosity=2).run(suite)
    sys.exit(0 if result.wasSuccessful() else 1)
