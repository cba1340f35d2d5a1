"""
Dyno Tests Module - Initialization
==================================

Unit and integration tests for the dyno telemetry core.

Test Organization:
------------------
1. test_units.py      - Typed unit values, conversions, guards, rounding
2. test_filters.py    - ExponentialFilter and FilterBank
3. test_derivation.py - Calibration and the telemetry derivation chain
4. test_buffer.py     - TelemetryBuffer storage and statistics
5. test_frame.py      - RawFrame codec and stream decoder
6. test_session.py    - DynoSession end-to-end runs
7. test_config.py     - Configuration loading/validation, logging setup
8. test_storage.py    - CSV and compressed persistence
9. test_optimized.py  - Clamping under python -O

Example Test Run:
-----------------
>>> from tests import run_tests
>>> result = run_tests(verbosity=2)

or simply ``pytest tests/``.
"""

import unittest
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Import test modules
from . import test_units
from . import test_filters
from . import test_derivation
from . import test_buffer
from . import test_frame
from . import test_session
from . import test_config
from . import test_storage
from . import test_optimized

__all__ = [
    "test_units",
    "test_filters",
    "test_derivation",
    "test_buffer",
    "test_frame",
    "test_session",
    "test_config",
    "test_storage",
    "test_optimized",
]

__version__ = "1.0.0"


def create_test_suite():
    """
    Create the full test suite.

    Returns:
        unittest.TestSuite with all tests
    """
    loader = unittest.TestLoader()
    suite = unittest.TestSuite()

    for module in (test_units, test_filters, test_derivation, test_buffer,
                   test_frame, test_session, test_config, test_storage,
                   test_optimized):
        suite.addTests(loader.loadTestsFromModule(module))

    return suite


def run_tests(verbosity: int = 2):
    """
    Run all tests.

    Args:
        verbosity: Output verbosity level

    Returns:
        unittest.TestResult
    """
    suite = create_test_suite()
    runner = unittest.TextTestRunner(verbosity=verbosity)
    return runner.run(suite)


if __name__ == "__main__":
    result = run_tests()
    sys.exit(0 if result.wasSuccessful() else 1)
