# run_tests.py
import os
import sys
import unittest


def main():
    here = os.path.dirname(os.path.abspath(__file__))
    sys.path.insert(0, here)

    print(f"\n{'='*20}\nRUNNING GLOBAL BRIDGE TESTS\n{'='*20}")
    suite = unittest.defaultTestLoader.discover(os.path.join(here, "tests"), pattern="test_*.py")
    result = unittest.TextTestRunner(verbosity=2).run(suite)

    print(f"\n[RESULT] ran={result.testsRun}, failures={len(result.failures)}, errors={len(result.errors)}")
    sys.exit(0 if result.wasSuccessful() else 1)


if __name__ == "__main__":
    main()
