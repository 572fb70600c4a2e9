import os
from pathlib import Path


# Repository root (src/platform/constant/path.py -> four levels up)
BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent

# Test runs write their logs next to the test suite
IS_TEST_RUN = 'TEST_LOG_DIR' in os.environ
LOG_DIR = Path(os.environ['TEST_LOG_DIR']) if IS_TEST_RUN else BASE_DIR / 'logs'
