"""Test configuration.

The environment is forced to ``test`` before the application modules are
imported so the file log sink stays off.
"""

import os

os.environ.setdefault("APP_ENVIRONMENT", "test")

from tests.fixtures import *  # noqa: E402,F401,F403
