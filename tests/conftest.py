import logging

import pytest


@pytest.fixture(autouse=True)
def restore_root_logger():
    """main() installs a handler on the root logger; undo it after each test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
