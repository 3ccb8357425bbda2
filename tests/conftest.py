# tests/conftest.py
from __future__ import annotations

import os

import pytest

from widenum import runtime


@pytest.fixture(scope="session", autouse=True)
def _workspace_home(tmp_path_factory):
    """Keep profile seeding out of the real home directory."""
    old = os.environ.get("WIDENUM_HOME")
    os.environ["WIDENUM_HOME"] = str(tmp_path_factory.mktemp("widenum_home"))
    yield
    if old is None:
        os.environ.pop("WIDENUM_HOME", None)
    else:
        os.environ["WIDENUM_HOME"] = old


@pytest.fixture(autouse=True)
def fresh_runtime():
    """Every test starts from an empty Runtime (no profile applied)."""
    token = runtime._current_runtime.set(runtime.Runtime())
    yield runtime.current()
    runtime._current_runtime.reset(token)
