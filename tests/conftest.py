from __future__ import annotations

import logging
import os
from typing import Optional

import pytest

from lastseen.core.config.models import LastSeenConfig
from lastseen.core.config.paths import ConfigFsPaths
from lastseen.core.logger import LOGGER_NAME
from lastseen.core.storage.coordinator import SaveCoordinator

from .helpers.fakes import FakeClock, RecordingWriter


@pytest.fixture(autouse=True)
def _reset_lastseen_logger():
    """
    setup_logging() detaches the 'lastseen' logger from the root; put it back
    so caplog keeps working in later tests.
    """
    yield
    lg = logging.getLogger(LOGGER_NAME)
    for h in list(lg.handlers):
        lg.removeHandler(h)
        h.close()
    lg.propagate = True
    lg.setLevel(logging.NOTSET)


@pytest.fixture
def fs(tmp_path):
    paths = ConfigFsPaths(root=str(tmp_path))
    os.makedirs(paths.config_dir, exist_ok=True)
    os.makedirs(paths.data_dir, exist_ok=True)
    return paths


@pytest.fixture
def data_path(fs):
    return fs.data_path("last-seen.yml")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cfg():
    return LastSeenConfig()


@pytest.fixture
def writer(monkeypatch):
    w = RecordingWriter()
    monkeypatch.setattr("lastseen.core.storage.coordinator.atomic_write_text", w)
    return w


@pytest.fixture
def gated_writer(monkeypatch):
    w = RecordingWriter(gated=True)
    monkeypatch.setattr("lastseen.core.storage.coordinator.atomic_write_text", w)
    yield w
    w.release()


@pytest.fixture
def make_coordinator(data_path):
    made = []

    def _make(path: Optional[str] = None, **kw):  # noqa: ANN001
        c = SaveCoordinator(path or data_path, **kw)
        made.append(c)
        return c

    yield _make
    for c in made:
        try:
            c.close()
        except Exception:
            pass
