"""
Shared fixtures: a hand-cranked clock and a controller wired to it.
"""

import pytest
from unittest.mock import Mock

from config.app_config import AppConfig
from services.chat_service.models import ImageUpload
from services.chat_service.scheduler import TaskScheduler
from services.chat_service.session_controller import SessionController


class ManualClock:
    """Clock that only moves when a test advances it"""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, milliseconds: float):
        self.now += milliseconds / 1000.0


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def scheduler(clock):
    return TaskScheduler(clock=clock)


@pytest.fixture
def app_config():
    config = AppConfig()
    config.chat.reply_delay_ms = 600
    config.chat.copy_feedback_ms = 2000
    return config


@pytest.fixture
def clipboard():
    return Mock()


@pytest.fixture
def controller(app_config, scheduler, clipboard):
    return SessionController(config=app_config, scheduler=scheduler, clipboard=clipboard)


@pytest.fixture
def png_upload():
    return ImageUpload(name="diagram.png", mime_type="image/png", data=b"\x89PNG\r\n\x1a\nfake")


@pytest.fixture
def advance(clock, controller):
    """Move time forward and run whatever became due"""
    def _advance(milliseconds: float = 0) -> int:
        clock.advance(milliseconds)
        return controller.pump()
    return _advance
