import pytest

from protoplay.engine.animation_system import AnimationSystem
from protoplay.models.config import EngineConfig
from protoplay.models.enums import LogLevel
from protoplay.services.event_bus import EventBus
from protoplay.utils.logger import get_logger


@pytest.fixture(autouse=True)
def quiet_logger():
    """Keep the shared logger quiet and restore it after each test."""
    logger = get_logger()
    saved = (logger.min_level, logger.use_colors)
    logger.min_level = LogLevel.ERROR
    logger.use_colors = False
    yield logger
    logger.min_level, logger.use_colors = saved
    logger.set_sink(None)


@pytest.fixture
def log_records(quiet_logger):
    """Capture every record at DEBUG level through the logger sink."""
    records = []
    quiet_logger.min_level = LogLevel.DEBUG
    quiet_logger.set_sink(lambda ts, level, category, message: records.append((level, category, message)))
    return records


@pytest.fixture
def config():
    return EngineConfig()


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def events(event_bus):
    """Every published event, in order"""
    received = []
    event_bus.add_middleware(lambda e: received.append(e) or e)
    return received


@pytest.fixture
def system(config, event_bus):
    engine = AnimationSystem(config, event_bus)
    yield engine
    engine.destroy()
