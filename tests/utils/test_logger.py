"""
Tests for the logger singleton and its record sink.
"""

from protoplay.models.enums import LogCategory, LogLevel
from protoplay.utils.logger import configure_logger, get_category_logger, get_logger


def test_logger_is_a_singleton(quiet_logger):
    assert get_logger() is quiet_logger

    configure_logger(LogLevel.WARN, use_colors=False)

    assert get_logger() is quiet_logger
    assert quiet_logger.min_level == LogLevel.WARN
    print("✓ configure_logger() preserves singleton")


def test_sink_receives_details(log_records):
    log = get_category_logger(LogCategory.VARIANT)
    log.info("Variant switch", source="1:1", target="1:3")

    assert log_records == [("INFO", "VARIANT", "Variant switch (source: 1:1, target: 1:3)")]


def test_level_filter(quiet_logger, log_records):
    quiet_logger.min_level = LogLevel.WARN
    log = quiet_logger.for_category(LogCategory.ANIMATION)

    log.debug("hidden")
    log.info("hidden")
    log.warn("shown")

    assert [r[2] for r in log_records] == ["shown"]


def test_category_override(log_records, capsys):
    log = get_category_logger(LogCategory.ANIMATION).with_category(LogCategory.REACTION)
    log.error("Timeout fired", node="1:1")

    assert log_records[0][:2] == ("ERROR", "REACTION")
    out = capsys.readouterr().out
    assert "REACTION" in out
    assert "└─ node: 1:1" in out
