import logging

from mutlollipop.logging_utils import DebugLogger


def test_debug_logger_indents_sections(caplog):
    caplog.set_level(logging.DEBUG, logger="mutlollipop.test")
    debug_log = DebugLogger(logging.getLogger("mutlollipop.test"), debug=True)
    with debug_log.section("Parsing protein changes"):
        debug_log.field("Change column", "HGVSp_Short")
    assert caplog.messages == ["Parsing protein changes", "  Change column: HGVSp_Short"]


def test_debug_logger_silent_when_disabled(caplog):
    caplog.set_level(logging.DEBUG, logger="mutlollipop.test")
    debug_log = DebugLogger(logging.getLogger("mutlollipop.test"), debug=False)
    with debug_log.section("Parsing protein changes"):
        debug_log.field("Change column", "HGVSp_Short")
    assert caplog.messages == []
