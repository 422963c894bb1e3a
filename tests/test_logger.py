"""
Tests for the package logger.
"""

import logging

from pymizer.logger import console_handler, get_logger, set_log_level


class TestGetLogger:
    """Tests for get_logger()."""

    def test_package_logger(self):
        assert get_logger().name == 'pymizer'

    def test_child_logger(self):
        assert get_logger('core.effort').name == 'pymizer.core.effort'

    def test_module_name(self):
        """Module __name__ values are not prefixed twice."""
        assert get_logger('pymizer.core.project').name == 'pymizer.core.project'

    def test_children_propagate_to_package_handler(self):
        child = get_logger('core.sim')
        assert child.propagate
        assert child.getEffectiveLevel() == logging.DEBUG


class TestSetLogLevel:
    """Tests for set_log_level()."""

    def test_changes_console_level(self):
        original = console_handler.level
        try:
            set_log_level(logging.DEBUG)
            assert console_handler.level == logging.DEBUG
            set_log_level('INFO')
            assert console_handler.level == logging.INFO
        finally:
            set_log_level(original)
