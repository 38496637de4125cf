"""Tests for StructlogAdapter."""

import logging

import pytest
import structlog

from sessionless.core.config import Config
from sessionless.kernel.exceptions import ConfigurationException
from sessionless.logging.structlog_adapter import StructlogAdapter, build_processors


class TestStructlogAdapterConfigure:
    def test_configure_with_defaults(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        assert adapter._root_level == "INFO"
        assert adapter._format == "console"

    def test_configure_from_packaged_defaults(self):
        adapter = StructlogAdapter()
        adapter.configure(Config.defaults())
        assert adapter._root_level == "INFO"

    def test_configure_reads_root_level(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({"sessionless": {"logging": {"level": {"root": "debug"}}}}))
        assert adapter._root_level == "DEBUG"

    def test_configure_reads_format(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({"sessionless": {"logging": {"format": "JSON"}}}))
        assert adapter._format == "json"

    def test_configure_reads_per_module_levels(self):
        adapter = StructlogAdapter()
        config = Config({"sessionless": {"logging": {"level": {"root": "INFO", "myapp.views": "warning"}}}})
        adapter.configure(config)
        assert adapter.module_levels == {"myapp.views": "WARNING"}
        assert logging.getLogger("myapp.views").level == logging.WARNING

    def test_nested_module_levels_are_flattened(self):
        adapter = StructlogAdapter()
        config = Config({"sessionless": {"logging": {"level": {"sessionless": {"i18n": "DEBUG"}}}}})
        adapter.configure(config)
        assert adapter.module_levels == {"sessionless.i18n": "DEBUG"}
        assert logging.getLogger("sessionless.i18n").level == logging.DEBUG


class TestStructlogAdapterGetLogger:
    def test_get_logger_returns_bound_logger(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        logger = adapter.get_logger("sessionless.web")
        assert callable(getattr(logger, "info", None))
        assert callable(getattr(logger, "debug", None))


class TestStructlogAdapterSetLevel:
    def test_set_level_updates_module_level(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        adapter.set_level("myapp.services", "DEBUG")
        assert logging.getLogger("myapp.services").level == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self):
        adapter = StructlogAdapter()
        adapter.set_level("myapp.other", "chatty")
        assert logging.getLogger("myapp.other").level == logging.INFO


class TestStructlogAdapterFormats:
    def test_unknown_format_rejected(self):
        adapter = StructlogAdapter()
        with pytest.raises(ConfigurationException) as exc_info:
            adapter.configure(Config({"sessionless": {"logging": {"format": "xml"}}}))
        assert exc_info.value.code == "LOGGING_FORMAT"

    def test_json_renderer_last(self):
        assert isinstance(build_processors("json")[-1], structlog.processors.JSONRenderer)
        assert isinstance(build_processors("console")[-1], structlog.dev.ConsoleRenderer)
