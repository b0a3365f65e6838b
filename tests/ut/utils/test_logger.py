"""日志配置测试"""

from __future__ import annotations

import json
import logging

from extend.utils.logger import JSONFormatter, reset_logging, setup_logging


class TestSetupLogging:
    def teardown_method(self) -> None:
        reset_logging()

    def test_single_handler(self) -> None:
        setup_logging("DEBUG")
        setup_logging("DEBUG")
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.level == logging.DEBUG

    def test_json_formatter_selected(self) -> None:
        setup_logging(json_output=True)
        assert isinstance(logging.getLogger().handlers[0].formatter, JSONFormatter)


class TestJSONFormatter:
    def test_fields(self) -> None:
        record = logging.LogRecord(
            "extend.composer.manager", logging.WARNING, __file__, 10,
            "扩展服务器探测失败: %s", ("timeout",), None,
        )
        entry = json.loads(JSONFormatter().format(record))
        assert entry["level"] == "WARNING"
        assert entry["logger"] == "extend.composer.manager"
        assert entry["message"] == "扩展服务器探测失败: timeout"
        assert "exception" not in entry
