"""URL scheme 校验测试"""

import pytest

from extend.core.exceptions import ValidationError
from extend.utils.net import validate_url_scheme


class TestValidateUrlScheme:
    def test_http_ok(self) -> None:
        validate_url_scheme("http://extensions.bolt.cm/ping")

    def test_https_ok(self) -> None:
        validate_url_scheme("https://extensions.bolt.cm/ping")

    def test_file_rejected(self) -> None:
        with pytest.raises(ValidationError, match="不允许的 URL 协议"):
            validate_url_scheme("file:///etc/passwd")

    def test_empty_scheme_rejected(self) -> None:
        with pytest.raises(ValidationError, match="不允许的 URL 协议"):
            validate_url_scheme("extensions.bolt.cm/ping")

    def test_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            validate_url_scheme("ftp://evil.com/payload")

    def test_context_in_error(self) -> None:
        with pytest.raises(ValidationError, match="extension site ping"):
            validate_url_scheme("file:///x", context="extension site ping")

    def test_details_name_scheme(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_url_scheme("ftp://ext.example.com/ping")
        assert exc_info.value.details == ["scheme=ftp"]
        assert "扩展服务器地址仅支持 http/https" in str(exc_info.value)
