"""to_message 单元测试

验证规范文本逐字节稳定、可选行布局、默认值补全与幂等、入参不被修改。
"""

import re

import pytest
from conftest import BITSONG_ADDRESS, CANONICAL_TEXT
from siwco import FormattedMessage, SiwcoError, SiwcoErrorType, is_valid_iso8601_date, to_message
from siwco.formatter import current_timestamp, render
from structlog.testing import capture_logs


class TestCanonicalText:
    """规范文本布局"""

    def test_canonical_example(self, full_message, config):
        """全字段示例逐字节一致"""
        result = to_message(full_message, config)
        assert isinstance(result, FormattedMessage)
        assert result.text == CANONICAL_TEXT

    def test_no_trailing_newline(self, full_message, config):
        assert not to_message(full_message, config).text.endswith("\n")

    def test_without_scheme(self, full_message, config):
        text = to_message(full_message.model_copy(update={"scheme": None}), config).text
        assert text.startswith("bitsong.io wants you to sign in with your bitsong account:\n")

    def test_without_chain_name(self, full_message, config):
        """链名称缺失时保留空位"""
        text = to_message(full_message.model_copy(update={"chain_name": None}), config).text
        assert text.splitlines()[0] == "https://bitsong.io wants you to sign in with your  account:"

    def test_without_statement(self, minimal_message, config):
        """无 statement 时地址与后缀之间有两个空行"""
        message = minimal_message.model_copy(
            update={"nonce": "32891757", "issued_at": "2021-09-30T16:25:24.000Z"}
        )
        assert to_message(message, config).text == (
            "service.org wants you to sign in with your  account:\n"
            f"{BITSONG_ADDRESS}\n"
            "\n"
            "\n"
            "URI: https://service.org/login\n"
            "Version: 1\n"
            "Chain ID: bitsong-2b\n"
            "Nonce: 32891757\n"
            "Issued At: 2021-09-30T16:25:24.000Z"
        )

    def test_empty_statement_is_omitted(self, full_message, config):
        with_empty = to_message(full_message.model_copy(update={"statement": ""}), config).text
        without = to_message(full_message.model_copy(update={"statement": None}), config).text
        assert with_empty == without
        assert "this is a statement" not in with_empty

    def test_multiline_statement(self, full_message, config):
        statement = "first line\nsecond line"
        text = to_message(full_message.model_copy(update={"statement": statement}), config).text
        assert f"\n\n{statement}\n\nURI: " in text

    def test_optional_lines_only_when_set(self, full_message, config):
        message = full_message.model_copy(
            update={
                "expiration_time": None,
                "not_before": None,
                "request_id": None,
                "resources": None,
            }
        )
        text = to_message(message, config).text
        assert text.splitlines()[-1].startswith("Issued At: ")
        for label in ("Expiration Time:", "Not Before:", "Request ID:", "Resources:"):
            assert label not in text

    def test_fixed_suffix_order(self, full_message, config):
        lines = to_message(full_message, config).text.splitlines()
        labels = [line.split(":")[0] for line in lines[5:13]]
        assert labels == [
            "URI",
            "Version",
            "Chain ID",
            "Nonce",
            "Issued At",
            "Expiration Time",
            "Not Before",
            "Request ID",
        ]

    def test_resources_preserve_order(self, full_message, config):
        resources = ["c:3", "a:1", "b:2"]
        text = to_message(full_message.model_copy(update={"resources": resources}), config).text
        assert text.endswith("Resources:\n- c:3\n- a:1\n- b:2")

    def test_empty_resources_render_header(self, full_message, config):
        text = to_message(full_message.model_copy(update={"resources": []}), config).text
        assert text.endswith("Request ID: 123\nResources:")


class TestDefaults:
    """nonce / issued_at 补全"""

    def test_generates_nonce_and_issued_at(self, minimal_message, config):
        result = to_message(minimal_message, config)
        assert re.fullmatch(r"[A-Za-z0-9]{8,}", result.message.nonce)
        assert is_valid_iso8601_date(result.message.issued_at)
        assert f"Nonce: {result.message.nonce}" in result.text
        assert f"Issued At: {result.message.issued_at}" in result.text

    def test_input_not_mutated(self, minimal_message, config):
        """生成值通过返回值传出，入参保持不变"""
        to_message(minimal_message, config)
        assert minimal_message.nonce is None
        assert minimal_message.issued_at is None

    def test_idempotent_after_defaulting(self, minimal_message, config):
        """再次格式化返回的记录得到相同文本"""
        first = to_message(minimal_message, config)
        second = to_message(first.message, config)
        assert second.text == first.text
        assert second.message == first.message

    def test_each_call_generates_fresh_nonce(self, minimal_message, config):
        assert (
            to_message(minimal_message, config).message.nonce
            != to_message(minimal_message, config).message.nonce
        )

    def test_explicit_values_kept(self, full_message, config):
        result = to_message(full_message, config)
        assert result.message == full_message
        assert result.message is not full_message

    def test_current_timestamp_format(self):
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", current_timestamp())


class TestFormatterValidation:
    """格式化前先校验"""

    def test_invalid_record_rejected(self, full_message, config):
        with pytest.raises(SiwcoError) as exc_info:
            to_message(full_message.model_copy(update={"domain": "bad?domain"}), config)
        assert exc_info.value.type is SiwcoErrorType.INVALID_DOMAIN

    def test_invalid_explicit_nonce_rejected(self, full_message, config):
        with pytest.raises(SiwcoError) as exc_info:
            to_message(full_message.model_copy(update={"nonce": "short"}), config)
        assert exc_info.value.type is SiwcoErrorType.INVALID_NONCE

    def test_render_skips_validation(self, full_message):
        """render() 只负责排版"""
        text = render(full_message.model_copy(update={"version": "9"}))
        assert "Version: 9" in text

    def test_logs_formatting(self, minimal_message, config):
        with capture_logs() as logs:
            to_message(minimal_message, config)
        events = {entry["event"]: entry for entry in logs}
        assert events["message_formatted"]["generated_nonce"] is True
        assert "nonce_generated" in events
