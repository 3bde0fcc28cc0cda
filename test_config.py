"""Tests for configuration loading, errors and logging context."""

import logging

import pytest

from carverity.utils.config import Config, default_config
from carverity.utils.errors import ConfigError, ErrorType, PayloadError
from carverity.utils.logging import (
    clear_context,
    get_context,
    set_context,
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("LOG_LEVEL", "CARVERITY_REPORT_TITLE", "MAX_PAYLOAD_KB"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def _write(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(text)
    return str(path)


def test_load_reads_all_sections(tmp_path, clean_env):
    path = _write(tmp_path, """
app:
  name: CarVerity Test
logging:
  level: DEBUG
  file: ""
server:
  max_payload_kb: 64
report:
  title: Test report
  page_size: letter
""")
    config = Config.load(path)
    
    assert config.app_name == "CarVerity Test"
    assert config.logging.level == "DEBUG"
    assert config.logging.file == ""
    assert config.server.max_payload_kb == 64
    assert config.report.title == "Test report"
    assert config.report.page_size == "letter"


def test_environment_overrides_file(tmp_path, clean_env):
    path = _write(tmp_path, "logging:\n  level: INFO\nserver:\n  max_payload_kb: 64\n")
    clean_env.setenv("LOG_LEVEL", "WARNING")
    clean_env.setenv("MAX_PAYLOAD_KB", "8")
    clean_env.setenv("CARVERITY_REPORT_TITLE", "Custom title")
    
    config = Config.load(path)
    
    assert config.logging.level == "WARNING"
    assert config.server.max_payload_kb == 8
    assert config.report.title == "Custom title"


def test_empty_file_uses_defaults(tmp_path, clean_env):
    config = Config.load(_write(tmp_path, ""))
    
    assert config.app_name == "CarVerity"
    assert config.server.max_payload_kb == 512
    assert config.report.page_size == "A4"


def test_missing_file_raises_config_missing(tmp_path):
    with pytest.raises(ConfigError) as exc_info:
        Config.load(str(tmp_path / "absent.yaml"))
    
    assert exc_info.value.context.error_type == ErrorType.CONFIG_MISSING
    assert exc_info.value.context.details == {"config_path": str(tmp_path / "absent.yaml")}


@pytest.mark.parametrize("text", [
    "report:\n  page_size: A3\n",
    "server:\n  max_payload_kb: lots\n",
    "logging: [1, 2]\n",
    "- just\n- a list\n",
    "app: {name: [unclosed\n",
])
def test_malformed_file_raises_config_invalid(tmp_path, clean_env, text):
    with pytest.raises(ConfigError) as exc_info:
        Config.load(_write(tmp_path, text))
    
    assert exc_info.value.context.error_type == ErrorType.CONFIG_INVALID


def test_default_config_honours_environment(clean_env):
    clean_env.setenv("MAX_PAYLOAD_KB", "32")
    config = default_config()
    
    assert config.server.max_payload_kb == 32
    assert config.logging.file == ""


def test_error_string_and_dict():
    error = PayloadError.too_large(2048, 1)
    
    assert str(error).startswith("PAYLOAD_TOO_LARGE: ")
    assert error.to_dict()["error_type"] == "PAYLOAD_TOO_LARGE"
    assert error.context.details == {"size_bytes": 2048, "limit_kb": 1}


def test_set_and_clear_context():
    clear_context()
    set_context(scan_id="scan-7")
    
    assert get_context() == {"scan_id": "scan-7"}
    clear_context()
    assert get_context() == {}


def test_default_config_rejects_bad_payload_limit(clean_env):
    clean_env.setenv("MAX_PAYLOAD_KB", "lots")
    
    with pytest.raises(ConfigError) as exc_info:
        default_config()
    
    assert exc_info.value.context.error_type == ErrorType.CONFIG_INVALID
    assert isinstance(exc_info.value.__cause__, ValueError)


def test_context_filter_fills_defaults():
    from carverity.utils.logging import ContextFilter
    
    record = logging.LogRecord("test", logging.INFO, __file__, 1, "msg", None, None)
    ContextFilter().filter(record)
    
    assert record.scan_id == "-"
