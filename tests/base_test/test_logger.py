#!filepath: tests/base_test/test_logger.py
import pytest
from loguru import logger

from heaptrim.utils.errors import ConfigError, FormatError, InputError, OutputError, TrimError
from heaptrim.utils.logger import Logging


def test_catch_returns_result_and_logs_time():
    logs = Logging()
    captured = []
    logger.add(lambda msg: captured.append(str(msg)))

    @logs.catch("boom")
    def ok():
        return 42

    assert ok() == 42
    assert any("[TIME] ok took" in line for line in captured)


def test_catch_reraises_expected_without_traceback():
    logs = Logging()
    lines = []
    logger.add(lambda msg: lines.append(str(msg)))

    @logs.catch("trim failed", expected=(TrimError,))
    def bad():
        raise FormatError("clock went backwards")

    with pytest.raises(FormatError):
        bad()

    output = "\n".join(lines)
    assert "trim failed: clock went backwards" in output
    assert "Traceback" not in output


def test_catch_reraises_unexpected_with_traceback():
    logs = Logging()
    lines = []
    logger.add(lambda msg: lines.append(str(msg)), backtrace=False)

    @logs.catch("trim failed", expected=(TrimError,))
    def bad():
        raise KeyError("x")

    with pytest.raises(KeyError):
        bad()

    assert "Traceback" in "\n".join(lines)


def test_configure_adds_file_sink(tmp_path):
    logs = Logging()
    logs.configure(log_dir=str(tmp_path / "logs"), log_level="debug")

    logs.info("[Test] hello")
    logger.remove()

    assert logs.level == "DEBUG"
    files = list((tmp_path / "logs").glob("*.log"))
    assert files
    assert "[Test] hello" in files[0].read_text()


@pytest.mark.parametrize(
    "err, code, kind",
    [
        (ConfigError("x"), 2, "ConfigError"),
        (InputError("x"), 3, "InputError"),
        (OutputError("x"), 4, "OutputError"),
        (FormatError("x"), 5, "FormatError"),
    ],
)
def test_error_exit_codes(err, code, kind):
    assert isinstance(err, TrimError)
    assert err.exit_code == code
    assert err.kind == kind
