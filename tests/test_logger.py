import json
import logging

from kms_keyrings.logger import get_logger, set_level


def test_json_lines_to_file(tmp_path):
    path = tmp_path / "logs" / "kms.log"
    log = get_logger("KMS.Test.File", to_file=str(path))
    log.info("ring created")
    for h in log.handlers:
        h.flush()

    line = path.read_text().strip().splitlines()[-1]
    record = json.loads(line)
    assert record["level"] == "INFO"
    assert record["name"] == "KMS.Test.File"
    assert record["msg"] == "ring created"
    assert record["ts"].endswith("Z")


def test_level_from_env(monkeypatch):
    monkeypatch.setenv("KMS_KEYRINGS_LOG_LEVEL", "debug")
    assert get_logger("KMS.Test.Env").level == logging.DEBUG


def test_handlers_not_duplicated():
    a = get_logger("KMS.Test.Once")
    b = get_logger("KMS.Test.Once")
    assert a is b
    assert len(b.handlers) == 1


def test_set_level_applies_to_prefix():
    get_logger("KMS.Test.Level", level="INFO")
    set_level("WARNING")
    assert logging.getLogger("KMS.Test.Level").level == logging.WARNING
    set_level("INFO")


def test_unknown_env_level_falls_back_to_info(monkeypatch):
    monkeypatch.setenv("KMS_KEYRINGS_LOG_LEVEL", "verbose")
    assert get_logger("KMS.Test.Typo").level == logging.INFO


def test_set_level_ignores_unknown_name():
    get_logger("KMS.Test.SetTypo", level="DEBUG")
    set_level("chatty")
    assert logging.getLogger("KMS.Test.SetTypo").level == logging.INFO
