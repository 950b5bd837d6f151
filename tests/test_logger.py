import json
import logging

from shared.config import GlobalConfig, LabConfig
from shared.logger import LabLogger


def test_logger_namespace():
    log = LabLogger("unit", console_output=False)
    assert log.underlying.name == "classicrypt.unit"
    assert log.component == "unit"


def test_from_config_uses_debug_flag():
    config = LabConfig(global_settings=GlobalConfig(debug=True))
    log = LabLogger.from_config("dbg", config)
    assert log.underlying.level == logging.DEBUG


def test_json_file_records_operation(tmp_path):
    path = tmp_path / "lab.log"
    log = LabLogger("json", log_level="INFO", log_file=path, json_logs=True, console_output=False)
    with log.operation("brute_force"):
        log.info("tried %d keys", 26, cipher="shift")
    for handler in log.underlying.handlers:
        handler.flush()

    entry = json.loads(path.read_text().splitlines()[-1])
    assert entry["message"] == "tried 26 keys"
    assert entry["component"] == "json"
    assert entry["operation"] == "brute_force"


def test_timed_freezes_elapsed():
    log = LabLogger("timer", console_output=False)
    with log.timed("noop") as timer:
        pass
    first = timer.elapsed
    assert first >= 0.0
    assert timer.elapsed == first


def test_operations_nest(tmp_path):
    path = tmp_path / "nest.log"
    log = LabLogger("nest", log_level="INFO", log_file=path, json_logs=True, console_output=False)
    with log.operation("outer"):
        with log.operation("inner"):
            log.info("deep")
        log.info("shallow")
    log.info("none")
    for handler in log.underlying.handlers:
        handler.flush()

    entries = [json.loads(line) for line in path.read_text().splitlines()]
    assert [e["operation"] for e in entries] == ["inner", "outer", None]
