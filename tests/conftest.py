from __future__ import annotations

from pathlib import Path

import pytest

from shared.config import ClassicryptConfig, GlobalConfig, LabConfig

from classicrypt.core.engine import ClassicryptEngine


@pytest.fixture
def lab_config(tmp_path: Path) -> LabConfig:
    return LabConfig(
        global_settings=GlobalConfig(log_level="CRITICAL"),
        classicrypt=ClassicryptConfig(
            data_dir=str(tmp_path / "data"),
            pbkdf2_iterations=1_000,
        ),
    )


@pytest.fixture
def engine(lab_config: LabConfig) -> ClassicryptEngine:
    return ClassicryptEngine(lab_config)


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "config.toml"
    path.write_text(
        "[global]\n"
        'log_level = "CRITICAL"\n'
        "\n"
        "[classicrypt]\n"
        f'data_dir = "{(tmp_path / "data").as_posix()}"\n'
        "pbkdf2_iterations = 1000\n",
        encoding="utf-8",
    )
    return path
