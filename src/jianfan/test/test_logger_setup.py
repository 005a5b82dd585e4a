import sys
from pathlib import Path

import pytest
from loguru import logger

from jianfan.logger_setup import setup_logger


@pytest.fixture
def restore_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)


def test_setup_logger_returns_log_file(tmp_path, restore_logger):
    log_file = setup_logger(project_root=tmp_path, console_output=False)
    assert log_file is not None
    path = Path(log_file)
    # 压缩在 sink 关闭时发生，必须在移除前检查
    assert path.exists()
    assert path.suffix == ".log"
    assert path.is_relative_to(tmp_path / "logs" / "jianfan")


def test_setup_logger_without_file_output(tmp_path, restore_logger):
    assert setup_logger(project_root=tmp_path, console_output=False, file_output=False) is None
    assert not (tmp_path / "logs").exists()
