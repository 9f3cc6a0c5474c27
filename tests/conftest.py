import pytest

from deployconf.utils.logger import logger


@pytest.fixture(autouse=True)
def log_to_tmp(tmp_path, monkeypatch):
    monkeypatch.setattr(logger, "log_file", str(tmp_path / "logs" / "logs.txt"))
