from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import pytest
from loguru import logger

repo_root = Path(__file__).resolve().parents[1]
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from serenity.config.app_config import AppConfig


@pytest.fixture
def log_records():
    records: list[dict[str, Any]] = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
    return AppConfig(app_env="test", data_dir=str(tmp_path), pipeline_max_attempts=3)
