import os
from pathlib import Path

import pytest

FIXTURE_DATA_DIR = Path(__file__).parent / "fixtures" / "datasets"

_TXENGINE_ENV_PREFIX = "TXENGINE_"


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers",
        "live_dataset: fetches the real dataset files over the network; skipped unless --run-live is provided",
    )


def pytest_addoption(parser) -> None:
    parser.addoption(
        "--run-live",
        action="store_true",
        default=False,
        help="run tests marked live_dataset (network required)",
    )


def pytest_collection_modifyitems(config, items) -> None:
    if config.getoption("--run-live"):
        return

    skip_live = pytest.mark.skip(reason="requires --run-live (network opt-in)")
    for item in items:
        if "live_dataset" in item.keywords:
            item.add_marker(skip_live)


@pytest.fixture(autouse=True)
def _clear_txengine_env(monkeypatch) -> None:
    for key in list(os.environ):
        if key.startswith(_TXENGINE_ENV_PREFIX):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def fixture_data_dir() -> Path:
    return FIXTURE_DATA_DIR
