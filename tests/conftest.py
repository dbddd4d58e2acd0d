import os
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Keep the module-level app away from the working directory
os.environ.setdefault("QUOTEBOOK_QUOTES_FOLDER", "test_data/quotes")

TEST_PASSWORD = "password"


@pytest.fixture
def settings(tmp_path: Path):
    from quotebook.config import Settings

    return Settings(
        quotes_folder=tmp_path / "quotes",
        password=TEST_PASSWORD,
        secret_key="test-secret",
    )


@pytest.fixture
def registry():
    from quotebook.forms import build_registry

    return build_registry(password=TEST_PASSWORD)


@pytest.fixture
def client(settings):
    from quotebook.main import create_app

    with TestClient(create_app(settings)) as c:
        yield c
