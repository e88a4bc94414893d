"""
Pytest configuration and fixtures for datamgr tests.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add the repository root to path for imports
# This allows `from datamgr.pipeline import ...` to work
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from datamgr.app.dependencies import get_settings  # noqa: E402
from datamgr.config.schemas import AppSettings  # noqa: E402
from datamgr.pipeline import FileMaterializer, IngestPipeline  # noqa: E402
from datamgr.runtime import compile_schema  # noqa: E402

SIGNUP_YAML = """\
receive:
  /signup:
    fields:
      name:
        required: true
      newsletter:
        type: bool
      joined_at:
        generate: timestamp
      source:
        internal: true
        value: web
    create_file:
      name: 'out/{{ field("name") }}.yaml'
  /ping:
    fields:
      note: {}
"""


@pytest.fixture
def signup_yaml() -> str:
    """Schema with a file-writing /signup route and a file-less /ping route."""
    return SIGNUP_YAML


@pytest.fixture
def signup_schema(signup_yaml):
    return compile_schema(signup_yaml)


@pytest.fixture
def signup_route(signup_schema):
    return signup_schema.get("/signup")


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 3, 5, 14, 7, 9, 123456, tzinfo=timezone.utc)


@pytest.fixture
def data_dir(tmp_path) -> Path:
    """Empty directory output files are written under."""
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture
def pipeline(data_dir) -> IngestPipeline:
    return IngestPipeline(FileMaterializer(base_dir=data_dir))


@pytest.fixture
def settings(data_dir) -> AppSettings:
    return AppSettings(data_dir=str(data_dir))


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """get_settings is cached per process; isolate tests from each other."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
