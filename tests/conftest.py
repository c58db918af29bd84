from datetime import datetime, timezone

import pytest

from coordinator._coordinator.setup_paths import SetupPaths
from coordinator.models import CeremonyInputData


@pytest.fixture
def ceremony():
    return CeremonyInputData(
        title="Test Ceremony",
        description="A ceremony for tests",
        start_date=datetime(2026, 11, 1, tzinfo=timezone.utc),
        end_date=datetime(2026, 11, 15, tzinfo=timezone.utc),
    )


@pytest.fixture
def working_dir(tmp_path):
    path = tmp_path / "circuits"
    path.mkdir()
    return path


@pytest.fixture
def setup_paths(working_dir, tmp_path):
    paths = SetupPaths(
        working_dir=str(working_dir),
        output_dir=str(tmp_path / "output"),
        pot_cache_dir=str(tmp_path / "pot-cache"),
    )
    paths.prepare()
    return paths
