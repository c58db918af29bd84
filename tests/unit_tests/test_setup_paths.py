import os
from types import SimpleNamespace

from coordinator import cli_parser
from coordinator._coordinator.setup_paths import SetupPaths


def test_default_layout(tmp_path):
    paths = SetupPaths(working_dir=str(tmp_path))

    assert paths.output_dir == os.path.join(str(tmp_path), ".phase2cli")
    assert paths.metadata_dir == os.path.join(paths.output_dir, "setup", "metadata")
    assert paths.zkeys_dir == os.path.join(paths.output_dir, "setup", "zkeys")
    assert paths.pot_cache_dir == os.path.join(paths.output_dir, "setup", "pot")
    assert paths.r1cs_path("a.r1cs") == os.path.join(str(tmp_path), "a.r1cs")


def test_prepare_creates_directories(tmp_path):
    paths = SetupPaths(working_dir=str(tmp_path), pot_cache_dir=str(tmp_path / "cache"))
    paths.prepare()

    for directory in (paths.metadata_dir, paths.zkeys_dir, paths.pot_cache_dir):
        assert os.path.isdir(directory)


def test_storage_config_reads_credentials_from_env(monkeypatch):
    monkeypatch.setenv("PHASE2_STORAGE_ACCESS_KEY", "access")
    monkeypatch.setenv("PHASE2_STORAGE_SECRET_KEY", "secret")
    cfg = SimpleNamespace(
        storage=SimpleNamespace(
            provider="r2", bucket="ceremonies", region="auto", account_id="acc"
        )
    )

    assert cli_parser.storage_config(cfg) == {
        "provider": "r2",
        "bucket": "ceremonies",
        "region": "auto",
        "account_id": "acc",
        "access_key": "access",
        "secret_key": "secret",
    }
