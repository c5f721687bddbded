import pytest

from landkit.storage import (
    FsSettings,
    S3Settings,
    StorageConfig,
    StorageError,
    StorageForm,
)


@pytest.fixture
def config():
    cfg = StorageConfig()
    cfg.init_defaults()
    return cfg


def test_fs_defaults_and_url():
    s = FsSettings()
    assert s.local_path == "./data"
    assert s.build_url("a/b.wasm") == "/download/a/b.wasm"


def test_s3_url_from_endpoint_and_bucket():
    s = S3Settings(bucket="bkt", endpoint="https://s3.example.com/")
    assert s.build_url("x.wasm") == "https://s3.example.com/bkt/x.wasm"


def test_s3_url_with_custom_url_and_directory():
    s = S3Settings(url="https://cdn.example.com/", directory="wasm/")
    assert s.build_url("x.wasm") == "https://cdn.example.com/wasm/x.wasm"


def test_missing_settings_raise():
    cfg = StorageConfig()
    with pytest.raises(StorageError, match="storage current not found"):
        cfg.current()
    with pytest.raises(StorageError, match="fs storage settings not found"):
        cfg.fs_settings()
    with pytest.raises(StorageError, match="s3 storage settings not found"):
        cfg.s3_settings()


def test_init_defaults(config):
    assert config.current() == "fs"
    assert config.fs_settings() == FsSettings()
    assert config.s3_settings() == S3Settings()


def test_init_defaults_keeps_existing():
    store = {"storage-current": {"current": "s3"}}
    cfg = StorageConfig(store)
    cfg.init_defaults()
    assert cfg.current() == "s3"
    assert store["storage-fs"] == {"local_path": "./data", "local_url": "/download/{name}"}


def test_build_url_follows_current(config):
    assert config.build_url("f.wasm") == FsSettings().build_url("f.wasm")
    config.set_current("nope")
    with pytest.raises(StorageError, match="storage nope not supported"):
        config.build_url("f.wasm")


def test_update_by_form_s3(config):
    form = StorageForm(
        checked="s3",
        endpoint="https://s3.example.com",
        bucket="b",
        access_key="placeholder",
        secret_key="secret",
        access_url="https://cdn.example.com",
    )
    key = config.update_by_form(form)
    assert config.current() == "s3"
    s3 = config.s3_settings()
    assert s3.bucket == "b"
    assert s3.region == ""
    assert s3.directory is None
    assert key.startswith("s3-")
    assert key == config.key()
    assert config.build_url("m.wasm") == "https://cdn.example.com/m.wasm"


def test_update_by_form_fs(config):
    config.update_by_form(
        StorageForm(checked="fs", directory="/srv/data", access_url="/dl/{name}")
    )
    assert config.current() == "fs"
    assert config.fs_settings() == FsSettings(local_path="/srv/data", local_url="/dl/{name}")


def test_update_by_form_unknown_changes_nothing(config):
    before = config.key()
    assert config.update_by_form(StorageForm(checked="other", bucket="b")) == before
    assert config.current() == "fs"


def test_key_changes_with_settings(config):
    before = config.key()
    assert before.startswith("fs-")
    assert len(before) == len("fs-") + 32
    config.update_by_form(StorageForm(checked="fs", directory="/other"))
    assert config.key() != before


def test_key_unsupported(config):
    config.set_current("ftp")
    with pytest.raises(StorageError, match="ftp not supported"):
        config.key()


def test_vars(config):
    out = config.vars()
    assert out["current"] == "fs"
    assert out["fs"] == {"local_path": "./data", "local_url": "/download/{name}"}
    assert out["s3"]["directory"] is None