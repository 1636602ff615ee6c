import pytest
from pydantic import ValidationError

from lob_impact.config.app_config import DATA_ROOT_ENV, AppConfig


def test_load_default_config(monkeypatch):
    monkeypatch.delenv(DATA_ROOT_ENV, raising=False)

    cfg = AppConfig.load()

    assert cfg.trade.jump_threshold == 10.0
    assert cfg.trade.correct_jumps is True
    assert cfg.trade.vwap_decimals == 2
    assert cfg.data.events_format == "parquet"
    assert cfg.log.level == "INFO"


def test_load_custom_yaml(tmp_path, monkeypatch):
    monkeypatch.delenv(DATA_ROOT_ENV, raising=False)
    path = tmp_path / "cfg.yml"
    path.write_text(
        "trade:\n  jump_threshold: 5\n  correct_jumps: false\ndata:\n  events_format: csv\n",
        encoding="utf-8",
    )

    cfg = AppConfig.load(str(path))

    assert cfg.trade.jump_threshold == 5.0
    assert cfg.trade.correct_jumps is False
    assert cfg.data.events_format == "csv"
    # 未给出的 section 使用默认值
    assert cfg.log.dir == "logs"


def test_env_overrides_data_root(tmp_path, monkeypatch):
    monkeypatch.setenv(DATA_ROOT_ENV, str(tmp_path))

    cfg = AppConfig.load()

    assert cfg.data.root == str(tmp_path)


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        AppConfig.load(str(tmp_path / "nope.yml"))


def test_invalid_threshold(tmp_path):
    path = tmp_path / "cfg.yml"
    path.write_text("trade:\n  jump_threshold: -1\n", encoding="utf-8")

    with pytest.raises(ValidationError):
        AppConfig.load(str(path))
