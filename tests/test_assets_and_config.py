import asyncio
from pathlib import Path

from pos_reports.assets import load_logo, load_logo_async
from pos_reports.config import ReportConfig, load_config


def test_load_logo(tiny_png):
    data = load_logo(tiny_png)
    assert data == tiny_png.read_bytes()
    assert asyncio.run(load_logo_async(tiny_png)) == data


def test_load_logo_failures_return_none(tmp_path):
    corrupt = tmp_path / "corrupt.png"
    corrupt.write_bytes(b"not an image")

    assert load_logo(None) is None
    assert load_logo(tmp_path / "missing.png") is None
    assert load_logo(corrupt) is None
    assert asyncio.run(load_logo_async(None)) is None


def test_config_yaml_round_trip(tmp_path):
    config = ReportConfig(currency="USD", logo_path=Path("assets/logo.png"), store_name="Test Store")
    path = tmp_path / "config.yaml"
    config.to_yaml(path)

    loaded = load_config(path)
    assert loaded == config


def test_partial_config_uses_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("currency: EUR\nout_dir: reports\n")

    config = load_config(path)
    assert config.currency == "EUR"
    assert config.out_dir == Path("reports")
    assert config.logo_path is None
    assert config.store_name == "TJC AUTO SUPPLY"


def test_default_config():
    assert load_config() == ReportConfig()
