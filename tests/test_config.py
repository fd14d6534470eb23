from pathlib import Path

import pytest

import theatreevents.config as cfg_module

_ENV_VARS = ("THEATREEVENTS_DATABASE", "THEATREEVENTS_TYPE_PROFILE", "THEATREEVENTS_COMPANY_MATCHING")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # setenv first so monkeypatch also undoes values written by .env loading
    for name in _ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


def test_missing_config_gives_defaults(tmp_path):
    cfg = cfg_module.load(tmp_path / "nope.toml", tmp_path / ".env")
    assert cfg_module.get_database_path(cfg) == Path("data/events.db")
    settings = cfg_module.get_import_settings(cfg)
    assert settings.type_profile == "play"
    assert settings.company_matching == "normalized"
    assert settings.require_companies_sheet is False


def test_toml_values(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(
        '[database]\npath = "x/theatre.db"\n\n'
        '[import]\ntype_profile = "performance"\ncompany_matching = "exact"\nrequire_companies_sheet = true\n'
    )
    cfg = cfg_module.load(path, tmp_path / ".env")
    assert cfg_module.get_database_path(cfg) == Path("x/theatre.db")
    settings = cfg_module.get_import_settings(cfg)
    assert (settings.type_profile, settings.company_matching) == ("performance", "exact")
    assert settings.require_companies_sheet is True


def test_env_file_overlays_config(tmp_path, monkeypatch):
    env = tmp_path / ".env"
    env.write_text('# local\nTHEATREEVENTS_DATABASE="env.db"\nTHEATREEVENTS_TYPE_PROFILE=performance\n')
    monkeypatch.setenv("THEATREEVENTS_TYPE_PROFILE", "play")
    cfg = cfg_module.load(tmp_path / "missing.toml", env)
    assert cfg_module.get_database_path(cfg) == Path("env.db")
    # Shell wins over the file
    assert cfg_module.get_import_settings(cfg).type_profile == "play"


def test_unknown_values_are_rejected():
    with pytest.raises(ValueError, match="type_profile"):
        cfg_module.get_import_settings({"import": {"type_profile": "opera-only"}})
    with pytest.raises(ValueError, match="company_matching"):
        cfg_module.get_import_settings({"import": {"company_matching": "fuzzy"}})
