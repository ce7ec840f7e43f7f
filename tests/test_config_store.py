import pytest

from circlemap.core import config_store as store_mod
from circlemap.core.config_backend import ConfigBackend
from circlemap.core.config_store import ConfigModel, ConfigStore


def _create_store(tmp_path, contents: str = "") -> ConfigStore:
    ini_path = tmp_path / "settings.ini"
    ini_path.write_text(contents, encoding="utf-8")
    return ConfigStore(backend=ConfigBackend(str(ini_path)))


def test_defaults_without_settings(tmp_path):
    store = _create_store(tmp_path)
    cfg = store.config
    defaults = ConfigModel()

    assert cfg.poll_ms == defaults.poll_ms
    assert cfg.size == defaults.size
    assert cfg.show_gaps is True
    assert cfg.state_path == str(tmp_path / "live_state.json")
    assert cfg.maps_dir == str(tmp_path / "maps")


def test_sections_are_applied(tmp_path):
    store = _create_store(
        tmp_path,
        "[feed]\npoll_ms = 100\nstate_path = feed/state.json\n"
        "[maps]\nmaps_dir = circuits\n"
        "[overlay]\nsize = 600\nshow_gaps = no\nfont_family = Consolas\nclose_gap_ms = 500\n"
        "[colors]\ngap_color = #ff0000\ncatching_color = #00ff00\n",
    )
    cfg = store.config

    assert cfg.poll_ms == 100
    assert cfg.state_path == str(tmp_path / "feed" / "state.json")
    assert cfg.maps_dir == str(tmp_path / "circuits")
    assert cfg.size == 600
    assert cfg.show_gaps is False
    assert cfg.font_family == "Consolas"
    assert cfg.gap_color == "#ff0000"
    assert cfg.close_gap_ms == 500
    assert cfg.catching_color == "#00ff00"


def test_poll_interval_is_clamped(tmp_path):
    store = _create_store(tmp_path, "[feed]\npoll_ms = 1\n")

    assert store.config.poll_ms == 20


def test_invalid_integer_names_the_key(tmp_path):
    with pytest.raises(ValueError, match=r"\[overlay\] size"):
        _create_store(tmp_path, "[overlay]\nsize = big\n")


def test_invalid_boolean_names_the_key(tmp_path):
    with pytest.raises(ValueError, match=r"\[overlay\] show_gaps"):
        _create_store(tmp_path, "[overlay]\nshow_gaps = maybe\n")


def test_get_config_store_returns_shared_instance(tmp_path, monkeypatch):
    store = _create_store(tmp_path)
    monkeypatch.setattr(store_mod, "_CONFIG_STORE", store)

    assert store_mod.get_config_store() is store
    assert store_mod.get_config_store().config is store.config


def test_reload_emits_config_changed(tmp_path, monkeypatch):
    store = _create_store(tmp_path)
    monkeypatch.setattr(store_mod, "_CONFIG_STORE", store)

    events = []
    store.config_changed.connect(lambda cfg: events.append(cfg))

    (tmp_path / "settings.ini").write_text("[overlay]\nmargin = 5\n", encoding="utf-8")
    cfg = store.reload()

    assert events == [cfg]
    assert store.config.margin == 5


def test_init_config_store_replaces_shared_store(tmp_path, monkeypatch):
    monkeypatch.setattr(store_mod, "_CONFIG_STORE", None)
    ini_path = tmp_path / "settings.ini"
    ini_path.write_text("[overlay]\nsize = 321\n", encoding="utf-8")

    store = store_mod.init_config_store(ConfigBackend(str(ini_path)))

    assert store_mod.get_config_store() is store
    assert store_mod.get_config_store().config.size == 321
