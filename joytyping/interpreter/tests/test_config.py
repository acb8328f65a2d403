import json

from joytyping.core.config import (
    DEFAULT_CONFIG,
    Config,
    ModeConfig,
    Settings,
    config_from_dict,
    config_to_dict,
    load_config,
    save_config,
)


def test_load_writes_default_on_first_launch(tmp_path):
    p = tmp_path / "config.json"
    cfg = load_config(p)
    assert p.exists()
    assert cfg == DEFAULT_CONFIG
    assert json.loads(p.read_text())["modes"][0]["mode"] == "[idle] -id id1"


def test_save_and_load(tmp_path):
    cfg = Config(
        settings=Settings(log_level="debug", spin_edge_threshold=0.6),
        modes=[ModeConfig(mode="[idle] -id a", rules=["[trigger] button -id X -> [repeat]"])],
        phrase_list={"p": ["hello"]},
        word_mapping={"m": ["hi -> hello"]},
    )
    p = save_config(cfg, tmp_path / "c.json")
    assert load_config(p) == cfg


def test_missing_sections_use_defaults():
    cfg = config_from_dict({"modes": [{"mode": "[idle] -id a"}]})
    assert cfg.settings == Settings()
    assert cfg.modes == [ModeConfig(mode="[idle] -id a", rules=[])]
    assert cfg.phrase_list == {} and cfg.word_mapping == {}


def test_dict_shape():
    d = config_to_dict(Config(modes=[ModeConfig(mode="[gyro] -id g")]))
    assert set(d) == {"settings", "modes", "phrase_list", "word_mapping"}
    assert d["modes"] == [{"mode": "[gyro] -id g", "rules": []}]
