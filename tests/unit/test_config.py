from pathlib import Path

from bgpgen.config import Config


def test_missing_file_uses_defaults(tmp_path: Path):
    cfg = Config.load(str(tmp_path / "nope.toml"))

    assert cfg == Config()
    assert cfg.configs_path == Path("output") / "configs"
    assert cfg.topology_path == Path("output") / "core.imn"


def test_load_from_file(tmp_path: Path):
    path = tmp_path / "config.toml"
    path.write_text('abstract = true\noutput = "gen"\ntopology_name = "lab"\n')

    cfg = Config.load(str(path))

    assert cfg.abstract is True
    assert cfg.topology_path == Path("gen") / "lab.imn"
    assert cfg.configs_dir == "configs"


def test_invalid_file_uses_defaults(tmp_path: Path):
    path = tmp_path / "config.toml"
    path.write_text("abstract = [\n")

    assert Config.load(str(path)) == Config()


def test_save_writes_toml(tmp_path: Path):
    path = tmp_path / "config.toml"

    Config(output="elsewhere").save(str(path))

    assert Config.load(str(path)).output == "elsewhere"
