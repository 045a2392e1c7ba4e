import importlib
from pathlib import Path

from pokeanalysis.core import settings


def test_default_dirs_follow_working_directory(monkeypatch, tmp_path):
    for var in ("POKEANALYSIS_DATA_DIR", "POKEANALYSIS_CACHE_DIR",
                "POKEANALYSIS_PLOTS_DIR", "POKEANALYSIS_OUTPUT_CSV"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    try:
        mod = importlib.reload(settings)
        assert mod.CACHE_DIR == Path.cwd() / "data" / "cache"
        assert mod.PLOTS_DIR == Path.cwd() / "data" / "plots"
        assert mod.OUTPUT_CSV == Path.cwd() / "data" / "pokemon.csv"
        assert "site-packages" not in str(mod.OUTPUT_CSV)
    finally:
        monkeypatch.undo()
        importlib.reload(settings)


def test_env_overrides_output_csv(monkeypatch, tmp_path):
    monkeypatch.setenv("POKEANALYSIS_DATA_DIR", str(tmp_path / "d"))
    monkeypatch.setenv("POKEANALYSIS_OUTPUT_CSV", str(tmp_path / "out.csv"))
    try:
        mod = importlib.reload(settings)
        assert mod.OUTPUT_CSV == Path(tmp_path / "out.csv")
        assert mod.CACHE_DIR == tmp_path / "d" / "cache"
    finally:
        monkeypatch.undo()
        importlib.reload(settings)
