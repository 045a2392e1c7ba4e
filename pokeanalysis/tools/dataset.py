import logging
import pandas as pd
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from ..core.models import BranchPolicy
from ..core.settings import DEFAULT_TIMEOUT
from . import fetch
from .cache import load_cached, save_cached
from .flatten import flatten_species, flatten_pokemon

logger = logging.getLogger(__name__)

MULTI_SEP = ", "


def split_multi(val) -> List[str]:
    if isinstance(val, list):
        return [str(x).strip() for x in val]
    if pd.isna(val):
        return []
    s = str(val).strip()
    return [x.strip() for x in s.split(",") if x.strip()]


def tabularize_value(value: Any) -> Any:
    """Una lista se vuelve una sola celda: 1 elemento tal cual, varios unidos con ', '."""
    if not isinstance(value, list):
        return value
    if not value:
        return None
    if len(value) == 1:
        return str(value[0])
    return MULTI_SEP.join(str(v) for v in value)


def tabularize_record(record: Dict[str, Any]) -> Dict[str, Any]:
    return {k: tabularize_value(v) for k, v in record.items()}


def fetch_species_row(name: str, timeout: float = DEFAULT_TIMEOUT,
                      branch: BranchPolicy = "first") -> Optional[Dict[str, Any]]:
    """
    Species record merged with the record of its default pokemon variety.
    Pokemon fields win on key collisions. None when either fetch fails.
    """
    species_raw = fetch.get_species(name, timeout=timeout)
    if species_raw is None:
        return None
    variety = species_raw.get("default_variety") or name
    pokemon_raw = fetch.get_pokemon(variety, timeout=timeout)
    if pokemon_raw is None:
        return None

    species = flatten_species(species_raw, branch=branch)
    pokemon = flatten_pokemon(pokemon_raw)
    return {"species": name, **species, **pokemon}


def _order_columns(df: pd.DataFrame) -> pd.DataFrame:
    if "species" not in df.columns:
        return df
    cols = ["species"] + [c for c in df.columns if c != "species"]
    return df[cols]


def fetch_generation(generation, cache_dir: Optional[Path] = None,
                     timeout: float = DEFAULT_TIMEOUT,
                     branch: BranchPolicy = "first") -> pd.DataFrame:
    """
    Tabla de todas las especies de una generacion.

    Si cache_dir existe y ya hay archivo para esta generacion se devuelve tal cual,
    sin ninguna llamada de red.
    """
    if cache_dir is not None:
        cached = load_cached(cache_dir, generation)
        if cached is not None:
            return cached

    names = fetch.get_generation_species(generation, timeout=timeout)
    logger.info(f"Generacion {generation}: {len(names)} especies")

    rows = [fetch_species_row(n, timeout=timeout, branch=branch) for n in names]
    mask = [r is not None for r in rows]
    for n, ok in zip(names, mask):
        if not ok:
            logger.warning(f"Sin registro valido para {n}, se descarta")

    kept = [tabularize_record(r) for r, ok in zip(rows, mask) if ok]
    df = _order_columns(pd.DataFrame(kept))
    if "species" in df.columns:
        df = df.drop_duplicates(subset="species").reset_index(drop=True)

    if cache_dir is not None:
        if kept:
            save_cached(cache_dir, generation, df)
        else:
            # un resultado vacio nunca se cachea
            logger.warning(f"Generacion {generation} sin filas, no se guarda en cache")
    return df


def build_dataset(generations: Iterable, cache_dir: Optional[Path] = None,
                  timeout: float = DEFAULT_TIMEOUT,
                  branch: BranchPolicy = "first") -> pd.DataFrame:
    frames = [fetch_generation(g, cache_dir=cache_dir, timeout=timeout, branch=branch)
              for g in generations]
    frames = [f for f in frames if not f.empty]
    if not frames:
        return pd.DataFrame(columns=["species"])
    # concat hace la union de columnas; lo que falta queda como NaN
    df = pd.concat(frames, ignore_index=True, sort=False)
    df = df.drop_duplicates(subset="species").reset_index(drop=True)
    logger.info(f"Dataset: {len(df)} filas x {len(df.columns)} columnas")
    return _order_columns(df)


def export_dataset(df: pd.DataFrame, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)
    logger.info(f"Dataset exportado a {path}")
    return path


def load_dataset_df(path: Path, multi_columns: Iterable[str] = ()) -> pd.DataFrame:
    """Read an exported CSV back; the given comma-joined columns are parsed to lists."""
    df = pd.read_csv(path)
    for col in multi_columns:
        if col in df.columns:
            df[col] = df[col].apply(split_multi)
    return df
