import logging
from pathlib import Path
from typing import Optional

import pandas as pd

from ..core.settings import cache_file

logger = logging.getLogger(__name__)


def has_cached(cache_dir: Path, generation) -> bool:
    return cache_file(cache_dir, generation).exists()


def load_cached(cache_dir: Path, generation) -> Optional[pd.DataFrame]:
    """Cached table for a generation, or None. No staleness check is done."""
    path = cache_file(cache_dir, generation)
    if not path.exists():
        return None
    logger.info(f"Usando cache {path}")
    return pd.read_pickle(path)


def save_cached(cache_dir: Path, generation, df: pd.DataFrame) -> Path:
    path = cache_file(cache_dir, generation)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_pickle(path)
    logger.info(f"Cache guardado en {path} ({len(df)} filas)")
    return path
