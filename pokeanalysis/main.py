#!/usr/bin/env python3
"""
Pipeline de datos de especies Pokémon: PokeAPI -> tabla plana -> análisis y clustering
"""
import sys
import argparse
import logging
import pandas as pd

from pathlib import Path
from typing import Any, Dict, List, Optional

from pokeanalysis.core.models import PipelineConfig
from pokeanalysis.core.settings import DUMMY_CATEGORIES
from pokeanalysis.tools import fetch
from pokeanalysis.tools.dataset import build_dataset, export_dataset, load_dataset_df
from pokeanalysis.tools.analysis import (
    count_missing, numeric_summary, correlation_matrix, contingency_table,
    build_feature_matrix, scale_features, run_pca, run_kmeans,
)
from pokeanalysis.tools.plots import plot_distribution, plot_clusters_2d, plot_clusters_3d

logger = logging.getLogger(__name__)


def _fetch_vocabularies(df: pd.DataFrame, timeout: float) -> Dict[str, List[str]]:
    """Vocabulario completo de cada categoria multi-valor presente en la tabla."""
    vocab: Dict[str, List[str]] = {}
    for col, category in DUMMY_CATEGORIES.items():
        if col not in df.columns:
            continue
        names = fetch.list_names(category, timeout=timeout)
        logger.info(f"Vocabulario {category}: {len(names)} valores")
        vocab[col] = names
    return vocab


def _hover_labels(df: pd.DataFrame) -> Optional[pd.Series]:
    """"pikachu (electric)" por especie, indexado como la matriz de features."""
    if "species" not in df.columns:
        return None
    labels = df["species"].astype(str)
    if "types" in df.columns:
        labels = labels + " (" + df["types"].fillna("").astype(str) + ")"
    return pd.Series(labels.values, index=df["species"].values)


def analyze(df: pd.DataFrame, config: PipelineConfig,
            vocabularies: Optional[Dict[str, List[str]]] = None) -> Dict[str, Any]:
    missing = count_missing(df)
    logger.info(f"Columnas con nulos: {len(missing)}")
    for col, n in missing.head(10).items():
        logger.debug(f"  {col}: {n}")

    summary = numeric_summary(df)
    corr = correlation_matrix(df)
    tables = {}
    if "generation" in df.columns:
        for col in ("is_legendary", "is_mythical", "growth_rate", "color"):
            if col in df.columns:
                tables[col] = contingency_table(df, "generation", col)

    if vocabularies is None:
        vocabularies = _fetch_vocabularies(df, config.timeout)
    matrix = build_feature_matrix(df, vocabularies)
    logger.info(f"Matriz de features: {matrix.shape[0]} x {matrix.shape[1]}")

    plots = []
    for col in [c for c in df.columns if c.startswith("base_")]:
        plots.append(plot_distribution(df, col, config.plots_dir))

    result: Dict[str, Any] = {
        "missing": missing,
        "summary": summary,
        "correlation": corr,
        "contingency": tables,
        "matrix": matrix,
        "plots": plots,
    }

    # k-means necesita al menos k filas y el grafico 2D al menos dos componentes
    if matrix.shape[1] == 0 or len(matrix) < max(config.n_clusters, 2):
        logger.warning(f"Solo {len(matrix)} filas y {matrix.shape[1]} columnas para "
                       f"k={config.n_clusters}, se omite PCA/clustering")
        return result

    scores, explained = run_pca(scale_features(matrix))
    result.update(scores=scores, explained=explained)
    if scores.shape[1] < 2:
        logger.warning("PCA con una sola componente, se omite clustering")
        return result

    labels = run_kmeans(scores, k=config.n_clusters, seed=config.seed)
    result["clusters"] = labels
    hover = _hover_labels(df)
    plots.append(plot_clusters_2d(scores, labels, config.plots_dir, hover=hover))
    if scores.shape[1] >= 3:
        plots.append(plot_clusters_3d(scores, labels, config.plots_dir, hover=hover))
    return result


def run_pipeline(config: PipelineConfig, from_csv: Optional[Path] = None) -> Dict[str, Any]:
    if from_csv is not None:
        df = load_dataset_df(from_csv)
    else:
        df = build_dataset(config.generations, cache_dir=config.cache_dir,
                           timeout=config.timeout, branch=config.evolution_branch)
        export_dataset(df, config.output_csv)

    result: Dict[str, Any] = {"dataset": df}
    if df.empty:
        logger.error("Dataset vacío, no hay nada que analizar")
        return result
    if not config.skip_analysis:
        result.update(analyze(df, config))
    return result


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="PokeAPI species dataset + PCA/k-means exploration")
    ap.add_argument("-g", "--generations", nargs="+", default=["1"],
                    help="Generation ids or names (e.g. 1 2 generation-iii)")
    ap.add_argument("--cache-dir", type=Path, default=None)
    ap.add_argument("--no-cache", action="store_true", help="Fetch everything, never read or write the cache")
    ap.add_argument("--plots-dir", type=Path, default=None)
    ap.add_argument("--output", type=Path, default=None, help="CSV path for the dataset")
    ap.add_argument("--from-csv", type=Path, default=None, help="Analyze an exported CSV instead of fetching")
    ap.add_argument("-k", "--clusters", type=int, default=None)
    ap.add_argument("--seed", type=int, default=None)
    ap.add_argument("--timeout", type=float, default=None)
    ap.add_argument("--all-branches", action="store_true",
                    help="Walk every evolution branch instead of only the first")
    ap.add_argument("--skip-analysis", action="store_true")
    ap.add_argument("--log-level", default="INFO")
    return ap.parse_args(argv)


def config_from_args(args: argparse.Namespace) -> PipelineConfig:
    overrides: Dict[str, Any] = {
        "generations": args.generations,
        "evolution_branch": "all" if args.all_branches else "first",
        "skip_analysis": args.skip_analysis,
        "log_level": args.log_level,
    }
    if args.no_cache:
        overrides["cache_dir"] = None
    elif args.cache_dir is not None:
        overrides["cache_dir"] = args.cache_dir
    if args.plots_dir is not None:
        overrides["plots_dir"] = args.plots_dir
    if args.output is not None:
        overrides["output_csv"] = args.output
    if args.clusters is not None:
        overrides["n_clusters"] = args.clusters
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.timeout is not None:
        overrides["timeout"] = args.timeout
    return PipelineConfig(**overrides)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    config = config_from_args(args)

    logging.basicConfig(level=getattr(logging, config.log_level.upper(), logging.INFO),
                        stream=sys.stderr, format='%(asctime)s - %(levelname)s - %(message)s')
    logger.info(f"Generaciones: {config.generations}, cache: {config.cache_dir}")

    try:
        result = run_pipeline(config, from_csv=args.from_csv)
    except KeyboardInterrupt:
        logger.info("Interrupción del usuario")
        return 130
    except Exception as e:
        logger.exception(f"Error fatal: {e}")
        return 1

    df = result["dataset"]
    logger.info(f"Listo: {len(df)} especies")
    for path in result.get("plots", []):
        logger.info(f"  {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
