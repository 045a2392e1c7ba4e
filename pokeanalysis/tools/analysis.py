# pokeanalysis/tools/analysis.py
import logging
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np
import pandas as pd
from sklearn.cluster import KMeans
from sklearn.decomposition import PCA
from sklearn.preprocessing import StandardScaler

from ..core.settings import N_CLUSTERS, SEED
from .dataset import split_multi

logger = logging.getLogger(__name__)

# Identificadores numericos que no aportan nada al PCA
ID_COLUMNS = ("id", "order")


def count_missing(df: pd.DataFrame) -> pd.Series:
    """Nulls per column, largest first; columns without nulls are left out."""
    counts = df.isna().sum()
    return counts[counts > 0].sort_values(ascending=False)


def numeric_summary(df: pd.DataFrame, by: Optional[str] = "generation") -> pd.DataFrame:
    num_cols = [c for c in df.select_dtypes(include="number").columns if c not in ID_COLUMNS]
    stats = ["mean", "std", "min", "max"]
    if by and by in df.columns:
        return df.groupby(by)[num_cols].agg(stats)
    return df[num_cols].agg(stats)


def correlation_matrix(df: pd.DataFrame, columns: Optional[List[str]] = None) -> pd.DataFrame:
    if columns is None:
        columns = [c for c in df.select_dtypes(include="number").columns if c not in ID_COLUMNS]
    return df[columns].corr()


def contingency_table(df: pd.DataFrame, row: str, column: str) -> pd.DataFrame:
    return pd.crosstab(df[row], df[column], margins=True)


def dummy_encode(df: pd.DataFrame, column: str, vocabulary: Iterable[str],
                 prefix: Optional[str] = None) -> pd.DataFrame:
    """
    Indicator columns for a multi-valued column ("a, b" or list cells).

    Every vocabulary value gets a column even if no row has it. Observed values
    missing from the vocabulary are appended at the end.
    """
    prefix = prefix or column
    values = df[column].apply(lambda v: set(split_multi(v)))

    vocab = list(dict.fromkeys(vocabulary))
    seen = set(vocab)
    extra = sorted({v for vs in values for v in vs} - seen)
    if extra:
        logger.debug(f"{column}: {len(extra)} valores fuera del vocabulario")
    vocab += extra

    data = {f"{prefix}_{v}": values.apply(lambda vs, v=v: int(v in vs)) for v in vocab}
    return pd.DataFrame(data, index=df.index, columns=[f"{prefix}_{v}" for v in vocab])


def near_zero_variance(df: pd.DataFrame, freq_cut: float = 95 / 5,
                       unique_cut: float = 10.0) -> List[str]:
    """
    Columns with a single distinct value, or whose most common value outnumbers
    the second most common by more than freq_cut while at most unique_cut
    percent of the values are distinct.
    """
    flagged: List[str] = []
    for col in df.columns:
        vals = df[col].dropna()
        counts = vals.value_counts()
        if len(counts) <= 1:
            flagged.append(col)
            continue
        freq_ratio = counts.iloc[0] / counts.iloc[1]
        pct_unique = 100.0 * len(counts) / len(vals)
        if freq_ratio > freq_cut and pct_unique <= unique_cut:
            flagged.append(col)
    return flagged


def build_feature_matrix(df: pd.DataFrame,
                         vocabularies: Optional[Dict[str, List[str]]] = None,
                         freq_cut: float = 95 / 5,
                         unique_cut: float = 10.0) -> pd.DataFrame:
    """
    Numeric matrix for PCA: numeric and boolean columns plus dummies of the
    multi-valued columns. All-null columns are dropped, remaining nulls get
    the column median, then near-zero-variance columns are removed.
    """
    base = df.select_dtypes(include=["number", "bool"])
    base = base.drop(columns=[c for c in ID_COLUMNS if c in base.columns]).astype(float)

    parts = [base]
    for col, vocab in (vocabularies or {}).items():
        if col in df.columns:
            parts.append(dummy_encode(df, col, vocab))
    matrix = pd.concat(parts, axis=1)

    matrix = matrix.dropna(axis=1, how="all")
    matrix = matrix.fillna(matrix.median())

    nzv = near_zero_variance(matrix, freq_cut=freq_cut, unique_cut=unique_cut)
    if nzv:
        logger.info(f"Se eliminan {len(nzv)} columnas con varianza casi nula")
    matrix = matrix.drop(columns=nzv)

    if "species" in df.columns:
        matrix.index = df["species"].values
    return matrix


def scale_features(matrix: pd.DataFrame) -> pd.DataFrame:
    scaled = StandardScaler().fit_transform(matrix.values)
    return pd.DataFrame(scaled, index=matrix.index, columns=matrix.columns)


def run_pca(matrix: pd.DataFrame, n_components: Optional[int] = None) -> Tuple[pd.DataFrame, pd.Series]:
    """Scores (PC1, PC2, ...) and explained variance ratio per component."""
    pca = PCA(n_components=n_components)
    scores = pca.fit_transform(matrix.values)
    names = [f"PC{i + 1}" for i in range(scores.shape[1])]
    explained = pd.Series(pca.explained_variance_ratio_, index=names, name="explained_variance")
    logger.info(f"PCA: {explained.iloc[:3].sum():.1%} de varianza en las 3 primeras componentes")
    return pd.DataFrame(scores, index=matrix.index, columns=names), explained


def run_kmeans(scores: pd.DataFrame, k: int = N_CLUSTERS, seed: int = SEED,
               n_dims: Optional[int] = 3) -> pd.Series:
    X = scores.iloc[:, :n_dims] if n_dims else scores
    km = KMeans(n_clusters=k, random_state=seed, n_init=10)
    labels = km.fit_predict(np.asarray(X, dtype=float))
    return pd.Series(labels, index=scores.index, name="cluster")
