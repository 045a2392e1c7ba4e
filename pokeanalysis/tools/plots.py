import logging
from pathlib import Path
from typing import List, Optional

import pandas as pd
import plotly.graph_objects as go

logger = logging.getLogger(__name__)


def _write(fig: go.Figure, plots_dir: Path, filename: str) -> Path:
    plots_dir = Path(plots_dir)
    plots_dir.mkdir(parents=True, exist_ok=True)
    path = plots_dir / filename
    fig.write_html(str(path), include_plotlyjs=True, full_html=True)
    logger.info(f"Grafico guardado en {path}")
    return path


def _create_empty_plot(message: str) -> go.Figure:
    fig = go.Figure()
    fig.add_annotation(
        x=0.5,
        y=0.5,
        text=message,
        showarrow=False,
        font={"size": 16},
        xref="paper",
        yref="paper",
    )
    fig.update_layout(
        xaxis={"showgrid": False, "zeroline": False, "showticklabels": False},
        yaxis={"showgrid": False, "zeroline": False, "showticklabels": False},
        plot_bgcolor="white",
    )
    return fig


def plot_distribution(df: pd.DataFrame, column: str, plots_dir: Path,
                      by: Optional[str] = "generation") -> Path:
    """Overlaid histograms of one column, one trace per group."""
    data = df.dropna(subset=[column])
    if data.empty:
        fig = _create_empty_plot(f"No data for {column}")
    else:
        fig = go.Figure()
        groups = data.groupby(by) if by and by in data.columns else [("all", data)]
        for key, group in groups:
            fig.add_trace(go.Histogram(x=group[column], name=str(key), opacity=0.6))
        fig.update_layout(barmode="overlay", title=f"Distribution of {column}",
                          xaxis_title=column, yaxis_title="count")
    return _write(fig, plots_dir, f"dist_{column}.html")


def _hover_text(sel: pd.DataFrame, hover: Optional[pd.Series]) -> List[str]:
    """Hover labels for the selected rows; the scores index when no hover series is given."""
    if hover is None:
        return [str(i) for i in sel.index]
    return [str(v) for v in hover.reindex(sel.index).fillna("").values]


def plot_clusters_2d(scores: pd.DataFrame, labels: pd.Series, plots_dir: Path,
                     hover: Optional[pd.Series] = None,
                     filename: str = "clusters_2d.html") -> Path:
    fig = go.Figure()
    for cluster in sorted(labels.unique()):
        sel = scores[labels.values == cluster]
        fig.add_trace(go.Scatter(
            x=sel["PC1"], y=sel["PC2"], mode="markers",
            name=f"cluster {cluster}", text=_hover_text(sel, hover),
            hovertemplate="%{text}<br>PC1=%{x:.2f}<br>PC2=%{y:.2f}<extra></extra>",
        ))
    fig.update_layout(title="k-means clusters (PC1 vs PC2)", xaxis_title="PC1", yaxis_title="PC2")
    return _write(fig, plots_dir, filename)


def plot_clusters_3d(scores: pd.DataFrame, labels: pd.Series, plots_dir: Path,
                     hover: Optional[pd.Series] = None,
                     filename: str = "clusters_3d.html") -> Path:
    if "PC3" not in scores.columns:
        raise ValueError("3D cluster plot needs at least 3 principal components")
    fig = go.Figure()
    for cluster in sorted(labels.unique()):
        sel = scores[labels.values == cluster]
        fig.add_trace(go.Scatter3d(
            x=sel["PC1"], y=sel["PC2"], z=sel["PC3"], mode="markers",
            marker={"size": 4}, name=f"cluster {cluster}", text=_hover_text(sel, hover),
        ))
    fig.update_layout(title="k-means clusters (PC1-PC3)",
                      scene={"xaxis_title": "PC1", "yaxis_title": "PC2", "zaxis_title": "PC3"})
    return _write(fig, plots_dir, filename)
