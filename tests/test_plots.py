import pandas as pd
import pytest

from pokeanalysis.tools.plots import plot_distribution, plot_clusters_2d, plot_clusters_3d


def _scores():
    scores = pd.DataFrame(
        {"PC1": [0.1, 1.2, -0.5, 2.0], "PC2": [1.0, 0.0, -1.0, 0.5], "PC3": [0.0, 0.3, 0.2, -0.1]},
        index=["bulbasaur", "charmander", "squirtle", "pikachu"],
    )
    labels = pd.Series([0, 1, 0, 1], index=scores.index, name="cluster")
    return scores, labels


def test_cluster_documents_are_written(tmp_path):
    scores, labels = _scores()
    p2 = plot_clusters_2d(scores, labels, tmp_path)
    p3 = plot_clusters_3d(scores, labels, tmp_path)
    assert p2.name == "clusters_2d.html"
    assert p3.name == "clusters_3d.html"
    assert "pikachu" in p2.read_text(encoding="utf-8")


def test_3d_needs_three_components(tmp_path):
    scores, labels = _scores()
    with pytest.raises(ValueError):
        plot_clusters_3d(scores[["PC1", "PC2"]], labels, tmp_path)


def test_distribution_plot(tmp_path):
    df = pd.DataFrame({"base_hp": [35, 45, 39, None], "generation": ["generation-i"] * 2 + ["generation-ii"] * 2})
    path = plot_distribution(df, "base_hp", tmp_path / "plots")
    assert path.exists()
    assert path.name == "dist_base_hp.html"


def test_distribution_plot_without_data(tmp_path):
    df = pd.DataFrame({"base_hp": [None, None]})
    assert plot_distribution(df, "base_hp", tmp_path, by=None).exists()


def test_cluster_hover_labels(tmp_path):
    scores, labels = _scores()
    hover = pd.Series(["bulbasaur (grass, poison)", "charmander (fire)", "squirtle (water)",
                       "pikachu (electric)"], index=scores.index)
    html = plot_clusters_2d(scores, labels, tmp_path, hover=hover).read_text(encoding="utf-8")
    assert "pikachu (electric)" in html
    html3 = plot_clusters_3d(scores, labels, tmp_path, hover=hover).read_text(encoding="utf-8")
    assert "squirtle (water)" in html3
