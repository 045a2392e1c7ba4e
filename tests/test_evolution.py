import pytest

from pokeanalysis.tools.evolution import flatten_chain, evolution_progress, chain_names
from conftest import load_json


def _linear_chain(n: int) -> dict:
    node = {"species": {"name": f"stage{n}"}, "evolves_to": []}
    for i in range(n - 1, 0, -1):
        node = {"species": {"name": f"stage{i}"}, "evolves_to": [node]}
    return node


def test_pichu_chain_levels_and_names():
    stages = flatten_chain(load_json("pichu_chain.json"))
    assert [(s.name, s.level) for s in stages] == [("pichu", 1), ("pikachu", 2), ("raichu", 3)]
    assert chain_names(stages) == "pichu, pikachu, raichu"


@pytest.mark.parametrize("n", [1, 2, 3, 5])
def test_n_stages_give_n_pairs_with_consecutive_levels(n):
    stages = flatten_chain(_linear_chain(n))
    assert len(stages) == n
    assert [s.level for s in stages] == list(range(1, n + 1))


def test_progress_first_and_last_stage():
    stages = flatten_chain(_linear_chain(4))
    assert evolution_progress(stages, "stage4") == 1.0
    assert evolution_progress(stages, "stage1") == pytest.approx(1 / 4)


def test_progress_middle_stage_and_missing_species():
    stages = flatten_chain(load_json("pichu_chain.json"))
    assert evolution_progress(stages, "pikachu") == pytest.approx(0.667, abs=1e-3)
    assert evolution_progress(stages, "bulbasaur") is None
    assert evolution_progress([], "pikachu") is None


def test_single_species_chain_is_complete():
    stages = flatten_chain({"species": {"name": "tauros"}, "evolves_to": []})
    assert [s.name for s in stages] == ["tauros"]
    assert evolution_progress(stages, "tauros") == 1.0


def test_branching_follows_first_branch_only():
    stages = flatten_chain(load_json("eevee_chain.json"))
    assert [s.name for s in stages] == ["eevee", "vaporeon"]
    assert evolution_progress(stages, "jolteon") is None


def test_branching_all_walks_every_branch():
    stages = flatten_chain(load_json("eevee_chain.json"), branch="all")
    assert [(s.name, s.level) for s in stages] == [
        ("eevee", 1), ("vaporeon", 2), ("jolteon", 2), ("flareon", 2),
    ]
    assert evolution_progress(stages, "jolteon") == 1.0
    assert evolution_progress(stages, "eevee") == 0.5


@pytest.mark.parametrize("evolves_to", [
    None, "garbage", [42], [{"evolves_to": []}],
    [42, {"species": {"name": "x"}, "evolves_to": []}],
])
def test_malformed_next_stage_is_terminal(evolves_to):
    node = {"species": {"name": "ditto"}, "evolves_to": evolves_to}
    stages = flatten_chain(node)
    assert [(s.name, s.level) for s in stages] == [("ditto", 1)]


def test_missing_evolves_to_key_is_terminal():
    assert [s.name for s in flatten_chain({"species": {"name": "mew"}})] == ["mew"]


def test_root_without_species_gives_empty():
    assert flatten_chain({"evolves_to": []}) == []
    assert flatten_chain(None) == []
    assert flatten_chain({"chain": None}) == []


def test_all_branches_skip_only_malformed_entries():
    node = {"species": {"name": "ditto"},
            "evolves_to": [42, {"species": {"name": "x"}, "evolves_to": []}]}
    stages = flatten_chain(node, branch="all")
    assert [(s.name, s.level) for s in stages] == [("ditto", 1), ("x", 2)]
