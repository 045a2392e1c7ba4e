import json
from pathlib import Path

import pytest

from pokeanalysis.tools import fetch

DATA = Path(__file__).parent / "data"
API = "https://pokeapi.co/api/v2"


def load_json(name: str) -> dict:
    return json.loads((DATA / name).read_text(encoding="utf-8"))


@pytest.fixture
def fake_api(monkeypatch):
    """
    Reemplaza fetch.get_url por un diccionario url -> payload.
    Devuelve (routes, calls) para que cada test agregue rutas y revise las llamadas.
    """
    routes = {
        f"{API}/generation/1/": {
            "id": 1,
            "name": "generation-i",
            "pokemon_species": [{"name": "pikachu", "url": f"{API}/pokemon-species/25/"}],
        },
        f"{API}/pokemon-species/pikachu/": load_json("pikachu_species.json"),
        f"{API}/pokemon/pikachu/": load_json("pikachu_pokemon.json"),
        f"{API}/evolution-chain/10/": load_json("pichu_chain.json"),
    }
    calls = []

    def fake_get_url(url, params=None, timeout=None):
        calls.append((url, params))
        return routes.get(url)

    monkeypatch.setattr(fetch, "get_url", fake_get_url)
    return routes, calls
