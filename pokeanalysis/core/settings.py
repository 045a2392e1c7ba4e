# pokeanalysis/core/settings.py
import os
from pathlib import Path

# Relativo al directorio de trabajo, nunca al paquete instalado
DATA = Path(os.environ.get("POKEANALYSIS_DATA_DIR", Path.cwd() / "data"))

API_BASE = "https://pokeapi.co/api/v2"

# Listados paginados: 1000 alcanza para traer todo de una vez
LIST_LIMIT = 1000
DEFAULT_TIMEOUT = 30.0

ENGLISH = "en"
STAT_PREFIX = "base_"

# Campos que no sirven para el analisis, se descartan al momento del fetch
SPECIES_DROP = {
    "flavor_text_entries",
    "form_descriptions",
    "names",
    "pokedex_numbers",
    "varieties",
    "forms_switchable",
}

POKEMON_DROP = {
    "sprites",
    "forms",
    "game_indices",
    "past_types",
    "past_abilities",
    "cries",
    "location_area_encounters",
    "species",
    "order",
    "is_default",
}

# Categorias multi-valor que se codifican como dummies contra el vocabulario completo
DUMMY_CATEGORIES = {
    "abilities": "ability",
    "types": "type",
    "moves": "move",
    "egg_groups": "egg-group",
}

N_CLUSTERS = 6
SEED = 151

CACHE_DIR = Path(os.environ.get("POKEANALYSIS_CACHE_DIR", DATA / "cache"))
PLOTS_DIR = Path(os.environ.get("POKEANALYSIS_PLOTS_DIR", DATA / "plots"))
OUTPUT_CSV = Path(os.environ.get("POKEANALYSIS_OUTPUT_CSV", DATA / "pokemon.csv"))


def cache_file(cache_dir: Path, generation) -> Path:
    return Path(cache_dir) / f"gen_{generation}.pkl"
