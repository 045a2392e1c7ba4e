# pokeanalysis/tools/fetch.py
import logging
from typing import Any, Dict, List, Optional

import requests
from pydantic import ValidationError

from ..core.models import NamedResourceList
from ..core.settings import API_BASE, LIST_LIMIT, DEFAULT_TIMEOUT, SPECIES_DROP, POKEMON_DROP

logger = logging.getLogger(__name__)


def get_url(url: str, params: Optional[Dict[str, Any]] = None,
            timeout: float = DEFAULT_TIMEOUT) -> Optional[Dict[str, Any]]:
    """GET a JSON document. Any failure is logged and returns None."""
    logger.debug(f"GET {url} params={params}")
    try:
        res = requests.get(url, params=params, timeout=timeout)
        res.raise_for_status()
        return res.json()
    except (requests.RequestException, ValueError) as e:
        logger.error(f"Fallo al obtener {url}: {e}")
        return None


def resource_url(resource: str, identifier) -> str:
    ident = str(identifier).strip().lower()
    return f"{API_BASE}/{resource}/{ident}/"


def get_resource(resource: str, identifier, timeout: float = DEFAULT_TIMEOUT) -> Optional[Dict[str, Any]]:
    return get_url(resource_url(resource, identifier), timeout=timeout)


def list_names(category: str, offset: int = 0, limit: int = LIST_LIMIT,
               timeout: float = DEFAULT_TIMEOUT) -> List[str]:
    """
    Names of every resource in a category (e.g. "ability", "type", "move").
    Uses the paginated listing endpoint; limit=1000 covers every category in one page.
    """
    payload = get_url(f"{API_BASE}/{category}/", params={"offset": offset, "limit": limit}, timeout=timeout)
    if payload is None:
        return []
    try:
        listing = NamedResourceList.model_validate(payload)
    except ValidationError as e:
        logger.error(f"Listado invalido para {category}: {e}")
        return []
    if listing.next:
        logger.warning(f"Listado de {category} truncado: {len(listing.results)} de {listing.count}")
    return listing.names()


def get_generation_species(generation, timeout: float = DEFAULT_TIMEOUT) -> List[str]:
    payload = get_resource("generation", generation, timeout=timeout)
    if payload is None:
        return []
    species = payload.get("pokemon_species") or []
    return [s["name"] for s in species if isinstance(s, dict) and s.get("name")]


def _default_variety(varieties) -> Optional[str]:
    """First variety flagged is_default; falls back to the first listed one."""
    if not isinstance(varieties, list):
        return None
    named = [v for v in varieties if isinstance(v, dict) and isinstance(v.get("pokemon"), dict)]
    for v in named:
        if v.get("is_default"):
            return v["pokemon"].get("name")
    return named[0]["pokemon"].get("name") if named else None


def get_species(name: str, timeout: float = DEFAULT_TIMEOUT) -> Optional[Dict[str, Any]]:
    """
    Species document with the irrelevant fields dropped.

    The evolution chain link is resolved here so the flattener receives the
    full tree under evolution_chain["chain"]. The default variety name is
    kept as "default_variety" because "varieties" itself is dropped.
    """
    raw = get_resource("pokemon-species", name, timeout=timeout)
    if raw is None:
        return None

    species = {k: v for k, v in raw.items() if k not in SPECIES_DROP}
    species["default_variety"] = _default_variety(raw.get("varieties"))

    link = raw.get("evolution_chain")
    if isinstance(link, dict) and link.get("url"):
        doc = get_url(link["url"], timeout=timeout)
        species["evolution_chain"] = {"chain": (doc or {}).get("chain")}
    else:
        species["evolution_chain"] = {"chain": None}
    return species


def get_pokemon(name: str, timeout: float = DEFAULT_TIMEOUT) -> Optional[Dict[str, Any]]:
    raw = get_resource("pokemon", name, timeout=timeout)
    if raw is None:
        return None
    return {k: v for k, v in raw.items() if k not in POKEMON_DROP}
