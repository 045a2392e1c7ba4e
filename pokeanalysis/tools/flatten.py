# pokeanalysis/tools/flatten.py
from typing import Any, Callable, Dict, List, Optional

from ..core.models import BranchPolicy
from ..core.settings import ENGLISH, STAT_PREFIX
from .evolution import flatten_chain, evolution_progress, chain_names

Flat = Dict[str, Any]


def _is_language_table(rows: List[Any]) -> bool:
    return any(isinstance(r, dict) and "language" in r for r in rows)


def _language_of(row: Dict[str, Any]) -> Optional[str]:
    lang = row.get("language")
    if isinstance(lang, dict):
        return lang.get("name")
    return lang


def _name_of(record: Dict[str, Any]) -> Optional[str]:
    """
    "name" gana sobre "genus". Si no hay ninguno, se busca un sub-registro con
    nombre (p. ej. {"move": {"name": ...}, "version_group_details": [...]}).
    """
    if record.get("name") is not None:
        return record["name"]
    if record.get("genus") is not None:
        return record["genus"]
    for k, v in record.items():
        if k != "language" and isinstance(v, dict) and v.get("name") is not None:
            return v["name"]
    return None


def flatten_value(value: Any) -> Any:
    """Reduce one raw field to a scalar, a list of names, or None."""
    if isinstance(value, list):
        rows = value
        if _is_language_table(rows):
            rows = [r for r in rows if isinstance(r, dict) and _language_of(r) == ENGLISH]
            if not rows:
                return None
            if len(rows) == 1:
                return flatten_value(rows[0])
        out = []
        for r in rows:
            v = _name_of(r) if isinstance(r, dict) else r
            if v is not None:
                out.append(v)
        return out
    if isinstance(value, dict):
        return _name_of(value)
    return value


def _flatten_stats(value: Any) -> Flat:
    """Long to wide: [{"base_stat": 35, "stat": {"name": "hp"}}] -> {"base_hp": 35}."""
    out: Flat = {}
    if not isinstance(value, list):
        return out
    for row in value:
        if not isinstance(row, dict):
            continue
        stat = row.get("stat")
        name = stat.get("name") if isinstance(stat, dict) else None
        if not name:
            continue
        key = STAT_PREFIX + name.replace("-", "_")
        base = row.get("base_stat")
        out[key] = int(base) if base is not None else None
    return out


def _flatten_pal_park(value: Any) -> Flat:
    first = value[0] if isinstance(value, list) and value and isinstance(value[0], dict) else {}
    area = first.get("area")
    return {
        "pal_park_base_score": first.get("base_score"),
        "pal_park_rate": first.get("rate"),
        "pal_park_area": area.get("name") if isinstance(area, dict) else area,
    }


def _flatten_evolution(value: Any, name: Optional[str], branch: BranchPolicy) -> Flat:
    chain = value.get("chain") if isinstance(value, dict) else None
    stages = flatten_chain(chain, branch=branch) if chain else []
    return {
        "evolution_chain": chain_names(stages) if stages else None,
        "evolution_progress": evolution_progress(stages, name) if name else None,
    }


def flatten_record(raw: Dict[str, Any], branch: BranchPolicy = "first") -> Flat:
    """
    Flatten one raw species or pokemon document into field -> scalar/list.

    evolution_chain, pal_park_encounters and stats expand into several fields;
    everything else goes through flatten_value.
    """
    name = raw.get("name")
    special: Dict[str, Callable[[Any], Flat]] = {
        "evolution_chain": lambda v: _flatten_evolution(v, name, branch),
        "pal_park_encounters": _flatten_pal_park,
        "stats": _flatten_stats,
    }

    flat: Flat = {}
    for key, value in raw.items():
        handler = special.get(key)
        if handler is not None:
            flat.update(handler(value))
        else:
            flat[key] = flatten_value(value)
    return flat


def flatten_species(raw: Dict[str, Any], branch: BranchPolicy = "first") -> Flat:
    return flatten_record(raw, branch=branch)


def flatten_pokemon(raw: Dict[str, Any]) -> Flat:
    return flatten_record(raw)
