from typing import Any, Dict, List, Optional

from ..core.models import EvolutionStage, BranchPolicy


def _node_name(node: Any) -> Optional[str]:
    if not isinstance(node, dict):
        return None
    species = node.get("species")
    if isinstance(species, dict) and species.get("name"):
        return str(species["name"])
    return None


def _children(node: Dict[str, Any], branch: BranchPolicy) -> List[Dict[str, Any]]:
    """
    Next-stage nodes. With branch="first" only evolves_to[0] is considered and
    a malformed first entry makes the node terminal.
    """
    nxt = node.get("evolves_to")
    if not isinstance(nxt, list):
        return []
    if branch == "first":
        nxt = nxt[:1]
    return [c for c in nxt if _node_name(c) is not None]


def flatten_chain(chain: Any, branch: BranchPolicy = "first") -> List[EvolutionStage]:
    """
    Recorre la cadena de evolucion en profundidad y devuelve pares (nombre, nivel).

    Con branch="first" se sigue solo la primera rama en cada nivel, asi que una
    cadena de N etapas da exactamente N pares con niveles 1..N. Con branch="all"
    se recorren todas las ramas en pre-orden, cada nodo con su propia profundidad.

    Acepta el nodo raiz o el documento completo de evolution-chain.
    """
    if isinstance(chain, dict) and "chain" in chain and "species" not in chain:
        chain = chain["chain"]

    stages: List[EvolutionStage] = []

    def walk(node: Dict[str, Any], level: int) -> None:
        stages.append(EvolutionStage(name=_node_name(node), level=level))
        for kid in _children(node, branch):
            walk(kid, level + 1)

    if _node_name(chain) is None:
        return stages
    walk(chain, 1)
    return stages


def evolution_progress(stages: List[EvolutionStage], name: str) -> Optional[float]:
    """Depth of `name` divided by the deepest level of the chain; None if absent."""
    if not stages:
        return None
    max_level = max(s.level for s in stages)
    for s in stages:
        if s.name == name:
            return s.level / max_level
    return None


def chain_names(stages: List[EvolutionStage]) -> str:
    return ", ".join(s.name for s in stages)
