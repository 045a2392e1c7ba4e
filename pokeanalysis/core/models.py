from pathlib import Path
from pydantic import BaseModel, Field
from typing import Optional, List, Literal, Union

from .settings import CACHE_DIR, PLOTS_DIR, OUTPUT_CSV, N_CLUSTERS, SEED, DEFAULT_TIMEOUT

BranchPolicy = Literal["first", "all"]


class EvolutionStage(BaseModel):
    name: str
    level: int = Field(ge=1)


class NamedResource(BaseModel):
    name: str
    url: Optional[str] = None


class NamedResourceList(BaseModel):
    count: int = 0
    next: Optional[str] = None
    previous: Optional[str] = None
    results: List[NamedResource] = Field(default_factory=list)

    def names(self) -> List[str]:
        return [r.name for r in self.results]


class PipelineConfig(BaseModel):
    generations: List[Union[int, str]] = Field(default_factory=lambda: [1])
    cache_dir: Optional[Path] = CACHE_DIR
    plots_dir: Path = PLOTS_DIR
    output_csv: Path = OUTPUT_CSV

    n_clusters: int = Field(default=N_CLUSTERS, ge=1)
    seed: int = SEED
    timeout: float = DEFAULT_TIMEOUT
    # Politica para cadenas con varias ramas de evolucion
    evolution_branch: BranchPolicy = "first"

    log_level: str = "INFO"
    skip_analysis: bool = False
