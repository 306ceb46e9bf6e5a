from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

if TYPE_CHECKING:
    from .engine import AstarEngine


API_VERSION = "1.0.0"


@dataclass(frozen=True)
class SpaceMeta:
    name: str
    api_version: str
    space_version: str
    capabilities: Dict[str, Any] = field(default_factory=dict)


class ProblemSpace(ABC):
    """A concrete set of rules describing one kind of searchable space."""

    @abstractmethod
    def meta(self) -> SpaceMeta:
        raise NotImplementedError

    @abstractmethod
    def install(self, engine: "AstarEngine") -> None:
        raise NotImplementedError

    def parse_node(self, text: str) -> Any:
        return text

    def format_node(self, node: Any) -> str:
        return str(node)

    def random_endpoints(self, rng) -> Optional[Tuple[Any, Any]]:
        return None


def describe_space(space: ProblemSpace) -> Dict[str, Any]:
    meta = space.meta()
    return {
        "name": meta.name,
        "api_version": meta.api_version,
        "space_version": meta.space_version,
        "capabilities": meta.capabilities,
    }


def rules_installed(engine: "AstarEngine") -> List[str]:
    return [name for name, rule in engine.rules.to_dict().items() if rule is not None]
