"""Persisted grapheme record."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from semagram.engine.geometry import GraphemeGeometry, generate_geometry
from semagram.engine.tokenizer import unit_count
from semagram.errors import StorageUnavailable
from semagram.models.parameters import ParameterVector


@dataclass
class Grapheme:
    """The visual identity of one normalized word. Never mutated after creation."""

    key: str
    seed: int
    parameters: dict[str, Any]
    geometry: GraphemeGeometry
    created_at: float = 0.0

    @property
    def parameter_vector(self) -> ParameterVector:
        try:
            return ParameterVector(**self.parameters)
        except ValidationError as e:
            raise StorageUnavailable(f"Stored parameters for grapheme '{self.key}' are invalid: {e}") from e

    def regenerate(self) -> GraphemeGeometry:
        """Geometry as a pure function of (seed, parameters)."""
        return generate_geometry(self.seed, self.parameter_vector, unit_count(self.key))

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "seed": self.seed,
            "parameters": self.parameters,
            "geometry": self.geometry.to_dict(),
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Grapheme:
        return cls(
            key=data["key"],
            seed=int(data["seed"]),
            parameters=dict(data["parameters"]),
            geometry=GraphemeGeometry.from_dict(data["geometry"]),
            created_at=float(data.get("created_at", 0.0)),
        )
