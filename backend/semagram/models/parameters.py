"""Semantic parameter vector: every recognized option with bounds and default."""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, Field


class Perspective(str, enum.Enum):
    FIRST = "1st"  # neutral: no rotation, no halo
    SECOND = "2nd"
    THIRD = "3rd"


class ParameterVector(BaseModel):
    """Bounded inputs that bias geometry generation. Validated once at the boundary."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    certainty: float = Field(0.68, ge=0.0, le=1.0, description="Stroke thickness and solidity")
    modality: float = Field(0.4, ge=0.0, le=1.0, description="0 obligation .. 1 possibility arc bias")
    temporality: float = Field(0.82, ge=0.0, le=1.0, description="0 linear .. 1 non-linear (more rings)")
    agency: float = Field(0.55, ge=0.0, le=1.0, description="0 external .. 1 internal; center node and opacity")
    perspective: Perspective = Field(Perspective.FIRST, description="Global rotation offset and halo")
    negation: bool = Field(False, description="Dashed strokes with long gaps")
    hypothetical: bool = Field(False, description="Dashed strokes with fine dashes")
    emphasis: float = Field(0.9, ge=0.0, le=1.0, description="Stroke presence")

    def snapshot(self) -> dict:
        """JSON-ready copy for persistence."""
        return self.model_dump(mode="json")


DEFAULT_PARAMETERS = ParameterVector()
