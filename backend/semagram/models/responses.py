"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    graphemes_created: int = 0


class LayerPlacementOut(BaseModel):
    key: str
    rotation: float
    scale: float
    opacity: float
    z_order: int
    group: int = 0


class LogogramResponse(BaseModel):
    svg: str
    tokens: list[str] = Field(default_factory=list)
    grapheme_keys: list[str] = Field(default_factory=list)
    layout: list[LayerPlacementOut] = Field(default_factory=list)
    archived: bool = False
    archive_path: str | None = None
    composition_seed: str | None = None


class GraphemeResponse(BaseModel):
    key: str
    seed: int
    parameters: dict = Field(default_factory=dict)
    rings: int = 0
    spokes: int = 0
    created_at: float = 0.0


class ArchiveRunResponse(BaseModel):
    archived: list[str] = Field(default_factory=list)
    failed: dict[str, str] = Field(default_factory=dict)


class InspectLayer(BaseModel):
    kind: str
    key: str | None = None
    rotation: float = 0.0
    scale: float = 1.0
    opacity: float = 1.0
    path_count: int = 0


class InspectResponse(BaseModel):
    mode: str | None = None
    layers: list[InspectLayer] = Field(default_factory=list)
    path_count: int = 0
    radial_extent: float = 0.0
