"""API request models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, model_validator

from semagram.models.parameters import ParameterVector


class LogogramRequest(BaseModel):
    phrase: str = Field(..., min_length=1, description="Phrase text; one clause per line in composite mode")
    parameters: ParameterVector = Field(default_factory=ParameterVector)
    mode: Literal["single", "composite", "blend"] = "single"
    secondary_phrase: str | None = Field(default=None, description="Phrase B (blend mode only)")
    secondary_parameters: ParameterVector | None = Field(
        default=None,
        description="Parameters for phrase B; defaults to `parameters`",
    )
    blend: float = Field(default=0.5, ge=0.0, le=1.0, description="0 = phrase A only, 1 = phrase B only")
    composition_seed: str | None = Field(
        default=None,
        max_length=64,
        description="Pins the non-semantic layout jitter; omit for no jitter",
    )
    randomize_seed: bool = Field(default=False, description="Draw a fresh composition seed")
    archive: bool = Field(default=True, description="Write the SVGs to the archive")

    @model_validator(mode="after")
    def _check_phrases(self) -> LogogramRequest:
        if not self.phrase.strip():
            raise ValueError("phrase must contain at least one non-space character")
        if self.mode == "blend" and not (self.secondary_phrase and self.secondary_phrase.strip()):
            raise ValueError("blend mode needs a non-empty secondary_phrase")
        return self


class InspectRequest(BaseModel):
    svg: str = Field(..., description="SVG produced by /api/logogram or a grapheme archive")
