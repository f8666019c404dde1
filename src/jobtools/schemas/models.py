from __future__ import annotations
from typing import Optional, Dict, Any, List, Tuple
from pydantic import BaseModel, Field

class JobPlan(BaseModel):
    # Per-job inputs, outputs and settings; recomputed on every query
    schema_version: str = Field(default='0.1.0')
    index: int
    sequencer: Optional[str] = None
    primary_inputs: Dict[str, List[str]] = Field(default_factory=dict)
    aux_inputs: Dict[str, List[str]] = Field(default_factory=dict)
    sampling_inputs: Dict[str, List[str]] = Field(default_factory=dict)
    outputs: Dict[str, str] = Field(default_factory=dict)
    event_settings: Dict[str, Any] = Field(default_factory=dict)
    seed: Optional[Tuple[str, int]] = None

    @property
    def inputs(self) -> Dict[str, List[str]]:
        # Union of all file-bearing inputs, keyed by FCL key
        return {**self.primary_inputs, **self.aux_inputs, **self.sampling_inputs}

    def to_fcl_overrides(self) -> List[Tuple[str, Any]]:
        """Settings in the order they are written into a job configuration."""
        out: List[Tuple[str, Any]] = []
        for group in (self.primary_inputs, self.aux_inputs, self.sampling_inputs):
            for key in sorted(group):
                out.append((key, list(group[key])))
        for key in sorted(self.outputs):
            out.append((key, self.outputs[key]))
        for key, value in self.event_settings.items():
            out.append((key, value))
        if self.seed is not None:
            out.append(self.seed)
        return out

class JobSetSummary(BaseModel):
    # Whole-set view printed by `jobtools info`
    schema_version: str = Field(default='0.1.0')
    jobname: Optional[str] = None
    source: str
    njobs: int
    setup: str = ''
    code: str = ''
    outputs: Dict[str, str] = Field(default_factory=dict)
    input_datasets: List[str] = Field(default_factory=list)
    output_datasets: List[str] = Field(default_factory=list)
