from __future__ import annotations
import json, pathlib
from typing import Dict, Any, Iterable, Optional
import pandas as pd

from jobtools.jobset.inputs import njobs
from jobtools.jobset.resolve import resolve
from jobtools.jobset.types import JobSetDescriptor

def jsonl_append(path: str, rec: Dict[str, Any]):
    p = pathlib.Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("a", encoding="utf-8") as f:
        f.write(json.dumps(rec, ensure_ascii=False) + "\n")

def _flatten_plan(plan) -> Dict[str, Any]:
    inputs = plan.inputs
    out = {
        "index": plan.index,
        "sequencer": plan.sequencer,
        "n_inputs": sum(len(v) for v in inputs.values()),
        "n_primary": sum(len(v) for v in plan.primary_inputs.values()),
        "n_aux": sum(len(v) for v in plan.aux_inputs.values()),
        "n_sampling": sum(len(v) for v in plan.sampling_inputs.values()),
        "seed": plan.seed[1] if plan.seed else None,
    }
    # one column per FCL key, files joined with ';'
    for key in sorted(inputs):
        out[key] = ";".join(inputs[key])
    for key in sorted(plan.outputs):
        out[key] = plan.outputs[key]
    for key, value in plan.event_settings.items():
        out[key] = value
    return out

def plans_to_frame(jp: JobSetDescriptor, indices: Optional[Iterable[int]] = None) -> pd.DataFrame:
    """One row per job. Without indices, every job of a finite set."""
    if indices is None:
        n = njobs(jp)
        if not n:
            raise ValueError("job set is unlimited, give explicit indices")
        indices = range(n)
    rows = [_flatten_plan(resolve(jp, i)) for i in indices]
    return pd.DataFrame(rows)

def frame_to_file(df: pd.DataFrame, path: str):
    p = pathlib.Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    if p.suffix == ".parquet":
        df.to_parquet(p, index=False)
    else:
        df.to_csv(p, index=False)
