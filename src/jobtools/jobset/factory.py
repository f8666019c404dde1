# jobtools/jobset/factory.py

from __future__ import annotations

from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from jobtools.jobset.schema import validate_jobpars_dict
from jobtools.jobset.types import (
    AuxInputs,
    EventIdInputs,
    FileInputs,
    InputList,
    JobSetDescriptor,
    SamplingInputs,
    TaskBlock,
)


def _input_lists(d: Mapping[str, Any]) -> Mapping[str, InputList]:
    return MappingProxyType({
        key: InputList(count=int(count), files=tuple(files))
        for key, (count, files) in d.items()
    })


def _source_from_tbs(tbs: Dict[str, Any]):
    if tbs.get("inputs"):
        (key, (merge, files)), = tbs["inputs"].items()
        return FileInputs(key=key, merge=int(merge), files=tuple(files))
    if tbs.get("samplinginputs"):
        return SamplingInputs(entries=_input_lists(tbs["samplinginputs"]))
    return EventIdInputs(settings=MappingProxyType(dict(tbs["event_id"])))


def descriptor_from_dict(
    d: Dict[str, Any],
    *,
    fcl_template: Optional[str] = None,
    archive: Optional[Path] = None,
) -> JobSetDescriptor:
    validate_jobpars_dict(d)
    tbs = d["tbs"]

    aux = AuxInputs(entries=_input_lists(tbs["auxin"])) if tbs.get("auxin") else None

    return JobSetDescriptor(
        tbs=TaskBlock(
            source=_source_from_tbs(tbs),
            aux=aux,
            outfiles=MappingProxyType(dict(tbs.get("outfiles") or {})),
            subrun_key=tbs.get("subrunkey"),
            seed_key=tbs.get("seed") or None,
        ),
        jobname=d.get("jobname"),
        setup=d.get("setup") or "",
        code=d.get("code") or "",
        fcl_template=fcl_template,
        archive=archive,
        raw=d,
    )
