"""
Job plan resolution: what a single job of a job set reads, writes and sets.

Everything here is a pure function of (descriptor, index). Plans are built
fresh on every call and the descriptor is never modified, so the same
descriptor can be shared freely between threads.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from jobtools.errors import IndexOutOfRange, MalformedFilename, MissingRunNumber
from jobtools.filename import Filename, dataset_name
from jobtools.jobset import sequencer as seqcodec
from jobtools.jobset.inputs import (
    job_aux_inputs,
    job_primary_inputs,
    job_sampling_inputs,
    njobs,
)
from jobtools.jobset.types import (
    EventIdInputs,
    FCLKEY_FIRST_SUBRUN,
    FileInputs,
    JobSetDescriptor,
    SamplingInputs,
)
from jobtools.schemas.models import JobPlan, JobSetSummary

log = logging.getLogger("jobtools.resolve")

__all__ = [
    "resolve",
    "njobs",
    "input_datasets",
    "output_datasets",
    "index_from_sequencer",
    "index_from_source_file",
    "job_event_settings",
    "source_kind",
    "summarize",
]


def _check_index(jp: JobSetDescriptor, index: int) -> None:
    n = njobs(jp)
    if index < 0 or (n and index >= n):
        raise IndexOutOfRange(index, n)


def _job_sequencer(jp: JobSetDescriptor, index: int) -> Optional[str]:
    if jp.tbs.outfiles:
        return seqcodec.encode(jp, index)
    # No outputs to name: a job set with unconventional input names or
    # without a run number simply has no sequencer.
    try:
        return seqcodec.encode(jp, index)
    except (MalformedFilename, MissingRunNumber) as e:
        log.debug("no sequencer for index %d: %s", index, e)
        return None


def job_event_settings(jp: JobSetDescriptor, index: int) -> Dict[str, Any]:
    """
    Literal event-id settings plus the sub-run number.

    The sub-run key defaults to source.firstSubRun when the job set predates
    the subrunkey field; an explicit empty key turns it off.
    """
    source = jp.tbs.source
    if not isinstance(source, EventIdInputs):
        return {}

    res = dict(source.settings)
    key = jp.tbs.subrun_key if jp.tbs.subrun_key is not None else FCLKEY_FIRST_SUBRUN
    if key:
        res[key] = index
    return res


def resolve(jp: JobSetDescriptor, index: int) -> JobPlan:
    _check_index(jp, index)

    sequencer = _job_sequencer(jp, index)
    outputs = {
        key: Filename.parse(template).with_sequencer(sequencer).basename
        for key, template in sorted(jp.tbs.outfiles.items())
    }

    seed = None
    if jp.tbs.seed_key:
        # one-based, a zero seed is not allowed
        seed = (jp.tbs.seed_key, index + 1)

    plan = JobPlan(
        index=index,
        sequencer=sequencer,
        primary_inputs=job_primary_inputs(jp, index),
        aux_inputs=job_aux_inputs(jp, index),
        sampling_inputs=job_sampling_inputs(jp, index),
        outputs=outputs,
        event_settings=job_event_settings(jp, index),
        seed=seed,
    )
    log.debug("resolved index=%d sequencer=%s", index, sequencer)
    return plan


# ---------------------------------------------------------------------------
# Whole-set queries
# ---------------------------------------------------------------------------

def _datasets(names: Iterable[str]) -> List[str]:
    return sorted({dataset_name(n) for n in names})


def _input_files(jp: JobSetDescriptor) -> Iterable[str]:
    source = jp.tbs.source
    if isinstance(source, FileInputs):
        yield from source.files
    elif isinstance(source, SamplingInputs):
        for v in source.entries.values():
            yield from v.files
    if jp.tbs.aux is not None:
        for v in jp.tbs.aux.entries.values():
            yield from v.files


def input_datasets(jp: JobSetDescriptor) -> List[str]:
    """Sorted names of every dataset any job of the set may read."""
    return _datasets(_input_files(jp))


def output_datasets(jp: JobSetDescriptor) -> List[str]:
    return _datasets(jp.tbs.outfiles.values())


def index_from_sequencer(jp: JobSetDescriptor, sequencer: str) -> int:
    return seqcodec.decode(jp, sequencer)


def index_from_source_file(jp: JobSetDescriptor, filename: str) -> int:
    return seqcodec.index_from_source_file(jp, filename)


def source_kind(jp: JobSetDescriptor) -> str:
    source = jp.tbs.source
    if isinstance(source, FileInputs):
        return "inputs"
    if isinstance(source, SamplingInputs):
        return "samplinginputs"
    return "event_id"


def summarize(jp: JobSetDescriptor) -> JobSetSummary:
    return JobSetSummary(
        jobname=jp.jobname,
        source=source_kind(jp),
        njobs=njobs(jp),
        setup=jp.setup_script,
        code=jp.code,
        outputs=dict(jp.tbs.outfiles),
        input_datasets=input_datasets(jp),
        output_datasets=output_datasets(jp),
    )
