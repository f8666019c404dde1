"""
Per-job input selection.

Each function returns a (possibly empty) {fcl_key: [basenames]} dict:

- primary inputs: sequential slice of the single primary list, merge files per job
- sampling inputs: sequential slice of each list, count files per job
- aux inputs: reproducible draw without replacement from each list
"""

from __future__ import annotations

from typing import Dict, List

from jobtools.jobset.partition import njobs_for, partition
from jobtools.jobset.sampler import sample
from jobtools.jobset.types import FileInputs, JobSetDescriptor, SamplingInputs


def njobs(jp: JobSetDescriptor) -> int:
    """Number of jobs in the set; 0 means unlimited."""
    source = jp.tbs.source
    if isinstance(source, FileInputs):
        return njobs_for(source.merge, len(source.files))
    if isinstance(source, SamplingInputs):
        # all tags agree, checked at load time
        counts = {njobs_for(v.count or len(v.files), len(v.files)) for v in source.entries.values()}
        return counts.pop()
    return 0


def job_primary_inputs(jp: JobSetDescriptor, index: int) -> Dict[str, List[str]]:
    source = jp.tbs.source
    if not isinstance(source, FileInputs):
        return {}
    return {source.key: partition(index, source.merge, source.files)}


def job_sampling_inputs(jp: JobSetDescriptor, index: int) -> Dict[str, List[str]]:
    source = jp.tbs.source
    if not isinstance(source, SamplingInputs):
        return {}
    return {
        key: partition(index, v.count or len(v.files), v.files)
        for key, v in sorted(source.entries.items())
    }


def job_aux_inputs(jp: JobSetDescriptor, index: int) -> Dict[str, List[str]]:
    if jp.tbs.aux is None:
        return {}
    return {
        key: sample(index, v.count, v.files)
        for key, v in sorted(jp.tbs.aux.entries.items())
    }
