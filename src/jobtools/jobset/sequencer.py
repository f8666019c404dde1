"""
Job sequencers.

The sequencer is the field of an output file name that ties the file back
to the job (and so the inputs) that produced it.

- file-based jobs reuse the smallest sequencer among their input files;
  upstream names use zero-padded sequencers, so a string sort is enough
- event-id jobs use "RRRRRR_SSSSSSSS": the run number and the job index
"""

from __future__ import annotations

import logging
import re
from pathlib import PurePath

from jobtools.errors import (
    FileNotAPrimaryInput,
    MalformedSequencer,
    MissingRunNumber,
    SequencerMismatch,
    SequencerNotFound,
    UnsupportedConfiguration,
)
from jobtools.filename import Filename
from jobtools.jobset.inputs import job_primary_inputs, job_sampling_inputs, njobs
from jobtools.jobset.types import (
    EventIdInputs,
    FCLKEY_FIRST_RUN,
    FileInputs,
    JobSetDescriptor,
    SamplingInputs,
)

log = logging.getLogger("jobtools.sequencer")

SEQUENCER_FMT = "%06d_%08d"
_INDEX_RE = re.compile(r"[0-9]+")


def _smallest_sequencer(files) -> str:
    seqs = sorted(Filename.parse(f).sequencer for f in files)
    return seqs[0]


def encode(jp: JobSetDescriptor, index: int) -> str:
    source = jp.tbs.source

    if isinstance(source, FileInputs):
        (files,) = job_primary_inputs(jp, index).values()
        return _smallest_sequencer(files)

    if isinstance(source, SamplingInputs):
        files = [f for v in job_sampling_inputs(jp, index).values() for f in v]
        return _smallest_sequencer(files)

    if isinstance(source, EventIdInputs):
        run = source.run
        if not run:
            raise MissingRunNumber(
                f"sequencer(): can not get {FCLKEY_FIRST_RUN} from event_id"
            )
        return SEQUENCER_FMT % (int(run), index)

    raise UnsupportedConfiguration(
        f"sequencer(): unsupported job source {type(source).__name__}"
    )


def decode(jp: JobSetDescriptor, sequencer: str) -> int:
    """Job index whose outputs carry `sequencer`."""
    n = njobs(jp)

    if n:
        # File-based sequencers are not predictable from the index
        for index in range(n):
            if encode(jp, index) == sequencer:
                log.debug("sequencer %s -> index %d", sequencer, index)
                return index
        raise SequencerNotFound(
            f"sequencer {sequencer!r} does not match any of the {n} jobs", sequencer
        )

    _, sep, suffix = sequencer.rpartition("_")
    if not sep or not _INDEX_RE.fullmatch(suffix):
        raise MalformedSequencer(
            f"can not extract a job index from sequencer {sequencer!r}", sequencer
        )

    index = int(suffix)
    expected = encode(jp, index)
    if expected != sequencer:
        raise SequencerMismatch(
            f"sequencer {sequencer!r} does not belong to this job set "
            f"(index {index} gives {expected!r})",
            sequencer,
        )
    return index


def index_from_source_file(jp: JobSetDescriptor, filename: str) -> int:
    """Index of the job that reads `filename` as a primary input."""
    source = jp.tbs.source
    name = PurePath(filename).name

    if not isinstance(source, FileInputs):
        raise FileNotAPrimaryInput(
            f"{name!r}: job set has no primary file inputs", filename
        )

    try:
        pos = source.files.index(name)
    except ValueError:
        raise FileNotAPrimaryInput(
            f"{name!r} is not a primary input of this job set", filename
        ) from None

    return pos // source.merge
