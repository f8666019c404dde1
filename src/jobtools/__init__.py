"""
Job-set definition and per-job materialization.

Exports the public API:
- load (job-set archive -> JobSetDescriptor)
- resolve (descriptor, index -> JobPlan)
- njobs, input_datasets, output_datasets
- index_from_sequencer, index_from_source_file
"""
from .jobset.archive import load
from .jobset.resolve import (
    resolve,
    njobs,
    input_datasets,
    output_datasets,
    index_from_sequencer,
    index_from_source_file,
)
from .jobset.types import JobSetDescriptor
from .schemas.models import JobPlan
