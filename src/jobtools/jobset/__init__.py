"""
Job-set descriptors and the per-job resolution engine.
"""
from .types import JobSetDescriptor, TaskBlock, FileInputs, SamplingInputs, EventIdInputs, AuxInputs, InputList
from .factory import descriptor_from_dict
from .resolve import resolve
