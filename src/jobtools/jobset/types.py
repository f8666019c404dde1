from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

# Archive members
FILENAME_JSON = "jobpars.json"
FILENAME_FCL = "mu2e.fcl"
FILENAME_TARBALL = "code.tar"
FILENAME_TARSETUP = "Code/setup.sh"

# Conventional FCL keys
FCLKEY_FIRST_RUN = "source.firstRun"
FCLKEY_FIRST_SUBRUN = "source.firstSubRun"


@dataclass(frozen=True)
class InputList:
    """
    A count and an ordered file list.

    count is the merge factor for primary inputs and the number of files
    per job for sampling and aux inputs (0 there means "all files").
    """

    count: int
    files: Tuple[str, ...]


@dataclass(frozen=True)
class FileInputs:
    key: str
    merge: int
    files: Tuple[str, ...]


@dataclass(frozen=True)
class SamplingInputs:
    entries: Mapping[str, InputList]


@dataclass(frozen=True)
class EventIdInputs:
    settings: Mapping[str, Any]

    @property
    def run(self) -> Optional[int]:
        return self.settings.get(FCLKEY_FIRST_RUN)


@dataclass(frozen=True)
class AuxInputs:
    entries: Mapping[str, InputList]


Source = Union[FileInputs, SamplingInputs, EventIdInputs]


@dataclass(frozen=True)
class TaskBlock:
    """
    The per-job variable part of a job set.

    Invariants (enforced by validate_jobpars_dict):
    - source is exactly one of FileInputs | SamplingInputs | EventIdInputs
    - aux is only set alongside FileInputs
    - subrun_key is None when absent from the JSON, "" when disabled
    """

    source: Source
    aux: Optional[AuxInputs] = None
    outfiles: Mapping[str, str] = field(default_factory=dict)
    subrun_key: Optional[str] = None
    seed_key: Optional[str] = None


@dataclass(frozen=True)
class JobSetDescriptor:
    """
    Validated, read-only form of a job-set parameter file.
    """

    tbs: TaskBlock
    jobname: Optional[str] = None
    setup: str = ""
    code: str = ""

    # Archive payload, when loaded from one
    fcl_template: Optional[str] = None
    archive: Optional[Path] = None

    # Parsed JSON document, printed by `jobtools info --jobpars`
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def has_code(self) -> bool:
        return bool(self.code)

    @property
    def setup_script(self) -> str:
        if self.setup:
            return self.setup
        if self.has_code:
            return FILENAME_TARSETUP
        return ""
