from __future__ import annotations

import logging
from typing import List, Sequence

from jobtools.errors import InvalidIndex

log = logging.getLogger("jobtools.partition")


def njobs_for(merge: int, nfiles: int) -> int:
    """Number of jobs needed to consume nfiles, merge files at a time."""
    if merge <= 0:
        raise ValueError(f"merge factor must be > 0, got {merge}")
    return nfiles // merge + (1 if nfiles % merge else 0)


def partition(index: int, merge: int, files: Sequence[str]) -> List[str]:
    """
    Slice of `files` consumed by job `index`.

    Skips the first index*merge files and takes what is left, up to merge.
    The last job of a set may get fewer files; an empty slice is an error.
    """
    if merge <= 0:
        raise ValueError(f"merge factor must be > 0, got {merge}")

    first = index * merge
    last = min(first + merge - 1, len(files) - 1)

    if index < 0 or first > last:
        raise InvalidIndex(f"partition(): invalid index {index} for {len(files)} files, merge={merge}")

    log.debug("partition index=%d files[%d:%d]", index, first, last + 1)
    return list(files[first:last + 1])
