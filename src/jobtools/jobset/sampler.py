"""
Reproducible draws without replacement.

The "random" part has to be the same on every system and every rerun, so
instead of an external generator each draw hashes the job index together
with the files still left in the pool:

    h = sha256(str(index) + remaining[0] + remaining[1] + ...)
    pick = int(h.hexdigest()[:8], 16) % len(remaining)

The digest is recomputed from the *current* pool at every step.

Only the first 32 bits of the digest are used. That is known to be thin for
pools approaching 10^6 files, but widening it would change every draw
made from existing job sets.
"""

from __future__ import annotations

import hashlib
import logging
from typing import List, Sequence

from jobtools.errors import InvalidRequest

log = logging.getLogger("jobtools.sampler")

DIGEST_HEX_CHARS = 8


def _draw_value(index: int, pool: Sequence[str]) -> int:
    h = hashlib.sha256()
    h.update(str(index).encode("utf-8"))
    for name in pool:
        h.update(name.encode("utf-8"))
    return int(h.hexdigest()[:DIGEST_HEX_CHARS], 16)


def sample(index: int, count: int, files: Sequence[str]) -> List[str]:
    """
    Draw `count` files for job `index`; 0 means take the whole list as is.
    """
    if count < 0:
        raise InvalidRequest(f"sample(): negative count {count}")
    if count > len(files):
        raise InvalidRequest(
            f"sample(): requested {count} files from a list of {len(files)}"
        )
    if count == 0:
        return list(files)

    pool = list(files)
    drawn: List[str] = []
    for _ in range(count):
        pick = _draw_value(index, pool) % len(pool)
        drawn.append(pool.pop(pick))

    log.debug("sample index=%d drew %d of %d", index, count, len(files))
    return drawn
