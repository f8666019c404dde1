from __future__ import annotations

import io
import json
import logging
import tarfile
from pathlib import Path
from typing import Any, Dict, Optional

from jobtools.errors import CorruptArchive, NotFound
from jobtools.jobset.factory import descriptor_from_dict
from jobtools.jobset.schema import validate_jobpars_dict
from jobtools.jobset.types import (
    FILENAME_FCL,
    FILENAME_JSON,
    FILENAME_TARBALL,
    JobSetDescriptor,
)

log = logging.getLogger("jobtools.archive")


def get_tar_member(archive: Path, member: str) -> Optional[str]:
    """
    Text content of one archive member, or None if it is not there.

    Members are looked up by name so the (possibly large) code tarball is
    never extracted.
    """
    archive = Path(archive)
    try:
        with tarfile.open(archive, "r") as tar:
            try:
                info = tar.getmember(member)
            except KeyError:
                return None
            f = tar.extractfile(info)
            if f is None:
                return None
            return f.read().decode("utf-8")
    except (tarfile.TarError, UnicodeDecodeError) as e:
        raise CorruptArchive(f"{archive}: can not read member {member}: {e}") from e


def load(path: Path) -> JobSetDescriptor:
    """
    Load and validate a job-set archive.

    Raises NotFound, CorruptArchive, or SchemaError.
    """
    path = Path(path).expanduser().resolve()
    if not path.is_file():
        raise NotFound(f"job set archive not found: {path}")

    text = get_tar_member(path, FILENAME_JSON)
    if text is None:
        raise CorruptArchive(f"{path}: can not extract {FILENAME_JSON}")

    try:
        doc = json.loads(text)
    except json.JSONDecodeError as e:
        raise CorruptArchive(f"{path}: {FILENAME_JSON} is not valid JSON") from e

    fcl = get_tar_member(path, FILENAME_FCL)

    jp = descriptor_from_dict(doc, fcl_template=fcl, archive=path)
    log.debug("loaded %s (jobname=%s)", path, jp.jobname)
    return jp


def _add_bytes(tar: tarfile.TarFile, name: str, payload: bytes) -> None:
    info = tarfile.TarInfo(name=name)
    info.size = len(payload)
    info.mode = 0o644
    tar.addfile(info, io.BytesIO(payload))


def pack(
    out: Path,
    jobpars: Dict[str, Any],
    fcl_template: str,
    *,
    code: Optional[Path] = None,
) -> Path:
    """
    Write a job-set archive: jobpars.json, the FCL template, and optionally
    an embedded code tarball.

    The job parameters are validated first; nothing is written on error.
    """
    validate_jobpars_dict(jobpars)

    doc = dict(jobpars)
    if code is not None:
        code = Path(code)
        if not code.is_file():
            raise NotFound(f"code tarball not found: {code}")
        doc["code"] = FILENAME_TARBALL

    out = Path(out).expanduser().resolve()
    out.parent.mkdir(parents=True, exist_ok=True)

    with tarfile.open(out, "w") as tar:
        _add_bytes(tar, FILENAME_JSON, json.dumps(doc, indent=2).encode("utf-8"))
        _add_bytes(tar, FILENAME_FCL, fcl_template.encode("utf-8"))
        if code is not None:
            tar.add(str(code), arcname=FILENAME_TARBALL)

    log.info("wrote %s", out)
    return out
