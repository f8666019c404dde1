# jobtools/jobset/schema.py

from __future__ import annotations

from typing import Any, Dict

import jsonschema

from jobtools.errors import MalformedFilename, SchemaError
from jobtools.filename import Filename
from jobtools.jobset.partition import njobs_for

# [count, [files...]]
_INPUT_LIST = {
    "type": "array",
    "minItems": 2,
    "maxItems": 2,
    "items": [
        {"type": "integer"},
        {"type": "array", "items": {"type": "string"}},
    ],
}

_INPUT_MAP = {
    "type": "object",
    "additionalProperties": _INPUT_LIST,
}

JOBPARS_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["tbs"],
    "properties": {
        "jobname": {"type": ["string", "null"]},
        "setup": {"type": ["string", "null"]},
        "code": {"type": ["string", "null"]},
        "tbs": {
            "type": "object",
            "properties": {
                "inputs": _INPUT_MAP,
                "samplinginputs": _INPUT_MAP,
                "auxin": _INPUT_MAP,
                "event_id": {"type": "object"},
                "outfiles": {
                    "type": "object",
                    "additionalProperties": {"type": "string"},
                },
                "subrunkey": {"type": "string"},
                "seed": {"type": "string"},
            },
        },
    },
}

SOURCE_KEYS = ("inputs", "event_id", "samplinginputs")


def _check_input_list(where: str, count: int, files: list, *, merge: bool) -> None:
    if not files:
        raise SchemaError(f"{where}: file list must not be empty")
    if merge:
        if count <= 0:
            raise SchemaError(f"{where}: merge factor must be > 0, got {count}")
        return
    if count < 0:
        raise SchemaError(f"{where}: count per job must be >= 0, got {count}")
    if count > len(files):
        raise SchemaError(
            f"{where}: count per job {count} exceeds the number of files {len(files)}"
        )


def _check_filenames(where: str, names) -> None:
    for name in names:
        try:
            Filename.parse(name)
        except MalformedFilename as e:
            raise SchemaError(f"{where}: {e}") from e


def validate_jobpars_dict(d: Dict[str, Any]) -> None:
    """
    Validate a job parameters document (the content of jobpars.json).

    Structure is checked against JOBPARS_SCHEMA, then the cross-field rules
    that a JSON schema does not express well:

    - exactly one of inputs / event_id / samplinginputs, and non-empty
    - auxin only alongside inputs, a non-empty subrunkey only alongside event_id
    - inputs holds a single key with merge > 0 and a non-empty file list
    - sampling and aux counts within [0, len(files)]
    - every sampling tag yields the same number of jobs
    - output templates are well-formed file names, and so are the source
      files whenever outputs are declared
    """

    if not isinstance(d, dict):
        raise SchemaError("job parameters must be a JSON object")

    try:
        jsonschema.validate(instance=d, schema=JOBPARS_SCHEMA)
    except jsonschema.ValidationError as e:
        path = ".".join(str(p) for p in e.absolute_path) or "<root>"
        raise SchemaError(f"{path}: {e.message}") from e

    tbs = d["tbs"]

    # -------------------------
    # Source-type exclusivity
    # -------------------------
    present = [k for k in SOURCE_KEYS if tbs.get(k)]
    if len(present) != 1:
        found = ", ".join(present) if present else "none"
        raise SchemaError(
            f"tbs must define exactly one of {', '.join(SOURCE_KEYS)} (found: {found})"
        )
    source = present[0]

    if tbs.get("auxin") and source != "inputs":
        raise SchemaError("tbs.auxin is only allowed together with tbs.inputs")

    # sub-run numbers are only assigned to event-id jobs
    if tbs.get("subrunkey") and source != "event_id":
        raise SchemaError("tbs.subrunkey is only allowed together with tbs.event_id")

    # -------------------------
    # Primary inputs
    # -------------------------
    if source == "inputs":
        inputs = tbs["inputs"]
        if len(inputs) != 1:
            raise SchemaError(f"tbs.inputs must have exactly one key, got {sorted(inputs)}")
        (key, (merge, files)), = inputs.items()
        _check_input_list(f"tbs.inputs.{key}", merge, files, merge=True)

    # -------------------------
    # Sampling inputs
    # -------------------------
    if source == "samplinginputs":
        counts = {}
        for tag, (count, files) in tbs["samplinginputs"].items():
            _check_input_list(f"tbs.samplinginputs.{tag}", count, files, merge=False)
            counts[tag] = njobs_for(count or len(files), len(files))
        if len(set(counts.values())) != 1:
            raise SchemaError(f"tbs.samplinginputs: inconsistent job counts {counts}")

    # -------------------------
    # Aux inputs
    # -------------------------
    for key, (count, files) in (tbs.get("auxin") or {}).items():
        _check_input_list(f"tbs.auxin.{key}", count, files, merge=False)

    # -------------------------
    # Outputs
    # -------------------------
    outfiles = tbs.get("outfiles") or {}
    _check_filenames("tbs.outfiles", outfiles.values())

    # Output sequencers are taken from the input names
    if outfiles and source == "inputs":
        (key, (_, files)), = tbs["inputs"].items()
        _check_filenames(f"tbs.inputs.{key}", files)
    if outfiles and source == "samplinginputs":
        for tag, (_, files) in tbs["samplinginputs"].items():
            _check_filenames(f"tbs.samplinginputs.{tag}", files)
