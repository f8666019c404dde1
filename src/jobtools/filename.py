"""
File and dataset names.

A file basename has six dot-separated fields:

    tier.owner.description.configuration.sequencer.extension

and the dataset it belongs to is the same name with the sequencer dropped.
Only the grammar lives here; nothing touches the filesystem.
"""

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass, replace
from typing import Dict

from jobtools.errors import MalformedFilename

_FIELD_RE = re.compile(r"[A-Za-z0-9_-]+")

FILE_FIELDS = ("tier", "owner", "description", "configuration", "sequencer", "extension")
DATASET_FIELDS = ("tier", "owner", "description", "configuration", "extension")

# Standard storage areas
LOCATION_ROOTS: Dict[str, str] = {
    "tape": "/pnfs/mu2e/tape",
    "disk": "/pnfs/mu2e/persistent/datasets",
    "scratch": "/pnfs/mu2e/scratch/datasets",
}


def standard_locations():
    return list(LOCATION_ROOTS)


def _split(name: str, fields) -> list:
    parts = name.split(".")
    if len(parts) != len(fields):
        raise MalformedFilename(name, f"expected {len(fields)} dot-separated fields, got {len(parts)}")
    for field_name, value in zip(fields, parts):
        if not _FIELD_RE.fullmatch(value):
            raise MalformedFilename(name, f"bad {field_name} field {value!r}")
    return parts


@dataclass(frozen=True)
class Dataset:
    tier: str
    owner: str
    description: str
    configuration: str
    extension: str

    @classmethod
    def parse(cls, dsname: str) -> "Dataset":
        return cls(*_split(dsname, DATASET_FIELDS))

    @property
    def dsname(self) -> str:
        return ".".join([self.tier, self.owner, self.description, self.configuration, self.extension])

    def __str__(self) -> str:
        return self.dsname


@dataclass(frozen=True)
class Filename:
    tier: str
    owner: str
    description: str
    configuration: str
    sequencer: str
    extension: str

    @classmethod
    def parse(cls, basename: str) -> "Filename":
        return cls(*_split(basename, FILE_FIELDS))

    @property
    def basename(self) -> str:
        return ".".join(
            [self.tier, self.owner, self.description, self.configuration, self.sequencer, self.extension]
        )

    @property
    def dataset(self) -> Dataset:
        return Dataset(self.tier, self.owner, self.description, self.configuration, self.extension)

    def with_sequencer(self, sequencer: str) -> "Filename":
        if not _FIELD_RE.fullmatch(sequencer or ""):
            raise MalformedFilename(self.basename, f"bad sequencer {sequencer!r}")
        return replace(self, sequencer=sequencer)

    def relpathname(self) -> str:
        """Hashed directory spread used by the standard storage areas."""
        digest = hashlib.sha256(self.basename.encode("utf-8")).hexdigest()
        return "/".join([
            self.tier, self.owner, self.description, self.configuration, self.extension,
            digest[0:2], digest[2:4], self.basename,
        ])

    def abspathname(self, location: str) -> str:
        try:
            root = LOCATION_ROOTS[location]
        except KeyError:
            raise ValueError(f"unknown standard location {location!r}") from None
        return f"{root}/{self.relpathname()}"

    def __str__(self) -> str:
        return self.basename


def with_sequencer(basename: str, sequencer: str) -> str:
    return Filename.parse(basename).with_sequencer(sequencer).basename


def dataset_name(basename: str) -> str:
    return Filename.parse(basename).dataset.dsname
