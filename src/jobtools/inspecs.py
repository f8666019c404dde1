"""
Where input files live and how a job reads them.

Each input dataset gets a protocol and a location, either per dataset or
from a default:

    file    read the files directly by their Unix path names
    root    read the files via xrootd
    ifdh    pre-stage the files to the worker node; the job sees basenames

    tape | disk | scratch     standard storage areas
    dir:/abs/path             all files of the dataset in one directory
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional

from jobtools.config import JobToolsConfig
from jobtools.errors import ConfigError
from jobtools.filename import Filename, standard_locations

PROTO_FILE = "file"
PROTO_IFDH = "ifdh"
PROTO_ROOT = "root"
ALL_PROTOCOLS = (PROTO_FILE, PROTO_IFDH, PROTO_ROOT)

LOCATION_LOCAL = "dir"

XROOTD_PREFIX = "root://fndcadoor.fnal.gov:1094/"
PNFS_PREFIX = "/pnfs/"


def validate_location(loc: str) -> bool:
    if loc in standard_locations():
        return True
    prefix, sep, directory = loc.partition(":")
    return bool(sep) and prefix == LOCATION_LOCAL and directory.startswith("/")


def parse_overrides(items: Optional[Iterable[str]], what: str) -> Dict[str, str]:
    """['ds:value', ...] -> {ds: value}; dataset names can not contain ':'."""
    out: Dict[str, str] = {}
    for item in items or []:
        ds, sep, value = item.partition(":")
        if not sep or not ds or not value:
            raise ConfigError(f"--{what} option {item!r} does not look like <dataset>:<{what}>")
        out[ds] = value
    return out


class InSpecs:
    """
    Protocol and location for every dataset in a fixed list.

    A successfully constructed instance has complete information for all
    the datasets it was given.
    """

    def __init__(
        self,
        datasets: Iterable[str],
        *,
        default_protocol: Optional[str] = None,
        protocols: Optional[Mapping[str, str]] = None,
        default_location: Optional[str] = None,
        locations: Optional[Mapping[str, str]] = None,
        allowed_protocols: Iterable[str] = ALL_PROTOCOLS,
    ) -> None:
        self.datasets: List[str] = list(datasets)
        self.allowed_protocols = [p for p in ALL_PROTOCOLS if p in set(allowed_protocols)]

        self.default_protocol = default_protocol
        self.protocols: Dict[str, str] = dict(protocols or {})
        self.default_location = default_location.rstrip("/") if default_location else default_location
        self.locations: Dict[str, str] = {
            ds: loc.rstrip("/") for ds, loc in (locations or {}).items()
        }

        self._validate()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def from_config(
        cls,
        config: JobToolsConfig,
        datasets: Iterable[str],
        *,
        default_protocol: Optional[str] = None,
        protocols: Optional[Mapping[str, str]] = None,
        default_location: Optional[str] = None,
        locations: Optional[Mapping[str, str]] = None,
    ) -> "InSpecs":
        """Config file values, overridden by explicit (command line) ones."""
        return cls(
            datasets,
            default_protocol=default_protocol or config.default_protocol,
            protocols={**config.protocols, **(protocols or {})},
            default_location=default_location or config.default_location,
            locations={**config.locations, **(locations or {})},
        )

    def _validate(self) -> None:
        known = set(self.datasets)

        if self.default_protocol is not None and self.default_protocol not in self.allowed_protocols:
            raise ConfigError(f"default protocol {self.default_protocol!r} is not a valid protocol")
        for ds, proto in self.protocols.items():
            if proto not in self.allowed_protocols:
                raise ConfigError(f"protocol {proto!r} for {ds} is not a valid protocol")
            if ds not in known:
                raise ConfigError(f"protocol given for {ds!r}, which is not on the dataset list")

        if self.default_location is not None and not validate_location(self.default_location):
            raise ConfigError(f"default location {self.default_location!r} is not a valid location")
        for ds, loc in self.locations.items():
            if not validate_location(loc):
                raise ConfigError(f"location {loc!r} for {ds} is not a valid location")
            if ds not in known:
                raise ConfigError(f"location given for {ds!r}, which is not on the dataset list")

        for ds in self.datasets:
            if self.default_protocol is None and ds not in self.protocols:
                raise ConfigError(f"protocol for dataset {ds!r} is not set and there is no default")
            if self.default_location is None and ds not in self.locations:
                raise ConfigError(f"location for dataset {ds!r} is not set and there is no default")
            if self.protocol(ds) == PROTO_ROOT and self.location(ds) not in standard_locations():
                raise ConfigError(f"xrootd access for {ds!r} needs a standard location")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def protocol(self, dsname: str) -> str:
        proto = self.protocols.get(dsname, self.default_protocol)
        if proto is None:
            raise ConfigError(f"no protocol for dataset {dsname!r} and no default")
        return proto

    def location(self, dsname: str) -> str:
        loc = self.locations.get(dsname, self.default_location)
        if loc is None:
            raise ConfigError(f"no location for dataset {dsname!r} and no default")
        return loc

    def abspathname(self, basename: str) -> str:
        fn = Filename.parse(basename)
        loc = self.location(fn.dataset.dsname)
        prefix, sep, directory = loc.partition(":")
        if sep and prefix == LOCATION_LOCAL:
            return f"{directory}/{basename}"
        return fn.abspathname(loc)

    def url(self, basename: str) -> str:
        """How a job should refer to `basename`, given its dataset's protocol."""
        proto = self.protocol(Filename.parse(basename).dataset.dsname)
        if proto == PROTO_IFDH:
            return basename
        path = self.abspathname(basename)
        if proto == PROTO_ROOT:
            return XROOTD_PREFIX + path[len(PNFS_PREFIX):]
        return path
