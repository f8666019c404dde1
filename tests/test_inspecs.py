import pytest

from jobtools.config import JobToolsConfig
from jobtools.errors import ConfigError
from jobtools.filename import Filename
from jobtools.inspecs import InSpecs, XROOTD_PREFIX, parse_overrides, validate_location


CE = "dts.mu2e.CeEndpoint.MDC2020.art"
PU = "dts.mu2e.Pileup.MDC2020.art"
CE_FILE = "dts.mu2e.CeEndpoint.MDC2020.001201_00000000.art"
PU_FILE = "dts.mu2e.Pileup.MDC2020.001201_00000003.art"


@pytest.mark.parametrize(
    "loc, ok",
    [
        ("tape", True),
        ("disk", True),
        ("scratch", True),
        ("dir:/data/x", True),
        ("dir:relative", False),
        ("dir", False),
        ("cloud", False),
    ],
)
def test_validate_location(loc, ok):
    assert validate_location(loc) is ok


def test_parse_overrides():
    assert parse_overrides([f"{CE}:root", f"{PU}:dir:/data/pu"], "location") == {
        CE: "root",
        PU: "dir:/data/pu",
    }
    assert parse_overrides(None, "protocol") == {}
    with pytest.raises(ConfigError, match="<dataset>:<protocol>"):
        parse_overrides(["nocolon"], "protocol")


def test_defaults_apply_to_every_dataset():
    specs = InSpecs([CE, PU], default_protocol="file", default_location="disk")
    assert specs.protocol(CE) == "file"
    assert specs.location(PU) == "disk"
    assert specs.url(CE_FILE) == Filename.parse(CE_FILE).abspathname("disk")


def test_per_dataset_settings_win():
    specs = InSpecs(
        [CE, PU],
        default_protocol="file",
        protocols={PU: "ifdh"},
        default_location="tape",
        locations={PU: "dir:/data/pu/"},
    )
    assert specs.protocol(PU) == "ifdh"
    assert specs.location(PU) == "dir:/data/pu"
    assert specs.abspathname(PU_FILE) == f"/data/pu/{PU_FILE}"
    assert specs.url(PU_FILE) == PU_FILE
    assert specs.url(CE_FILE).startswith("/pnfs/mu2e/tape/")


def test_xrootd_url():
    specs = InSpecs([CE], default_protocol="root", default_location="disk")
    path = Filename.parse(CE_FILE).abspathname("disk")
    assert specs.url(CE_FILE) == XROOTD_PREFIX + path[len("/pnfs/"):]


def test_xrootd_needs_standard_location():
    with pytest.raises(ConfigError, match="standard location"):
        InSpecs([CE], default_protocol="root", default_location="dir:/data")


def test_missing_protocol():
    with pytest.raises(ConfigError, match="protocol for dataset"):
        InSpecs([CE, PU], protocols={CE: "file"}, default_location="disk")


def test_missing_location():
    with pytest.raises(ConfigError, match="location for dataset"):
        InSpecs([CE], default_protocol="file")


@pytest.mark.parametrize(
    "kwargs",
    [
        {"default_protocol": "http", "default_location": "disk"},
        {"default_protocol": "file", "default_location": "cloud"},
        {"default_protocol": "file", "default_location": "disk", "protocols": {CE: "ftp"}},
        {"default_protocol": "file", "default_location": "disk", "locations": {CE: "dir:rel"}},
    ],
)
def test_invalid_values(kwargs):
    with pytest.raises(ConfigError, match="not a valid"):
        InSpecs([CE], **kwargs)


def test_settings_for_unknown_dataset():
    with pytest.raises(ConfigError, match="not on the dataset list"):
        InSpecs([CE], default_protocol="file", default_location="disk", protocols={PU: "file"})


def test_allowed_protocols_restrict_choices():
    with pytest.raises(ConfigError):
        InSpecs([CE], default_protocol="root", default_location="disk", allowed_protocols=["file"])


def test_no_datasets_needs_nothing():
    specs = InSpecs([])
    assert specs.datasets == []


def test_from_config_with_overrides():
    cfg = JobToolsConfig(
        default_protocol="file",
        default_location="disk",
        locations={PU: "scratch"},
    )
    specs = InSpecs.from_config(cfg, [CE, PU], default_location="tape", protocols={PU: "ifdh"})
    assert specs.location(CE) == "tape"
    assert specs.location(PU) == "scratch"
    assert specs.protocol(CE) == "file"
    assert specs.protocol(PU) == "ifdh"
