import pytest

from jobtools.errors import ConfigError
from jobtools.filename import Filename
from jobtools.inspecs import InSpecs, XROOTD_PREFIX
from jobtools.jobset.factory import descriptor_from_dict
from jobtools.jobset.render import fcl_value, job_overrides, render_job_fcl
from jobtools.jobset.resolve import input_datasets, resolve


TEMPLATE = '#include "Production/JobConfig/digitize/OnSpill.fcl"\n'


def _art(i, desc="CeEndpoint"):
    return f"dts.mu2e.{desc}.MDC2020.001201_{i:08d}.art"


def _jp():
    return descriptor_from_dict(
        {
            "jobname": "cnf.mu2e.CeEndpointDigi.MDC2020.0.tar",
            "tbs": {
                "inputs": {"source.fileNames": [2, [_art(i) for i in range(4)]]},
                "outfiles": {"outputs.out.fileName": "dig.mu2e.CeEndpointDigi.MDC2020.SEQ.art"},
                "seed": "services.SeedService.baseSeed",
            },
        },
        fcl_template=TEMPLATE,
    )


@pytest.mark.parametrize(
    "value, expected",
    [
        (True, "true"),
        (False, "false"),
        (7, "7"),
        (2.5, "2.5"),
        ("a.art", '"a.art"'),
        ([], "[]"),
        (["a", "b"], '[\n    "a",\n    "b"\n]'),
        (None, "@nil"),
        ({}, "{}"),
        ({"a": 1, "b": "x"}, '{\n    a: 1\n    b: "x"\n}'),
        ({"l": [1, 2]}, "{\n    l: [\n        1,\n        2\n    ]\n}"),
    ],
)
def test_fcl_value(value, expected):
    assert fcl_value(value) == expected


def test_render_bare():
    text = render_job_fcl(_jp(), 1)

    assert text.startswith(TEMPLATE.strip())
    assert "index 1, sequencer 001201_00000002" in text
    assert f'source.fileNames: [\n    "{_art(2)}",\n    "{_art(3)}"\n]' in text
    assert 'outputs.out.fileName: "dig.mu2e.CeEndpointDigi.MDC2020.001201_00000002.art"' in text
    assert "services.SeedService.baseSeed: 2" in text
    assert text.endswith("\n")


def test_render_settings_order():
    text = render_job_fcl(_jp(), 0)
    assert text.index("source.fileNames:") < text.index("outputs.out.fileName:")
    assert text.index("outputs.out.fileName:") < text.index("services.SeedService.baseSeed:")


def test_render_with_file_protocol():
    jp = _jp()
    specs = InSpecs(input_datasets(jp), default_protocol="file", default_location="disk")
    text = render_job_fcl(jp, 0, specs)
    expected = Filename.parse(_art(0)).abspathname("disk")
    assert expected.startswith("/pnfs/mu2e/persistent/datasets/dts/mu2e/CeEndpoint/MDC2020/art/")
    assert f'"{expected}"' in text


def test_render_with_root_protocol():
    jp = _jp()
    specs = InSpecs(input_datasets(jp), default_protocol="root", default_location="tape")
    overrides = dict(job_overrides(resolve(jp, 0), specs))
    files = overrides["source.fileNames"]
    assert all(f.startswith(XROOTD_PREFIX + "mu2e/tape/dts/") for f in files)
    # outputs are never mapped
    assert overrides["outputs.out.fileName"].startswith("dig.mu2e.")


def test_render_with_ifdh_keeps_basenames():
    jp = _jp()
    specs = InSpecs(input_datasets(jp), default_protocol="ifdh", default_location="scratch")
    overrides = dict(job_overrides(resolve(jp, 1), specs))
    assert overrides["source.fileNames"] == [_art(2), _art(3)]


def test_render_with_local_directory():
    jp = _jp()
    ds = input_datasets(jp)[0]
    specs = InSpecs([ds], default_protocol="file", locations={ds: "dir:/data/ce/"})
    overrides = dict(job_overrides(resolve(jp, 0), specs))
    assert overrides["source.fileNames"] == [f"/data/ce/{_art(0)}", f"/data/ce/{_art(1)}"]


def test_render_without_template():
    jp = descriptor_from_dict(
        {"tbs": {"event_id": {"source.firstRun": 1202, "source.maxEvents": 100}}}
    )
    text = render_job_fcl(jp, 3)
    assert "#include" not in text
    assert "job set: index 3, sequencer 001202_00000003" in text
    assert "source.firstSubRun: 3" in text
    assert "source.maxEvents: 100" in text


def test_render_incomplete_inspecs():
    jp = _jp()
    with pytest.raises(ConfigError):
        InSpecs(input_datasets(jp), default_protocol="file")


def test_render_table_setting():
    jp = descriptor_from_dict(
        {"tbs": {"event_id": {"source.firstRun": 1202, "physics.producers.gen": {"module_type": "EventGenerator"}}}}
    )
    text = render_job_fcl(jp, 0)
    assert 'physics.producers.gen: {\n    module_type: "EventGenerator"\n}' in text
    assert "{'module_type'" not in text
