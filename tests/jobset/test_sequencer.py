import pytest

from jobtools.errors import (
    FileNotAPrimaryInput,
    LookupFailure,
    MalformedSequencer,
    MissingRunNumber,
    SequencerMismatch,
    SequencerNotFound,
)
from jobtools.jobset.factory import descriptor_from_dict
from jobtools.jobset.resolve import index_from_sequencer, index_from_source_file, njobs
from jobtools.jobset.sequencer import decode, encode


def _art(i, run=1201):
    return f"dts.mu2e.CeEndpoint.MDC2020.{run:06d}_{i:08d}.art"


FILES = [_art(i) for i in range(10)]


def _file_set(merge=3, files=FILES):
    return descriptor_from_dict({
        "tbs": {
            "inputs": {"source.fileNames": [merge, list(files)]},
            "outfiles": {"outputs.out.fileName": "dig.mu2e.CeEndpointDigi.MDC2020.SEQ.art"},
        }
    })


def _event_set(run=1202):
    return descriptor_from_dict({"tbs": {"event_id": {"source.firstRun": run}}})


def test_encode_file_set():
    jp = _file_set()
    assert encode(jp, 0) == "001201_00000000"
    assert encode(jp, 3) == "001201_00000009"


def test_round_trip_finite_set():
    jp = _file_set()
    for i in range(njobs(jp)):
        assert decode(jp, encode(jp, i)) == i


def test_round_trip_with_unsorted_inputs():
    shuffled = [FILES[i] for i in (4, 1, 7, 0, 9, 2, 5, 8, 3, 6)]
    jp = _file_set(merge=2, files=shuffled)
    assert encode(jp, 0) == "001201_00000001"
    for i in range(njobs(jp)):
        assert index_from_sequencer(jp, encode(jp, i)) == i


def test_unknown_sequencer_in_finite_set():
    jp = _file_set()
    with pytest.raises(SequencerNotFound) as e:
        decode(jp, "001201_00000001")
    assert e.value.value == "001201_00000001"


def test_encode_event_set():
    jp = _event_set(run=1202)
    assert encode(jp, 7) == "001202_00000007"
    assert decode(jp, "001202_00000007") == 7


def test_malformed_sequencer():
    jp = _event_set()
    with pytest.raises(MalformedSequencer):
        decode(jp, "001202-7")
    with pytest.raises(MalformedSequencer):
        decode(jp, "001202_")
    with pytest.raises(MalformedSequencer) as e:
        decode(jp, "001202_\u00b2")
    assert e.value.value == "001202_\u00b2"


def test_sequencer_from_another_run():
    jp = _event_set(run=1202)
    with pytest.raises(SequencerMismatch):
        decode(jp, "001203_00000007")


def test_sequencer_without_padding_does_not_round_trip():
    jp = _event_set(run=1202)
    with pytest.raises(SequencerMismatch):
        decode(jp, "001202_7")


def test_missing_run_number():
    jp = descriptor_from_dict({"tbs": {"event_id": {"source.maxEvents": 5}}})
    with pytest.raises(MissingRunNumber):
        encode(jp, 0)


def test_index_from_source_file():
    jp = _file_set(merge=3)
    assert index_from_source_file(jp, FILES[0]) == 0
    assert index_from_source_file(jp, FILES[5]) == 1
    assert index_from_source_file(jp, FILES[9]) == 3
    assert index_from_source_file(jp, "/pnfs/somewhere/" + FILES[4]) == 1


def test_source_file_not_an_input():
    jp = _file_set()
    with pytest.raises(FileNotAPrimaryInput) as e:
        index_from_source_file(jp, _art(99))
    assert e.value.value == _art(99)


def test_source_file_on_event_set():
    with pytest.raises(FileNotAPrimaryInput):
        index_from_source_file(_event_set(), _art(0))


def test_lookup_failures_share_a_base():
    for cls in (SequencerNotFound, MalformedSequencer, SequencerMismatch, FileNotAPrimaryInput):
        assert issubclass(cls, LookupFailure)
        assert issubclass(cls, LookupError)
