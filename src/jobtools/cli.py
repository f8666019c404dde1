from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

import typer

from jobtools.config import configure_logging, load_config
from jobtools.data.io import frame_to_file, jsonl_append, plans_to_frame
from jobtools.errors import JobToolsError
from jobtools.inspecs import InSpecs, parse_overrides
from jobtools.jobset import archive
from jobtools.jobset.render import render_job_fcl
from jobtools.jobset.resolve import (
    index_from_sequencer,
    index_from_source_file,
    input_datasets,
    njobs,
    output_datasets,
    resolve,
    summarize,
)

app = typer.Typer(help="Query and materialize jobs of a job-set archive")


# -----------------------------
# Shared helpers
# -----------------------------

_state = {"config": None}


@app.callback()
def main(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="jobtools.yaml to use"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level"),
):
    try:
        cfg = load_config(config)
    except JobToolsError as e:
        _fail(e)
    _state["config"] = cfg
    configure_logging("DEBUG" if verbose else cfg.log_level)


def _fail(e: Exception):
    typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _load(jobset: Path):
    try:
        return archive.load(jobset)
    except JobToolsError as e:
        _fail(e)


def _echo_json(obj) -> None:
    typer.echo(json.dumps(obj, indent=2))


# -----------------------------
# Whole-set queries
# -----------------------------

@app.command("njobs")
def njobs_cmd(jobset: Path = typer.Argument(..., help="Job-set archive")):
    """Number of jobs in the set (0 = unlimited)."""
    typer.echo(njobs(_load(jobset)))


@app.command()
def info(
    jobset: Path = typer.Argument(..., help="Job-set archive"),
    jobpars: bool = typer.Option(False, "--jobpars", help="Print the stored job parameters instead"),
):
    """Summary of the job set as JSON."""
    jp = _load(jobset)
    if jobpars:
        _echo_json(jp.raw)
        return
    try:
        _echo_json(summarize(jp).model_dump())
    except JobToolsError as e:
        _fail(e)


@app.command("input-datasets")
def input_datasets_cmd(jobset: Path = typer.Argument(..., help="Job-set archive")):
    """Datasets read by any job of the set, primary or auxiliary."""
    jp = _load(jobset)
    try:
        names = input_datasets(jp)
    except JobToolsError as e:
        _fail(e)
    for ds in names:
        typer.echo(ds)


@app.command("output-datasets")
def output_datasets_cmd(jobset: Path = typer.Argument(..., help="Job-set archive")):
    """Datasets written by the jobs of the set."""
    jp = _load(jobset)
    try:
        names = output_datasets(jp)
    except JobToolsError as e:
        _fail(e)
    for ds in names:
        typer.echo(ds)


# -----------------------------
# Single-job queries
# -----------------------------

@app.command()
def plan(
    jobset: Path = typer.Argument(..., help="Job-set archive"),
    index: int = typer.Option(..., "--index", "-i", help="Zero-based job index"),
    out_jsonl: Optional[Path] = typer.Option(None, "--out-jsonl", help="Append the plan here"),
):
    """Inputs, outputs and settings of one job as JSON."""
    jp = _load(jobset)
    try:
        rec = resolve(jp, index).model_dump()
    except JobToolsError as e:
        _fail(e)
    if out_jsonl:
        jsonl_append(out_jsonl, rec)
        typer.secho(f"Appended plan {index} to {out_jsonl}", fg=typer.colors.GREEN)
    else:
        _echo_json(rec)


@app.command()
def sequencer(
    jobset: Path = typer.Argument(..., help="Job-set archive"),
    index: int = typer.Option(..., "--index", "-i", help="Zero-based job index"),
):
    """Sequencer of one job."""
    jp = _load(jobset)
    try:
        seq = resolve(jp, index).sequencer
    except JobToolsError as e:
        _fail(e)
    if seq is None:
        _fail(JobToolsError(f"job {index} has no sequencer"))
    typer.echo(seq)


@app.command()
def index(
    jobset: Path = typer.Argument(..., help="Job-set archive"),
    seq: Optional[str] = typer.Option(None, "--sequencer", "-s", help="Output sequencer"),
    source: Optional[str] = typer.Option(None, "--source", help="Primary input file"),
):
    """Find the job index from a sequencer or a primary input file."""
    if (seq is None) == (source is None):
        raise typer.BadParameter("give exactly one of --sequencer or --source")
    jp = _load(jobset)
    try:
        if seq is not None:
            idx = index_from_sequencer(jp, seq)
        else:
            idx = index_from_source_file(jp, source)
    except JobToolsError as e:
        _fail(e)
    typer.echo(idx)


@app.command()
def fcl(
    jobset: Path = typer.Argument(..., help="Job-set archive"),
    index: int = typer.Option(..., "--index", "-i", help="Zero-based job index"),
    default_protocol: Optional[str] = typer.Option(None, "--default-protocol", help="file | root | ifdh"),
    protocol: List[str] = typer.Option(None, "--protocol", help="<dataset>:<protocol> (repeatable)"),
    default_location: Optional[str] = typer.Option(None, "--default-location", help="tape | disk | scratch | dir:/path"),
    location: List[str] = typer.Option(None, "--location", help="<dataset>:<location> (repeatable)"),
    bare: bool = typer.Option(False, "--bare", help="Keep input basenames, skip path resolution"),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Write here instead of stdout"),
):
    """Render the complete configuration of one job."""
    jp = _load(jobset)
    try:
        specs = None
        if not bare:
            specs = InSpecs.from_config(
                _state["config"] or load_config(),
                input_datasets(jp),
                default_protocol=default_protocol,
                protocols=parse_overrides(protocol, "protocol"),
                default_location=default_location,
                locations=parse_overrides(location, "location"),
            )
        text = render_job_fcl(jp, index, specs)
    except JobToolsError as e:
        _fail(e)

    if out:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(text, encoding="utf-8")
        typer.secho(f"Wrote {out}", fg=typer.colors.GREEN)
    else:
        typer.echo(text, nl=False)


# -----------------------------
# Archive handling + export
# -----------------------------

@app.command()
def export(
    jobset: Path = typer.Argument(..., help="Job-set archive"),
    out: Path = typer.Option(Path("jobs.csv"), "--out", "-o", help="Output .csv or .parquet"),
    first: int = typer.Option(0, "--first", help="First index"),
    count: int = typer.Option(0, "--count", help="Number of jobs (0 = all, finite sets only)"),
):
    """Tabulate the plans of many jobs."""
    jp = _load(jobset)
    indices = range(first, first + count) if count else None
    if indices is None and first and njobs(jp):
        indices = range(first, njobs(jp))
    try:
        df = plans_to_frame(jp, indices)
    except (JobToolsError, ValueError) as e:
        _fail(e)
    frame_to_file(df, out)
    typer.secho(f"Wrote {out} ({len(df)} rows)", fg=typer.colors.GREEN)


@app.command()
def pack(
    jobpars: Path = typer.Argument(..., help="jobpars.json to embed"),
    template: Path = typer.Argument(..., help="FCL template for the job set"),
    out: Path = typer.Option(..., "--out", "-o", help="Archive to write"),
    code: Optional[Path] = typer.Option(None, "--code", help="Code tarball to embed"),
):
    """Build a job-set archive from its parts."""
    try:
        doc = json.loads(jobpars.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        _fail(e)
    try:
        path = archive.pack(out, doc, template.read_text(encoding="utf-8"), code=code)
    except JobToolsError as e:
        _fail(e)
    typer.secho(f"Wrote {path}", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
