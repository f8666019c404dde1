from __future__ import annotations

from pathlib import Path
from typing import Any, List, Mapping, Optional, Tuple

from jinja2 import Environment, FileSystemLoader

from jobtools.inspecs import InSpecs
from jobtools.jobset.resolve import resolve
from jobtools.jobset.types import JobSetDescriptor
from jobtools.schemas.models import JobPlan

TEMPLATE_ROOT = Path(__file__).resolve().parents[1] / "templates"
JOB_FCL_TEMPLATE = "job.fcl.j2"


def doublequote(s: str) -> str:
    return '"' + s + '"'


def _indent(text: str) -> str:
    return "\n".join("    " + line for line in text.split("\n"))


def fcl_value(value: Any) -> str:
    """Literal FCL syntax for a setting value."""
    if value is None:
        return "@nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (list, tuple)):
        if not value:
            return "[]"
        body = ",\n".join(_indent(fcl_value(v)) for v in value)
        return "[\n" + body + "\n]"
    if isinstance(value, Mapping):
        # FCL table
        if not value:
            return "{}"
        body = "\n".join(_indent(f"{k}: {fcl_value(v)}") for k, v in value.items())
        return "{\n" + body + "\n}"
    return doublequote(str(value))


def _environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_ROOT)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["fclvalue"] = fcl_value
    return env


def job_overrides(plan: JobPlan, inspecs: Optional[InSpecs] = None) -> List[Tuple[str, Any]]:
    """
    Job settings with input file names mapped through `inspecs`.

    Without inspecs the inputs stay bare basenames.
    """
    file_keys = set(plan.inputs)
    out = []
    for key, value in plan.to_fcl_overrides():
        if inspecs is not None and key in file_keys:
            value = [inspecs.url(name) for name in value]
        out.append((key, value))
    return out


def render_job_fcl(
    jp: JobSetDescriptor,
    index: int,
    inspecs: Optional[InSpecs] = None,
) -> str:
    """Complete configuration for job `index`: the set's template plus per-job settings."""
    plan = resolve(jp, index)
    tpl = _environment().get_template(JOB_FCL_TEMPLATE)
    return tpl.render(
        fcl_template=jp.fcl_template,
        jobname=jp.jobname,
        plan=plan,
        overrides=job_overrides(plan, inspecs),
    )
