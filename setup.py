from setuptools import setup, find_packages
import pathlib

# Detect layout
use_src = pathlib.Path("src/jobtools").exists()
pkg_args = {"package_dir": {"": "src"}, "packages": find_packages(where="src")} if use_src \
           else {"packages": find_packages(where=".")}

setup(
    name="job-tools",
    version="0.1.0",
    include_package_data=True,
    package_data={"jobtools": ["templates/*.j2"]},
    python_requires=">=3.9",
    install_requires=[
        "typer",
        "pydantic>=2",
        "PyYAML",
        "jinja2",
        "jsonschema",
        "pandas",
        "pyarrow",
    ],
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["jobtools = jobtools.cli:app"]},
    **pkg_args
)
