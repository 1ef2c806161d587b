import os
from pathlib import Path
import nox

# Reuse existing virtualenvs for faster runs
nox.options.reuse_existing_virtualenvs = True
# Default sessions when running "nox"
nox.options.sessions = ["lint", "unit", "integration"]

# Common dependencies for test sessions
COMMON_DEPS = ["-e", ".[test]"]

# Environment variables to propagate
PASSED_ENV_VARS = [
    "ENVIRONMENT",
    "LOG_LEVEL",
    "STRICT_EVENT_RESOLUTION",
    "MERGE_NESTED_SCANS",
    "DUAL_WRITE_RETRIES",
]


def _set_env(session):
    """
    Propagate test-related environment variables into the session.
    Tests always run against the in-memory store.
    """
    session.env["PYTHONPATH"] = str(Path.cwd())
    session.env["STORE_BACKEND"] = "memory"
    for var in PASSED_ENV_VARS:
        if var in os.environ:
            session.env[var] = os.environ[var]


@nox.session(name="lint")
def lint(session):
    """
    Code formatting, linting, and type-checks:
      - isort
      - black
      - flake8
      - mypy
    """
    _set_env(session)
    session.install("isort", "black", "flake8", "mypy")
    session.run("isort", "scanbridge/", "tests/")
    session.run("black", "scanbridge/", "tests/")
    session.run("flake8", "scanbridge/", "tests/")
    session.run("mypy", "scanbridge/")


@nox.session(name="unit")
def unit(session):
    """
    Run unit tests (services, store, core helpers, middleware, CLI).
    Usage:
      nox -s unit
      nox -s unit -- tests/unit/test_services/test_recorder.py
    """
    _set_env(session)
    session.install(*COMMON_DEPS)
    tests = session.posargs or ["tests/unit"]
    htmlcov_path = ".nox/htmlcov"
    session.run(
        "pytest",
        *tests,
        "--maxfail=1",
        "-vv",
        "--tb=short",
        "--cov=scanbridge",
        "--cov-report=term-missing",
        "--cov-report=html:" + htmlcov_path,
        "--cov-report=xml",
        "--cov-fail-under=80",
    )


@nox.session(name="integration")
def integration(session):
    """
    Run the API tests through the FastAPI test client.
    Usage:
      nox -s integration
      nox -s integration -- tests/integration/test_api/test_scans.py
    """
    _set_env(session)
    session.install(*COMMON_DEPS)
    tests = session.posargs or ["tests/integration"]
    session.run(
        "pytest",
        *tests,
        "--maxfail=1",
        "-vv",
        "--tb=short",
    )
