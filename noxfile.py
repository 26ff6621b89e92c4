import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13"]
EXAMPLE_SCHEMA = "examples/basic/schema.ts"

nox.options.default_venv_backend = "uv"
nox.options.sessions = ["tests"]


def sync(session: nox.Session) -> None:
    session.run_install(
        "uv",
        "sync",
        env={"UV_PROJECT_ENVIRONMENT": session.virtualenv.location},
    )


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    sync(session)
    session.run(
        "pytest",
        "--cov=tsgql",
        "--cov-report=term-missing",
        "--cov-fail-under=90",
        *session.posargs,
    )


@nox.session(python=PYTHON_VERSIONS[-1])
def example(session: nox.Session) -> None:
    """Generate the SDL of the bundled example schema."""
    sync(session)
    session.run("tsgql", "generate", "--schema", EXAMPLE_SCHEMA, *session.posargs)
