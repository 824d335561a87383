import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13"]

# bcrypt and the PostgreSQL driver ship compiled wheels; reinstall them per
# interpreter so a cached build for another Python is never reused.
_C_EXT_PACKAGES = ["psycopg2-binary", "bcrypt"]


def _install(session: nox.Session) -> None:
    session.run("poetry", "install", "--with", "test", "--all-extras", external=True)
    session.run("pip", "install", "--force-reinstall", "--no-cache-dir", *_C_EXT_PACKAGES)


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run the whole suite against the in-memory providers."""
    _install(session)
    session.run("pytest", *session.posargs)


@nox.session(python=PYTHON_VERSIONS[-1])
@nox.parametrize("layer", ["domain", "application", "integration"])
def layer(session: nox.Session, layer: str) -> None:
    """Run one layer of the suite, selected by its marker."""
    _install(session)
    session.run("pytest", "-m", layer, *session.posargs)


@nox.session(python=PYTHON_VERSIONS[-1])
def postgres(session: nox.Session) -> None:
    """Run the suite against PostgreSQL; needs DATABASE_URL to point at a disposable database."""
    _install(session)
    session.run("pytest", "--env", "production", *session.posargs)
