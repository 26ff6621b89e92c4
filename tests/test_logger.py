import pytest

from tsgql import log
from tsgql.logger import TsgqlLogger, get_logger


def test_get_logger_returns_shared_instance() -> None:
    assert isinstance(log, TsgqlLogger)
    assert get_logger("tsgql") is log


def test_output_goes_to_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    log.success("Generated GraphQL schema")
    log.key_value("User", "Object")

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Generated GraphQL schema" in captured.err
    assert "User: Object" in captured.err


def test_source_excerpt(capsys: pytest.CaptureFixture[str]) -> None:
    log.source_excerpt("type User = {\n  id: string\n  name string\n}", line=3, column=8)

    lines = [line.rstrip() for line in capsys.readouterr().err.splitlines() if line.strip()]
    assert lines[-3:] == ["  id: string", "  name string", "       ^"]


def test_source_excerpt_outside_source(capsys: pytest.CaptureFixture[str]) -> None:
    log.source_excerpt("type User = { id: string }", line=5, column=1)
    assert capsys.readouterr().err == ""
