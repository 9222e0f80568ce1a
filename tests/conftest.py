from __future__ import annotations

import io
from collections.abc import Iterable
from typing import Any, Callable

import pytest

from qna import Questioner
from qna.logging_config import reset_logging


@pytest.fixture(autouse=True)
def plain_console(monkeypatch: pytest.MonkeyPatch) -> None:
    # Rich honours these; captured output must stay plain and unwrapped.
    for var in ("FORCE_COLOR", "TTY_COMPATIBLE", "TTY_INTERACTIVE", "COLUMNS", "NO_COLOR"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def clean_logging() -> Iterable[None]:
    yield
    reset_logging()


def make_questioner(
    actions: Any,
    answers: Iterable[str] = (),
    **kwargs: Any,
) -> tuple[Questioner, io.StringIO]:
    out = io.StringIO()
    source = io.StringIO("".join(f"{a}\n" for a in answers))
    q = Questioner(interactions=actions, input=source, output=out, **kwargs)
    return q, out


@pytest.fixture
def run_bundle() -> Callable[..., tuple[Questioner, str]]:
    """Runs a bundle to completion with scripted answers; returns (questioner, output)."""

    def _run(actions: Any, answers: Iterable[str] = (), **kwargs: Any) -> tuple[Questioner, str]:
        q, out = make_questioner(actions, answers, **kwargs)
        q.question()
        return q, out.getvalue()

    return _run
