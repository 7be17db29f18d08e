"""RunQueryUseCase: result ceiling and lazy row pulling."""

from __future__ import annotations

import itertools
from typing import Any, Iterator, Mapping

from repo_graph.services.adapter import RepositoryGraphAdapter
from repo_graph.services.run_query import RunQueryUseCase


class _CountingEngine:
    def __init__(self) -> None:
        self.produced = 0
        self.calls: list[tuple[Any, str, dict[str, Any]]] = []

    def execute(
        self, adapter: Any, query: str, arguments: Mapping[str, Any]
    ) -> Iterator[dict[str, Any]]:
        self.calls.append((adapter, query, dict(arguments)))
        for n in itertools.count():
            self.produced += 1
            yield {"n": n}


def _use_case(remote, engine, max_results: int = 10) -> RunQueryUseCase:
    return RunQueryUseCase(engine, RepositoryGraphAdapter(remote), max_results=max_results)


def test_rows_capped_at_max_results(remote) -> None:
    engine = _CountingEngine()
    rows = _use_case(remote, engine, max_results=3).execute("{ q }", {"language": "go"})

    assert rows == [{"n": 0}, {"n": 1}, {"n": 2}]
    assert engine.produced == 3
    _, query, arguments = engine.calls[0]
    assert query == "{ q }"
    assert arguments == {"language": "go"}


def test_limit_only_lowers_the_ceiling(remote) -> None:
    engine = _CountingEngine()
    use_case = _use_case(remote, engine, max_results=4)

    assert len(use_case.execute("{ q }", limit=2)) == 2
    assert len(use_case.execute("{ q }", limit=50)) == 4


def test_stream_pulls_rows_on_demand(remote) -> None:
    engine = _CountingEngine()
    stream = _use_case(remote, engine).stream("{ q }")
    assert engine.produced == 0

    next(stream)
    assert engine.produced == 1


def test_engine_receives_the_adapter(remote) -> None:
    engine = _CountingEngine()
    _use_case(remote, engine).execute("{ q }", limit=1)

    adapter = engine.calls[0][0]
    assert isinstance(adapter, RepositoryGraphAdapter)
