from __future__ import annotations

import pytest

from qna.core.types import ANSWERED, CONDITION_SKIPPED, DEFINED_SKIPPED
from qna.engine.store import ParameterStore
from qna.interactions import parse_interactions


def _question(parameter: str = "X", **extra: object):
    (q,) = parse_interactions([{"prompt": f"{parameter}?", "parameter": parameter, **extra}])
    return q


def test_resolved_values_take_precedence_over_initial() -> None:
    store = ParameterStore({"X": "initial", "Y": 1})
    store.record_result(_question("X"), "resolved", ANSWERED)

    assert store.get("X") == "resolved"
    assert store.get("Y") == 1
    assert store.evaluation_context() == {"X": "resolved", "Y": 1}


def test_falsy_values_count_as_resolved() -> None:
    store = ParameterStore({"FLAG": True})
    store.record_result(_question("FLAG", type="bool"), False, ANSWERED)
    store.record_result(_question("COUNT", type="int"), 0, ANSWERED)

    assert store.get("FLAG") is False
    assert store.has("COUNT")
    assert store.evaluation_context()["COUNT"] == 0


def test_has_covers_initial_and_resolved() -> None:
    store = ParameterStore({"INIT": None})
    assert store.has("INIT")
    assert not store.has_result("INIT")
    assert not store.has("OTHER")


def test_recording_again_supersedes() -> None:
    store = ParameterStore()
    q = _question("X")
    store.record_result(q, "one", ANSWERED)
    store.record_result(q, "two", DEFINED_SKIPPED)

    results = store.all_results()
    assert len(results) == 1
    assert results[0].value == "two"
    assert results[0].disposition is DEFINED_SKIPPED
    assert results[0].action.disposition is DEFINED_SKIPPED


def test_result_snapshot_is_independent_of_action() -> None:
    store = ParameterStore()
    q = _question("X", handling={"route": "billing"})
    store.record_result(q, "v", CONDITION_SKIPPED)
    q.prompt = "changed"

    result = store.get_result("X")
    assert result is not None
    assert result.action.prompt == "X?"
    assert result.handling == {"route": "billing"}
    assert result.to_dict()["handling"] == {"route": "billing"}


def test_remove_only_named_parameters() -> None:
    store = ParameterStore()
    for name in ("A", "B", "C"):
        store.record_result(_question(name), name.lower(), ANSWERED)

    assert store.remove(["A", "C", "Z"]) == ["A", "C"]
    assert store.all_values() == {"B": "b"}


def test_queries_return_copies() -> None:
    store = ParameterStore({"LIST": [1]})
    store.record_result(_question("TAGS", multiValue=True), ["a"], ANSWERED)

    store.get("TAGS").append("b")
    store.get("LIST").append(2)
    store.all_values()["TAGS"].append("c")

    assert store.get("TAGS") == ["a"]
    assert store.get("LIST") == [1]


def test_all_values_excludes_unused_initial_parameters() -> None:
    store = ParameterStore({"UNUSED": 1})
    store.record_result(_question("X"), "x", ANSWERED)
    assert store.all_values() == {"X": "x"}


def test_results_are_named_by_their_action() -> None:
    store = ParameterStore()
    (review,) = parse_interactions([{"review": "questions", "parameter": "CHECKED"}])

    result = store.record_result(review, True, ANSWERED)

    assert result.parameter == "CHECKED"
    assert store.all_values() == {"CHECKED": True}


def test_action_without_parameter_cannot_be_recorded() -> None:
    store = ParameterStore()
    (review,) = parse_interactions([{"review": "all"}])

    with pytest.raises(ValueError, match="without a parameter name"):
        store.record_result(review, True, ANSWERED)
    with pytest.raises(TypeError):
        store.record_result(review, True, ANSWERED, parameter="OTHER")
