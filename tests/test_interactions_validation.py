from __future__ import annotations

import copy

import pytest

from qna import Questioner
from qna.core.types import ReviewScope
from qna.errors import InvalidConfigurationError
from qna.interactions import MapAction, Question, Review, Statement, count_by_kind, parse_interactions


def test_parses_each_kind_with_indexes() -> None:
    actions = parse_interactions(
        [
            {"prompt": "Name?", "parameter": "NAME"},
            {"maps": [{"parameter": "GREETING", "value": "hi"}]},
            {"statement": "Thanks."},
            {"review": "all"},
        ]
    )

    assert [type(a) for a in actions] == [Question, MapAction, Statement, Review]
    assert [a.index for a in actions] == [0, 1, 2, 3]
    assert actions[3].review is ReviewScope.ALL
    assert count_by_kind(actions) == {"question": 1, "mapping": 1, "statement": 1, "review": 1}


def test_accepts_bundle_mapping() -> None:
    actions = parse_interactions({"actions": [{"statement": "hi"}]})
    assert len(actions) == 1


def test_bundle_mapping_requires_actions() -> None:
    with pytest.raises(InvalidConfigurationError, match="does not define 'actions'"):
        parse_interactions({"questions": []})


def test_entry_without_discriminator_is_rejected() -> None:
    with pytest.raises(InvalidConfigurationError, match="Interaction 1 must define exactly one of") as info:
        parse_interactions([{"statement": "ok"}, {"parameter": "X"}])
    assert info.value.data == {"index": 1, "found": []}


def test_entry_with_two_discriminators_is_rejected() -> None:
    with pytest.raises(InvalidConfigurationError, match="Interaction 0 must define exactly one of"):
        parse_interactions([{"prompt": "X?", "parameter": "X", "statement": "also"}])


def test_question_requires_parameter() -> None:
    with pytest.raises(InvalidConfigurationError, match="Interaction 0 question does not define a 'parameter'"):
        parse_interactions([{"prompt": "X?"}])


def test_question_rejects_unknown_type() -> None:
    with pytest.raises(InvalidConfigurationError, match="Invalid parameter type 'date'"):
        parse_interactions([{"prompt": "When?", "parameter": "WHEN", "type": "date"}])


def test_map_entry_requires_exactly_one_of_source_or_value() -> None:
    with pytest.raises(InvalidConfigurationError, match="exactly one of 'source' or 'value'"):
        parse_interactions([{"maps": [{"parameter": "X", "type": "int"}]}])
    with pytest.raises(InvalidConfigurationError, match="exactly one of 'source' or 'value'"):
        parse_interactions([{"maps": [{"parameter": "X", "type": "int", "source": "1", "value": 1}]}])


def test_source_map_requires_boolean_or_numeric_type() -> None:
    with pytest.raises(InvalidConfigurationError, match="must declare a boolean or numeric 'type'"):
        parse_interactions([{"maps": [{"parameter": "X", "source": "A && B"}]}])

    (action,) = parse_interactions([{"maps": [{"parameter": "X", "source": "A && B", "type": "bool"}]}])
    assert action.maps[0].source == "A && B"


def test_review_scope_is_checked() -> None:
    with pytest.raises(InvalidConfigurationError, match="invalid review scope"):
        parse_interactions([{"review": "everything"}])


def test_default_must_be_an_option() -> None:
    with pytest.raises(InvalidConfigurationError, match="is not among the options"):
        parse_interactions([{"prompt": "Pick", "parameter": "P", "options": ["a", "b"], "default": "c"}])

    with pytest.raises(InvalidConfigurationError, match="is not among the options"):
        parse_interactions(
            [{"prompt": "Pick", "parameter": "P", "options": ["a", "b"], "multiValue": True, "default": ["a", "z"]}]
        )


def test_options_must_be_a_list() -> None:
    with pytest.raises(InvalidConfigurationError, match="'options' that is not a list"):
        parse_interactions([{"prompt": "Pick", "parameter": "P", "options": "a,b"}])


def test_camel_case_fields_and_param_type_alias() -> None:
    (q,) = parse_interactions(
        [
            {
                "prompt": "Tags?",
                "parameter": "TAGS",
                "paramType": "int",
                "multiValue": True,
                "noSkipDefined": True,
                "elseValue": "1",
                "condition": "SHOW",
            }
        ]
    )
    assert q.type == "int"
    assert q.multi_value is True
    assert q.no_skip_defined is True
    assert q.else_value == "1"


def test_flat_validation_keys_fold_into_validations() -> None:
    (q,) = parse_interactions(
        [{"prompt": "Age?", "parameter": "AGE", "type": "int", "min": 0, "validations": {"maxCount": 3}}]
    )
    assert q.validations == {"max_count": 3, "min": 0}


def test_unknown_validation_keys_are_rejected() -> None:
    with pytest.raises(InvalidConfigurationError, match="unknown validations"):
        parse_interactions([{"prompt": "Age?", "parameter": "AGE", "validations": {"between": [1, 2]}}])


def test_construction_validates_before_any_interaction() -> None:
    with pytest.raises(InvalidConfigurationError):
        Questioner(interactions=[{"review": "nope"}])


def test_caller_data_is_not_mutated() -> None:
    actions = [
        {"prompt": "Name?", "parameter": "NAME", "default": "Bob"},
        {"maps": [{"parameter": "UPPER", "value": "BOB"}]},
    ]
    snapshot = copy.deepcopy(actions)

    q = Questioner(interactions=actions, input=iter(["\n"]), output=_NullSink())
    q.question()

    assert actions == snapshot


class _NullSink:
    def write(self, text: str) -> None:
        pass
