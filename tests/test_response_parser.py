import json

import pytest

from core.domain import GlossaryTerm
from core.exceptions import ParseError
from services.response_parser import (
    FALLBACK_NOTE, UNSIMPLIFIED_PLACEHOLDER, extract_json_object, parse_simplification
)

VALID = {
    "simplifiedText": "You must apply before 31 March.\n\nThe office is in Pune.",
    "glossary": [
        {"term": "31 March", "definition": "The last day to apply."},
        {"term": "Tehsildar", "definition": "The officer in charge of the tehsil."},
    ],
}


def test_plain_json():
    result = parse_simplification(json.dumps(VALID))

    assert result.simplified_text == VALID["simplifiedText"]
    assert result.glossary == [
        GlossaryTerm("31 March", "The last day to apply."),
        GlossaryTerm("Tehsildar", "The officer in charge of the tehsil."),
    ]


@pytest.mark.parametrize("raw", [
    "```json\n" + json.dumps(VALID) + "\n```",
    "```\n" + json.dumps(VALID) + "\n```",
    "Here is the simplified document:\n" + json.dumps(VALID) + "\nHope this helps!",
    "\ufeff" + json.dumps(VALID),
    "\n\n   " + json.dumps(VALID, indent=2) + "   \n",
])
def test_wrapped_json_is_recovered(raw):
    result = parse_simplification(raw)

    assert result.simplified_text == VALID["simplifiedText"]
    assert len(result.glossary) == 2


def test_regex_recovers_simplified_text_from_broken_json():
    raw = '{"simplifiedText": "Pay the \\"fee\\" by Monday.\\nThen wait.", "glossary": [{"term": "fee", '

    data = extract_json_object(raw)

    assert data == {"simplifiedText": 'Pay the "fee" by Monday.\nThen wait.', "glossary": []}


def test_garbage_falls_back_to_raw_text_with_note():
    raw = "I'm sorry, I cannot help with that."

    result = parse_simplification(raw)

    assert result.simplified_text == raw
    assert result.glossary == [FALLBACK_NOTE]


def test_empty_response_uses_placeholder():
    result = parse_simplification("")

    assert result.simplified_text == UNSIMPLIFIED_PLACEHOLDER
    assert result.glossary == [FALLBACK_NOTE]


def test_strict_mode_raises_with_excerpt():
    raw = "x" * 500

    with pytest.raises(ParseError) as exc_info:
        parse_simplification(raw, strict=True)

    assert exc_info.value.details == "x" * 200
    assert exc_info.value.to_payload()["details"] == "x" * 200
    assert exc_info.value.status_code == 500


def test_missing_fields_are_normalized():
    raw = json.dumps({
        "glossary": [
            {"term": "", "definition": "dropped"},
            {"definition": "no term"},
            {"term": "Section 4", "definition": 4},
            "not an object",
        ]
    })

    result = parse_simplification(raw)

    assert result.simplified_text == UNSIMPLIFIED_PLACEHOLDER
    assert result.glossary == [GlossaryTerm("Section 4", "4")]


def test_non_list_glossary_becomes_empty():
    result = parse_simplification(json.dumps({"simplifiedText": "Short text.", "glossary": "none"}))

    assert result.simplified_text == "Short text."
    assert result.glossary == []


def test_json_array_is_not_accepted_as_result():
    result = parse_simplification('[1, 2, 3]')

    assert result.glossary == [FALLBACK_NOTE]
