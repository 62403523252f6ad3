import json

from app.llm.parsing import parse_question_list, parse_study_response


def test_question_list_from_json_array():
    text = 'Here you go:\n["Who was Moses?", "What is grace?", "Why did Cain kill Abel?"]'
    parsed = parse_question_list(text, 2)
    assert parsed.kind == "structured"
    assert parsed.value == ["Who was Moses?", "What is grace?"]


def test_question_list_falls_back_to_lines():
    text = '1. "Who was the prophet Elijah?"\n- What does covenant mean?\nshort\n'
    parsed = parse_question_list(text, 5)
    assert parsed.kind == "fallback"
    assert parsed.value == ["Who was the prophet Elijah?", "What does covenant mean?"]


def test_question_list_unparseable():
    parsed = parse_question_list("", 3)
    assert parsed.kind == "unparseable"
    assert parsed.value == []
    assert not parsed.ok


def test_study_response_structured():
    payload = {
        "isRelevant": True,
        "content": {"literalAnswer": "Moses led Israel out of Egypt.", "searchTopic": "Moses"},
    }
    parsed = parse_study_response(json.dumps(payload), "Who was Moses?")
    assert parsed.kind == "structured"
    assert parsed.value.content.literal_answer.startswith("Moses")
    assert parsed.value.content.geographical_anchor.location == "Israel"


def test_study_response_embedded_json():
    payload = {"isRelevant": False, "refusalMessage": "Off topic"}
    parsed = parse_study_response("```json\n" + json.dumps(payload) + "\n```", "best pizza?")
    assert parsed.kind == "fallback"
    assert parsed.value.is_relevant is False
    assert parsed.value.refusal_message == "Off topic"


def test_study_response_synthetic_when_garbage():
    parsed = parse_study_response("x" * 800, "Who was Ruth?")
    assert parsed.kind == "unparseable"
    assert parsed.value.is_relevant is True
    assert len(parsed.value.content.literal_answer) == 500
