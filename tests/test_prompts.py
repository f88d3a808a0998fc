import json

from numberting_match.models import MatchRequest
from numberting_match.prompts import (
    EVALUATION_QUESTIONS,
    RESPONSE_SCHEMA,
    build_payload,
    build_system_prompt,
    build_user_query,
)


def _request(**overrides):
    data = {
        "userAnswers": ["친구와 밥 먹을 때", "산책", "배려심 있는 사람"],
        "candidates": [
            {"id": "A1", "q1": "조용한 카페", "q2": "운동", "q3": "정직한 사람"},
            {"id": "B2", "q1": "여행", "q2": "잠자기", "q3": "유머 있는 사람"},
        ],
        "userOptionsCount": 2,
        "AI_QUESTIONS": ["편한 순간?", "스트레스 해소?", "좋은 사람?"],
    }
    data.update(overrides)
    return MatchRequest.model_validate(data)


def test_system_prompt_embeds_fixed_questions_and_count():
    prompt = build_system_prompt(3)
    for q in EVALUATION_QUESTIONS:
        assert q in prompt
    assert "(3명)" in prompt


def test_system_prompt_ignores_caller_questions():
    req = _request(AI_QUESTIONS=["caller q1", "caller q2", "caller q3"])
    payload = build_payload(req)
    system = payload["systemInstruction"]["parts"][0]["text"]
    assert "caller q1" not in system


def test_user_query_pairs_questions_with_answers():
    query = build_user_query(_request())
    assert "- Q1(편한 순간?): 친구와 밥 먹을 때" in query
    assert "- Q2(스트레스 해소?): 산책" in query
    assert "- Q3(좋은 사람?): 배려심 있는 사람" in query
    assert "일치율이 가장 높은 2명" in query


def test_user_query_lists_candidates_as_json():
    query = build_user_query(_request())
    start = query.index("[\n")
    end = query.index("\n]", start) + 2
    listed = json.loads(query[start:end])
    assert listed == [
        {"id": "A1", "q1": "조용한 카페", "q2": "운동", "q3": "정직한 사람"},
        {"id": "B2", "q1": "여행", "q2": "잠자기", "q3": "유머 있는 사람"},
    ]
    # Korean text is sent as-is, not \u-escaped
    assert "\\u" not in query


def test_response_schema_requires_all_fields():
    assert RESPONSE_SCHEMA["type"] == "ARRAY"
    item = RESPONSE_SCHEMA["items"]
    assert item["type"] == "OBJECT"
    assert item["required"] == ["id", "matchScore", "matchReason"]
    assert item["properties"]["matchScore"] == {"type": "NUMBER"}


def test_payload_structure():
    payload = build_payload(_request())
    assert payload["contents"][0]["parts"][0]["text"] == build_user_query(_request())
    assert payload["generationConfig"] == {
        "responseMimeType": "application/json",
        "responseSchema": RESPONSE_SCHEMA,
    }
