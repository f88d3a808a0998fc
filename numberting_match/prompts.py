# numberting_match/prompts.py
from __future__ import annotations

import json
from typing import Any, Dict

from .models import MatchRequest

# The three survey questions the evaluator scores against. These are fixed
# for the event and are not taken from the request.
EVALUATION_QUESTIONS = (
    "누구와 함께 있을때, 가장 편하다고 느끼는 순간은 언제인가요?",
    "스트레스를 받을 때, 주로 어떤 방식으로 풀거나 대처하나요?",
    "당신이 생각하는 '좋은 사람'은 어떤 사람인가요?",
)

RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "id": {"type": "STRING"},
            "matchScore": {"type": "NUMBER"},
            "matchReason": {"type": "STRING"},
        },
        "required": ["id", "matchScore", "matchReason"],
    },
}


def build_system_prompt(options_count: int) -> str:
    questions = "\n".join(f"{i}.{q}" for i, q in enumerate(EVALUATION_QUESTIONS, start=1))
    return f"""당신은 '번호팅' 이벤트의 매칭 AI입니다.
참가자(뽑는 사람) 1명의 답변 3가지와, 다수의 후보자(번호 주인)들의 답변 3가지를 받게 됩니다.
심리학적으로 선정된 아래 3가지의 질문에 대한 대답을 바탕으로, 참가자와 후보자 간의 '일치율(matchScore)'을 평가해주세요.
질문은 다음과 같습니다: 
{questions}
각 후보자가 참가자와 얼마나 잘 맞는지 0%에서 100% 사이의 '일치율(matchScore)'로 평가하고, 왜 그렇게 생각하는지 '매칭 이유(matchReason)'를 2~3줄로 요약해주세요.
결과는 반드시 JSON 배열 형식으로만 출력해야 합니다.
참가자가 요청한 인원수({options_count}명)만큼 *가장 일치율이 높은 순서대로* 정렬하여 반환해주세요."""


def build_user_query(request: MatchRequest) -> str:
    """
    Participant answers paired with the caller's question text, followed by
    the candidate list as pretty-printed JSON (id, q1, q2, q3 only).
    """
    q = request.AI_QUESTIONS
    a = request.userAnswers
    candidates = json.dumps(
        [c.model_dump(include={"id", "q1", "q2", "q3"}) for c in request.candidates],
        indent=2,
        ensure_ascii=False,
    )
    n = request.userOptionsCount

    return f"""
# 참가자(뽑는 사람)의 답변:
- Q1({q[0]}): {a[0]}
- Q2({q[1]}): {a[1]}
- Q3({q[2]}): {a[2]}

# 후보자(번호 주인) 목록:
{candidates}

위 참가자의 답변과 각 후보자의 답변 3가지를 비교 분석하여, 일치율이 가장 높은 {n}명을 JSON 배열 형식으로 반환해주세요.
필수 JSON 형식: [{{"id": "후보자ID", "matchScore": 85, "matchReason": "두 사람 모두... 가치가 일치합니다."}}]
형식은 지키되, 형식 외에서 답변 텍스트에 "후보자 ID"가 직접적으로 노출되지 않도록 주의하세요.
"""


def build_payload(request: MatchRequest) -> Dict[str, Any]:
    """Request body for Gemini's generateContent endpoint."""
    return {
        "contents": [{"parts": [{"text": build_user_query(request)}]}],
        "systemInstruction": {"parts": [{"text": build_system_prompt(request.userOptionsCount)}]},
        "generationConfig": {
            "responseMimeType": "application/json",
            "responseSchema": RESPONSE_SCHEMA,
        },
    }
