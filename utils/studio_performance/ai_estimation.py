# utils/studio_performance/ai_estimation.py
"""
AI Estimation adapter (Gemini generateContent REST API)

Estimates consumed by the dashboards:
- Nutrition of a meal photo
- Body composition read from an InBody result sheet photo
- Calories burned by a workout routine

Coaching texts:
- Workout strategy for a trainer from the latest InBody result
- Solo homework message for a member
- Short encouragement on a diet entry

The adapter never raises to its callers: a missing API key, HTTP errors,
timeouts and unusable replies are logged and turned into fallback values.
"""

import json
import logging
import math
import re
from typing import Any, Dict, List, Optional

import requests

from .constants import (
    DEFAULT_BODY_WEIGHT_KG,
    ENCOURAGEMENT_EMPTY_TEXT,
    ENCOURAGEMENT_FAILURE_TEXT,
    FALLBACK_KCAL_PER_MINUTE,
    HOMEWORK_EMPTY_TEXT,
    HOMEWORK_FAILURE_TEXT,
    HOMEWORK_HISTORY_LIMIT,
    NUTRITION_FAILURE_DESCRIPTION,
    UNKNOWN_MACRO,
    WORKOUT_PLAN_EMPTY_TEXT,
    WORKOUT_PLAN_FAILURE_TEXT,
)
from .exceptions import AIEstimationError
from .models import (
    BodyCompositionEstimate,
    InBodyEntry,
    Macros,
    Member,
    NutritionEstimate,
    WorkoutEntry,
)

logger = logging.getLogger(__name__)

GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

NUTRITION_PROMPT = """Analyze this food image. Identify the main dish.
Return a purely JSON object (no markdown formatting) with the following structure:
{
  "calories": number (estimated total calories),
  "protein": string (e.g., "20g"),
  "carbs": string (e.g., "50g"),
  "fat": string (e.g., "10g"),
  "description": string (short Korean description of the food)
}"""

BODY_COMPOSITION_PROMPT = """Analyze this InBody result sheet (or body composition paper).
Extract the following numbers:
1. Weight (체중) in kg
2. Skeletal Muscle Mass (골격근량) in kg
3. Percent Body Fat (체지방률) in %
4. InBody Score (인바디 점수)

Return a purely JSON object with numeric values only (no units):
{"weight": number, "muscleMass": number, "bodyFat": number, "score": number}
If a value is not found, return 0."""

CALORIES_PROMPT = """Analyze the following workout routine and estimate total calories burned.

Routine:
{routine}

Duration: {duration} minutes
User Weight: {weight}kg

Estimate the METs of the exercises, calculate total calories burned from
METs, duration and weight, and return ONLY the integer number of calories."""

WORKOUT_PLAN_PROMPT = """당신은 피트니스 센터의 수석 코치입니다. 담당 트레이너가 {name} 회원님의 인바디 결과를 가져왔습니다.
트레이너가 이 회원을 어떻게 지도하면 좋을지 조언과 맞춤 운동 전략을 제안해주세요.

[회원 프로필]
- 나이: {age}세
- 성별: {gender}
- 신장: {height}
- 운동 목표: {goal}

[인바디 측정 결과]
- 체중: {weight}kg
- 골격근량: {muscle_mass}kg
- 체지방률: {body_fat}%
- 인바디 점수: {score}

[작성 가이드]
1. 회원 상태 분석: 수치를 바탕으로 현재 신체 특징을 브리핑하세요.
2. 지도 방향성: 수업에서 중점을 둘 부분을 조언하세요.
3. 추천 주간 루틴: 1주일 분할 루틴 예시를 제시하세요.
4. 식단 코칭 포인트: 상담 시 강조할 식단 가이드를 제시하세요.

트레이너가 읽는 문서입니다. 회원은 '{name} 회원님'으로 3인칭 지칭하고,
정중하고 전문적인 어조의 마크다운으로 작성하세요."""

HOMEWORK_PROMPT = """You are a personal trainer. Create a solo homework workout for your client, {name}.

Target body parts: {parts}

Exercises taught so far:
{history}

1. Recommend 3-5 exercises covering the target parts.
2. Prefer exercises from the history when they match the target parts.
3. Otherwise suggest safe alternatives for training alone.
4. Include sets and reps for each exercise.
5. Write it as a friendly KakaoTalk message in Korean, starting with
   "[💪 {name}님을 위한 오늘의 숙제!]" and ending with "혼자서도 할 수 있어요! 화이팅!"."""

HOMEWORK_NO_HISTORY = "No specific history available. Suggest basic, safe bodyweight exercises."

ENCOURAGEMENT_PROMPT = """You are a professional fitness trainer. Your client {name} just ate {description}.
Write a short, encouraging, professional feedback comment in Korean (1-2 sentences).
Praise a healthy meal; gently suggest moderation for an unhealthy one."""


def strip_data_url(image_b64: str) -> str:
    """'data:image/jpeg;base64,AAAA' -> 'AAAA'"""
    if ',' in (image_b64 or ''):
        return image_b64.split(',', 1)[1]
    return image_b64 or ''


def parse_json_reply(text: str) -> Dict[str, Any]:
    """Parse a model reply that may be wrapped in ``` / ```json fences."""
    cleaned = (text or '').replace('```json', '').replace('```', '').strip()
    try:
        data = json.loads(cleaned or '{}')
    except json.JSONDecodeError as e:
        raise AIEstimationError(f"Reply is not JSON: {e}") from e
    if not isinstance(data, dict):
        raise AIEstimationError("Reply JSON is not an object")
    return data


def _to_float(value: Any) -> float:
    """Numeric reply field as a float; missing, malformed, NaN or infinite -> 0.0"""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


class AIEstimator:
    """
    Synchronous Gemini client with fallbacks.

    Usage:
        estimator = AIEstimator.from_config()

        estimator.estimate_nutrition(image_b64)           # NutritionEstimate
        estimator.estimate_body_composition(image_b64)    # BodyCompositionEstimate
        estimator.estimate_calories_burned('스쿼트 5세트', 50)  # 250 on failure
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        vision_model: str = 'gemini-2.5-flash',
        text_model: str = 'gemini-2.5-flash',
        timeout: float = 20.0,
        enabled: bool = True,
        kcal_per_minute: float = FALLBACK_KCAL_PER_MINUTE,
        default_body_weight: float = DEFAULT_BODY_WEIGHT_KG,
    ):
        self.api_key = api_key
        self.vision_model = vision_model
        self.text_model = text_model
        self.timeout = timeout
        self.enabled = enabled
        self.kcal_per_minute = kcal_per_minute
        self.default_body_weight = default_body_weight

    @classmethod
    def from_config(cls) -> 'AIEstimator':
        from utils.config import config

        ai_config = config.get_ai_config()
        return cls(
            api_key=ai_config['api_key'],
            vision_model=ai_config['vision_model'],
            text_model=ai_config['text_model'],
            timeout=ai_config['timeout_seconds'],
            enabled=config.is_feature_enabled('AI_ESTIMATION'),
            kcal_per_minute=config.get_app_setting('FALLBACK_KCAL_PER_MINUTE', FALLBACK_KCAL_PER_MINUTE),
            default_body_weight=config.get_app_setting('DEFAULT_BODY_WEIGHT_KG', DEFAULT_BODY_WEIGHT_KG),
        )

    # =========================================================================
    # TRANSPORT
    # =========================================================================

    def _generate(self, parts: List[Dict[str, Any]], model: str) -> str:
        """POST one generateContent request and return the first text part."""
        if not self.enabled:
            raise AIEstimationError("AI estimation is disabled")
        if not self.api_key:
            raise AIEstimationError("GEMINI_API_KEY missing")

        body = {"contents": [{"role": "user", "parts": parts}]}

        try:
            response = requests.post(
                GEMINI_URL.format(model=model),
                params={"key": self.api_key},
                json=body,
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            raise AIEstimationError(f"Gemini request failed: {e}") from e

        try:
            text = payload["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise AIEstimationError(f"Unexpected Gemini reply shape: {e}") from e
        if not isinstance(text, str):
            raise AIEstimationError("Gemini reply text is not a string")
        return text

    @staticmethod
    def _image_parts(image_b64: str, prompt: str) -> List[Dict[str, Any]]:
        return [
            {"inlineData": {"mimeType": "image/jpeg", "data": strip_data_url(image_b64)}},
            {"text": prompt},
        ]

    # =========================================================================
    # ESTIMATES
    # =========================================================================

    def estimate_nutrition(self, image_b64: str) -> NutritionEstimate:
        try:
            text = self._generate(self._image_parts(image_b64, NUTRITION_PROMPT), self.vision_model)
            data = parse_json_reply(text)

            return NutritionEstimate(
                calories=int(_to_float(data.get('calories'))),
                macros=Macros(
                    protein=str(data.get('protein') or '0g'),
                    carbs=str(data.get('carbs') or '0g'),
                    fat=str(data.get('fat') or '0g'),
                ),
                description=data.get('description') or '음식 인식 실패',
            )
        except AIEstimationError as e:
            logger.error(f"Nutrition estimation failed: {e}")
            return NutritionEstimate(
                calories=0,
                macros=Macros(UNKNOWN_MACRO, UNKNOWN_MACRO, UNKNOWN_MACRO),
                description=NUTRITION_FAILURE_DESCRIPTION,
            )

    def estimate_body_composition(self, image_b64: str) -> BodyCompositionEstimate:
        try:
            text = self._generate(self._image_parts(image_b64, BODY_COMPOSITION_PROMPT), self.vision_model)
            data = parse_json_reply(text)

            return BodyCompositionEstimate(
                weight=_to_float(data.get('weight')),
                muscle_mass=_to_float(data.get('muscleMass')),
                body_fat=_to_float(data.get('bodyFat')),
                score=_to_float(data.get('score')),
            )
        except AIEstimationError as e:
            logger.error(f"Body composition estimation failed: {e}")
            return BodyCompositionEstimate()

    def estimate_calories_burned(
        self,
        routine_text: str,
        duration_minutes: int,
        body_weight: float = None
    ) -> int:
        """Estimated kcal; floor(duration * kcal_per_minute) when the service fails."""
        fallback = math.floor(duration_minutes * self.kcal_per_minute)
        weight = body_weight or self.default_body_weight

        prompt = CALORIES_PROMPT.format(routine=routine_text, duration=duration_minutes, weight=weight)
        try:
            text = self._generate([{"text": prompt}], self.text_model)
        except AIEstimationError as e:
            logger.error(f"Calorie estimation failed: {e}")
            return fallback

        digits = re.sub(r'[^0-9]', '', text or '')
        if not digits:
            logger.warning(f"Calorie reply had no number, using fallback {fallback}")
            return fallback
        return int(digits)

    # =========================================================================
    # COACHING TEXTS
    # =========================================================================

    def _generate_text(self, prompt: str, empty_text: str, failure_text: str, label: str) -> str:
        """Free-text reply; empty_text for a blank reply, failure_text when the call fails."""
        try:
            text = self._generate([{"text": prompt}], self.text_model)
        except AIEstimationError as e:
            logger.error(f"{label} generation failed: {e}")
            return failure_text
        return text.strip() or empty_text

    def generate_workout_plan(self, member: Member, inbody: InBodyEntry) -> str:
        """Coaching brief for the trainer, built from the member's latest InBody entry."""
        prompt = WORKOUT_PLAN_PROMPT.format(
            name=member.name,
            age=member.age or '미입력',
            gender='남성' if member.gender == 'male' else '여성',
            height=f"{member.height}cm" if member.height else '미입력',
            goal=member.goal or '미입력',
            weight=inbody.weight,
            muscle_mass=inbody.muscle_mass,
            body_fat=inbody.body_fat,
            score=f"{inbody.score}점" if inbody.score else '미측정',
        )
        return self._generate_text(prompt, WORKOUT_PLAN_EMPTY_TEXT, WORKOUT_PLAN_FAILURE_TEXT, 'Workout plan')

    def generate_homework(
        self,
        member_name: str,
        history: List[WorkoutEntry],
        target_parts: List[str]
    ) -> str:
        """KakaoTalk-style solo homework for the selected body parts."""
        context = '\n'.join(f"- {h.title}: {h.content}" for h in history)[:HOMEWORK_HISTORY_LIMIT]
        prompt = HOMEWORK_PROMPT.format(
            name=member_name,
            parts=', '.join(target_parts),
            history=context or HOMEWORK_NO_HISTORY,
        )
        return self._generate_text(prompt, HOMEWORK_EMPTY_TEXT, HOMEWORK_FAILURE_TEXT, 'Homework')

    def generate_encouragement(self, member_name: str, diet_description: str) -> str:
        prompt = ENCOURAGEMENT_PROMPT.format(name=member_name, description=diet_description)
        return self._generate_text(prompt, ENCOURAGEMENT_EMPTY_TEXT, ENCOURAGEMENT_FAILURE_TEXT, 'Encouragement')
