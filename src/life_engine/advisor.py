"""AI-backed helpers: meal analysis, exercise alternatives, practice questions.

Each helper builds a prompt, makes one call through ``GeminiClient`` and
returns an ``AdviceResult``. Failures (unconfigured client, service errors,
unparseable or incomplete replies) come back as ``error`` and never raise.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Generic, Iterable, Optional, TypeVar

from gemini_client import GeminiClient, parse_json_response
from life_engine.models.enums import ExerciseType
from life_engine.models.logs import MealAnalysis
from life_engine.models.workout import PlanExercise, parse_exercise_type

logger = logging.getLogger(__name__)

T = TypeVar("T")

MEAL_FORMAT_ERROR = (
    "AI provided data in an unexpected format. Please try rephrasing your meal description."
)
ALTERNATIVE_FORMAT_ERROR = "AI could not suggest a valid alternative. Please try again."


@dataclass(frozen=True)
class AdviceResult(Generic[T]):
    value: Optional[T] = None
    error: Optional[str] = None
    raw_text: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.value is not None


def _meal_prompt(description: str) -> str:
    return f"""Analyze the following meal description and provide an estimated nutritional breakdown.
Meal: "{description}"
Return the response as a single JSON object with the following keys:
"mealName" (a short, descriptive name for the meal, e.g., "Chicken Salad Sandwich"),
"calories" (number, estimated total calories),
"proteinGrams" (number, estimated grams of protein),
"carbGrams" (number, estimated grams of carbohydrates),
"fatGrams" (number, estimated grams of fat),
"notes" (string, any brief notes or assumptions made, e.g., "Assumed medium portion size").
Example: {{"mealName": "Oatmeal with Berries", "calories": 350, "proteinGrams": 10, "carbGrams": 60, "fatGrams": 8, "notes": "Assumed 1 cup cooked oatmeal, 1/2 cup mixed berries."}}
Ensure the response is ONLY the JSON object."""


def analyze_meal(
    client: GeminiClient, description: str, linked_kr_id: str | None = None
) -> AdviceResult[MealAnalysis]:
    """Estimate calories and macros for a free-text meal description."""
    if not description or not description.strip():
        return AdviceResult(error="Please describe your meal.")

    result = client.generate_text(_meal_prompt(description.strip()), wants_json=True)
    if result.error:
        return AdviceResult(error=f"Error analyzing meal: {result.error}")

    data = parse_json_response(result.text)
    if not isinstance(data, dict) or data.get("calories") is None:
        logger.warning("Unexpected meal analysis reply: %r", result.text)
        return AdviceResult(error=MEAL_FORMAT_ERROR, raw_text=result.text)

    try:
        meal = MealAnalysis.from_dict({**data, "date": "", "linkedKRId": linked_kr_id})
    except (TypeError, ValueError) as exc:
        logger.warning("Meal analysis had non-numeric fields: %s", exc)
        return AdviceResult(error=MEAL_FORMAT_ERROR, raw_text=result.text)
    return AdviceResult(value=meal, raw_text=result.text)


def suggest_alternative_exercise(
    client: GeminiClient,
    exercise: PlanExercise,
    plan_name: str,
    equipment: str,
    existing_names: Iterable[str] = (),
) -> AdviceResult[PlanExercise]:
    """Ask for one replacement for *exercise* using the available *equipment*.

    Warm-up and cool-down movements are not swapped.
    """
    if exercise.type.is_warmup_or_cooldown:
        return AdviceResult(error="Alternatives are only offered for main exercises.")

    prompt = f"""The user cannot perform or wants an alternative for the exercise: "{exercise.name}" (Type: {exercise.type.value}, Segment: {exercise.segment or "n/a"}).
This exercise is part of a "{plan_name}".
The user has the following equipment: "{equipment}".
Suggest ONE distinct alternative exercise suitable for this workout type, segment, and equipment. The alternative should be different from these exercises already in the plan: {", ".join(existing_names)}.
Provide its name, very brief cues (1-2 short sentences), its type (e.g., MainCompound, MainIsolation), and primary muscle group (e.g., Chest, Back, Legs, Shoulders).
Return the response as a SINGLE JSON object with keys: "id" (unique string like "ai_alt_uuid"), "name", "cues", "type", "segment", "muscleGroup", "equipment" (what it uses from available).
Example: {{"id": "ai_alt_db_row", "name": "Dumbbell Row", "cues": "Support body. Pull to hip.", "type": "MainCompound", "segment": "Back Thickness", "muscleGroup": "Back", "equipment": "Dumbbell + bench"}}
Ensure the response is ONLY the single JSON object."""

    result = client.generate_text(prompt, wants_json=True)
    if result.error:
        return AdviceResult(error=f"Failed to get alternative: {result.error}")

    data = parse_json_response(result.text)
    if not isinstance(data, dict) or not data.get("name") or not data.get("cues"):
        logger.warning("Unexpected alternative exercise reply: %r", result.text)
        return AdviceResult(error=ALTERNATIVE_FORMAT_ERROR, raw_text=result.text)

    alternative = PlanExercise(
        id=str(data.get("id") or f"ai_alt_{uuid.uuid4().hex[:8]}"),
        name=str(data["name"]),
        cues=str(data["cues"]),
        type=parse_exercise_type(data.get("type"), ExerciseType.MAIN_ISOLATION),
        segment=data.get("segment") or exercise.segment,
        muscle_group=data.get("muscleGroup") or exercise.muscle_group,
        equipment=data.get("equipment") or exercise.equipment,
        sets_reps=exercise.sets_reps,
        notes="AI Suggested Alternative",
    )
    return AdviceResult(value=alternative, raw_text=result.text)


def generate_practice_questions(
    client: GeminiClient, topic: str, sub_topic: str = "", sub_sub_topic: str = ""
) -> AdviceResult[str]:
    """Generate 3-5 multiple-choice exam questions as readable text."""
    if not topic or not topic.strip():
        return AdviceResult(error="Please provide a main topic.")

    lines = [
        "You are a CFA L1 exam question generator.",
        "Generate 3-5 multiple-choice questions for the CFA Level 1 curriculum "
        "based on the following topic structure:",
        f'Main Topic: "{topic.strip()}"',
    ]
    if sub_topic.strip():
        lines.append(f'Sub-topic: "{sub_topic.strip()}"')
    if sub_sub_topic.strip():
        lines.append(f'Sub-sub-topic: "{sub_sub_topic.strip()}"')
    lines.append(
        """
For each question:
1. Provide the question text.
2. Provide 3 multiple-choice options, labeled A, B, C.
3. Indicate the correct answer (e.g., "Correct Answer: B").
4. Provide a brief explanation for the correct answer.

Format the output clearly for easy readability. Ensure questions are typical of CFA L1 difficulty.
Example of one question structure:
---
Question 1: [Question Text]
A) [Option A]
B) [Option B]
C) [Option C]
Correct Answer: [Letter]
Explanation: [Brief explanation]
---"""
    )

    result = client.generate_text("\n".join(lines))
    if result.error:
        return AdviceResult(error=f"Failed to generate questions: {result.error}")
    return AdviceResult(value=result.text, raw_text=result.text)
