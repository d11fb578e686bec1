"""Промпты операций фитнес-ассистента.

Шаблоны с плейсхолдерами заполняются через str.format.
"""

COACH_PERSONA_PROMPT = """You are {assistant_name}, a friendly and motivating personal fitness coach.
Give practical, safe advice about training, exercise technique, recovery and nutrition.
Keep answers concise and encouraging. Use Markdown lists when listing steps or exercises.
If a question involves pain, injury or a medical condition, recommend consulting a qualified professional.
"""

VIDEO_ANALYSIS_INSTRUCTIONS = """The following images are consecutive frames extracted from a workout video.
Analyze the exercise being performed: identify it, evaluate the form frame by frame,
point out mistakes and give specific, actionable cues to improve technique and safety.
"""

VIDEO_REFINEMENT_TEMPLATE = """
Additional focus requested by the user:
{refinement}
"""

WORKOUT_PLAN_TEMPLATE = """Create a weekly workout plan for a person with the following profile:
- Available equipment: {equipment}
- Fitness level: {level}
- Goal: {goal}

Return the plan as a list of training days. For every day provide its name (for example "Day 1 - Upper Body")
and an ordered list of exercises. For every exercise provide its name, the number of sets and the repetitions
(a number, a range like "8-12" or a duration like "30s").
"""

WORKOUT_PLAN_REGENERATION_NOTE = """
Please create a DIFFERENT variation of the workout plan than the one you may have suggested before:
use other exercises or a different split while respecting the same equipment, level and goal.
"""

GROUNDED_ANSWER_TEMPLATE = """Answer the following fitness or nutrition question using up-to-date, reliable sources.
Question: {question}
"""

POSE_ANALYSIS_TEMPLATE = """Look at the person's posture in this image and answer the question below.
Comment on alignment, joint angles and balance, and suggest corrections.
Question: {question}
"""

QUICK_RESPONSE_TEMPLATE = """Answer briefly, in one or two sentences: {question}"""

FOOD_RECOGNITION_PROMPT = """Identify every distinct food or drink item visible in this image.
Return a JSON array of short item names, for example ["grilled chicken breast", "brown rice", "broccoli"].
Return an empty array if there is no food in the image.
"""

NUTRITION_ANALYSIS_TEMPLATE = """Estimate the combined nutritional content of the following meal:
{foods}

Provide total calories (kcal), macronutrients in grams (protein, carbohydrates, fat),
and the most significant vitamins and minerals with their amounts including units (for example "90 mg").
"""

VIDEO_LOOKUP_TEMPLATE = """Find a popular, high-quality YouTube video that demonstrates the correct technique
for the exercise "{exercise_name}". Reply with the full YouTube URL only.
"""

TRANSCRIPTION_PROMPT = """Transcribe this audio recording verbatim.
Return only the transcribed text without comments or timestamps.
"""


def build_workout_plan_prompt(
    equipment: str,
    level: str,
    goal: str,
    is_regeneration: bool = False,
) -> str:
    prompt = WORKOUT_PLAN_TEMPLATE.format(equipment=equipment, level=level, goal=goal)
    if is_regeneration:
        prompt += WORKOUT_PLAN_REGENERATION_NOTE
    return prompt


def build_video_prompt(prompt: str, refinement: str | None = None) -> str:
    """Инструкция анализа кадров + запрос пользователя (+ уточнение)."""
    text = f"{VIDEO_ANALYSIS_INSTRUCTIONS}\n{prompt}"
    if refinement:
        text += VIDEO_REFINEMENT_TEMPLATE.format(refinement=refinement)
    return text


def build_persona_prompt(assistant_name: str) -> str:
    return COACH_PERSONA_PROMPT.format(assistant_name=assistant_name)
