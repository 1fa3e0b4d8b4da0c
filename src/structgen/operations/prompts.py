"""Prompt templates for the writing-coach operations.

Wording is a configuration input: these templates can be edited freely
without touching stage definitions or schemas. Every builder returns a
``(system_prompt, user_prompt)`` pair.
"""

from __future__ import annotations

from collections.abc import Iterable

type PromptPair = tuple[str, str]

COACH = "You are a CET-4/6 writing coach helping Chinese students."
CHINESE_FIELDS = "You MUST write the {fields} field(s) in Chinese (中文)."


def _chinese(*fields: str) -> str:
    return CHINESE_FIELDS.format(fields=", ".join(fields))


def _bullets(items: Iterable[str]) -> str:
    return "\n".join(f"- {item}" for item in items)


# --- Brainstorming ---


def brainstorm(topic: str) -> PromptPair:
    system = (
        f"{COACH} Help students brainstorm. "
        f"{_chinese('socraticQuestion', 'hint', 'thinkingExpansion')} "
        "The dimension field stays in English."
    )
    user = (
        f'Generate 3 distinct inspiration cards for the essay topic: "{topic}". '
        "Each card represents a different perspective (e.g. Economic, Social, "
        "Personal).\n\n"
        "For each card give 3-4 thinkingExpansion points: complete, specific "
        "arguments of 15-30 Chinese characters that help the student think "
        "deeper about the dimension."
    )
    return system, user


def validate_idea(topic: str, dimension: str, idea: str) -> PromptPair:
    system = (
        "You are a strict but helpful writing coach. Evaluate how relevant the "
        f"student's idea is. {_chinese('feedbackTitle', 'analysis', 'thinkingExpansion')}"
    )
    user = (
        f"Topic: {topic}\nDimension: {dimension}\nStudent Idea: {idea}\n\n"
        "Classify the idea as exceptional, valid, weak or off_topic and explain "
        "why. Offer 3-4 thinkingExpansion points that push the idea further."
    )
    return system, user


def language_scaffolds(topic: str, dimension: str, idea: str) -> PromptPair:
    system = (
        f"{COACH} Provide vocabulary and sentence frames that help the student "
        "expand their idea."
    )
    user = (
        f"Topic: {topic}\nDimension: {dimension}\nStudent Idea: {idea}\n"
        "Generate scaffolds:\n"
        + _bullets(
            [
                "5 vocabulary items with Chinese meaning, English definition and "
                "a bilingual usage example",
                "5 collocations as English/Chinese pairs",
                "3 sentence frames whose blanks are short Chinese hints in "
                "square brackets (2-6 characters each)",
            ]
        )
    )
    return system, user


def dimension_keywords(dimension: str, topic: str | None) -> PromptPair:
    return (
        "Generate related keywords.",
        f"Dimension: {dimension}\nTopic: {topic or 'General'}\n"
        "Generate 8 relevant keywords as English/Chinese pairs.",
    )


def validate_sentence(sentence: str, topic: str) -> PromptPair:
    system = f"{COACH} Evaluate the student's sentence. {_chinese('feedback', 'suggestion')}"
    user = (
        f'Topic: "{topic}"\nStudent\'s sentence: "{sentence}"\n\n'
        + _bullets(
            [
                '"isValid": true if the sentence is grammatical and makes sense',
                '"feedback": 2-3 sentences on grammar, idiomatic usage and relevance',
                '"suggestion": one concrete improvement, or a more advanced '
                "alternative if the sentence is already good",
            ]
        )
    )
    return system, user


def more_collocations(topic: str, idea: str) -> PromptPair:
    return (
        "Writing assistant",
        f"Generate 6 more advanced collocations for Idea: {idea} (Topic: {topic})",
    )


# --- Drafting ---


def analyze_draft(
    topic: str, dimension: str, draft: str, vocabulary: list[str]
) -> PromptPair:
    system = (
        f"{COACH} {_chinese('comment', 'suggestions')} "
        "The polishedVersion field stays in English as a model paragraph."
    )
    user = (
        f"Topic: {topic}\nDimension: {dimension}\nDraft: \"{draft}\"\n"
        f"Target Vocab: {', '.join(vocabulary) or 'none'}\n"
        "Analyze the draft.\n\n"
        "SCORING RULE: score is an integer from 0 to 10. Never use a "
        "100-point or percentage scale."
    )
    return system, user


def essay_frame(topic: str, body: str) -> PromptPair:
    system = (
        "You are a CET-4/6 writing coach. Write an introduction and a conclusion "
        "for the student's essay. Match the language level of the body "
        "paragraphs and keep each paragraph to 2-3 sentences."
    )
    user = (
        f'Topic: "{topic}"\n\nBody paragraphs:\n\n{body}\n\n'
        "introduction: introduce the topic and preview the main points.\n"
        "conclusion: summarize the arguments and end with a final thought."
    )
    return system, user


# --- Essay grading ---

GRADER = (
    "You are a senior CET-4/6 examiner. The rubric has four dimensions: "
    "content (0-4), organization (0-3), proficiency (0-5) and clarity (0-3), "
    "15 points in total, scored in 0.5 steps."
)


def _essay_block(essay: str, topic: str | None) -> str:
    return f"Topic: {topic or 'Not provided'}\n\nEssay:\n{essay}"


def grade_scoring(essay: str, topic: str | None) -> PromptPair:
    system = (
        f"{GRADER} Score conservatively and consistently: the same essay must "
        "receive the same score on every call. Sub-scores must sum to "
        f"totalScore. {_chinese('generalComment', 'issueOverview')}"
    )
    return system, _essay_block(essay, topic) + "\n\nScore this essay."


def grade_critique(essay: str, topic: str | None) -> PromptPair:
    system = (
        f"{GRADER} List every issue in the essay, one entry per error. "
        "'original' is the exact snippet from the essay and 'context' the full "
        f"sentence containing it. {_chinese('explanation')}"
    )
    return system, _essay_block(essay, topic) + "\n\nCritique this essay."


def grade_style_polish(essay: str, topic: str | None) -> PromptPair:
    system = (
        f"{GRADER} Rewrite the essay at a band-15 level, keeping the student's "
        "ideas. Tag paragraphs [INTRODUCTION], [BODY_PARA_1], [BODY_PARA_2], "
        "[CONCLUSION] and wrap each improved passage in <highlight id='N'> "
        "where N indexes contrastiveLearning. "
        f"{_chinese('analysis')}"
    )
    return system, _essay_block(essay, topic) + "\n\nPolish this essay."


# --- Retraining & drills ---


def retraining(contrastive_summary: str, polished_essay: str) -> PromptPair:
    system = (
        "You are a writing coach designing targeted retraining. Base every "
        "exercise on the contrastive analysis below and the model essay.\n\n"
        f"Contrastive analysis:\n{contrastive_summary}\n\n"
        f"Model essay:\n{polished_essay}\n\n"
        "Create 3 exercises (Academic Upgrade, Logic Bridge, Intent "
        "Realization) and 5 learning materials. "
        f"{_chinese('question', 'hint', 'explanation', 'definition')}"
    )
    return system, "Generate Integrated Retraining Exercises."


_DRILL_FOCUS = {
    "grammar_doctor": "Focus on grammar errors. Context errors: {errors}. "
    "Generate error correction drills.",
    "elevation_lab": "Focus on vocabulary upgrade. Target vocab: {vocab}. "
    "Generate sentence upgrade drills.",
    "structure_architect": "Focus on sentence structure combining. "
    "Generate sentence combining drills.",
}


def drill_items(
    topic: str, mode: str, past_errors: list[str], target_vocab: list[str]
) -> PromptPair:
    focus = _DRILL_FOCUS[mode].format(
        errors=", ".join(past_errors) or "none",
        vocab=", ".join(target_vocab) or "none",
    )
    user = (
        f"Topic: {topic}\nMode: {mode}\n{focus}\nGenerate 5 drill items.\n\n"
        "The explanation field MUST be in simplified Chinese (简体中文). Keep "
        "questionContext, highlightText and options in English."
    )
    return "Drill generator", user


def evaluate_retraining(question: str, strategy_hint: str, answer: str) -> PromptPair:
    system = (
        "You are a strict Writing Coach. The student is practicing the "
        f'strategy "{strategy_hint}".\nThe question was: "{question}".\n\n'
        f'Evaluate the student\'s answer: "{answer}".\n\n'
        "pass: the strategy is applied and the grammar is correct.\n"
        "partial: the strategy is attempted weakly or with grammar errors.\n"
        "fail: the strategy is ignored or the answer is gibberish.\n\n"
        "Feedback is one sentence in simplified Chinese about the strategy."
    )
    return system, "Evaluate Answer"
