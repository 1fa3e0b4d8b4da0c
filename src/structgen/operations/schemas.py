"""Output schemas for the writing-coach operations.

Built once at import time and shared read-only by every call.
"""

from structgen.core.schema import array_of, boolean, number, object_of, string

# --- Shared pieces ---

BILINGUAL_TERM = object_of({"en": string(), "zh": string()})

THINKING_EXPANSION = array_of(
    string(), "3-4 concrete thinking angles in Chinese, 15-30 characters each"
)

# --- Brainstorming ---

INSPIRATION_CARD = object_of(
    {
        "id": string(),
        "dimension": string("Perspective name in English"),
        "socraticQuestion": string("Guiding question in Chinese"),
        "hint": string("Hint in Chinese"),
        "keywords": array_of(BILINGUAL_TERM),
        "thinkingExpansion": THINKING_EXPANSION,
    }
)
INSPIRATION_CARDS = array_of(INSPIRATION_CARD)

IDEA_EVALUATION = object_of(
    {
        "status": string(enum=("exceptional", "valid", "weak", "off_topic")),
        "feedbackTitle": string("Short verdict in Chinese"),
        "analysis": string("Analysis in Chinese"),
        "thinkingExpansion": THINKING_EXPANSION,
    }
)

# --- Language scaffolds ---

VOCABULARY_ITEM = object_of(
    {
        "word": string(),
        "chinese": string(),
        "englishDefinition": string(),
        "usage": string("Example sentence in English"),
        "usageChinese": string("Chinese translation of the example"),
    }
)

SENTENCE_FRAME = object_of(
    {
        "patternName": string("English pattern, e.g. 'Not only...but also...'"),
        "patternNameZh": string(),
        "template": string("Sentence with [Chinese hints] marking the blanks"),
        "modelSentence": string(),
    }
)

SCAFFOLD = object_of(
    {
        "selectedDimension": string(),
        "userIdea": string(),
        "vocabulary": array_of(VOCABULARY_ITEM),
        "collocations": array_of(BILINGUAL_TERM),
        "frames": array_of(SENTENCE_FRAME),
    }
)

KEYWORDS = array_of(BILINGUAL_TERM)
COLLOCATIONS = array_of(BILINGUAL_TERM)

SENTENCE_EVALUATION = object_of(
    {
        "isValid": boolean("True if grammatical and meaningful"),
        "feedback": string("Feedback in Chinese, 2-3 sentences"),
        "suggestion": string("One improvement in Chinese"),
    }
)

# --- Drafting ---

DRAFT_FEEDBACK = object_of(
    {
        "score": number("Integer score from 0 to 10", minimum=0, maximum=10),
        "comment": string("Feedback in Chinese"),
        "usedVocabulary": array_of(string()),
        "suggestions": array_of(string("Suggestion in Chinese")),
        "polishedVersion": string("Polished English paragraph"),
    },
    required=("score", "comment", "suggestions", "polishedVersion"),
)

ESSAY_FRAME = object_of({"introduction": string(), "conclusion": string()})

# --- Essay grading ---

SUB_SCORES = object_of(
    {
        "content": number(minimum=0, maximum=4),
        "organization": number(minimum=0, maximum=3),
        "proficiency": number(minimum=0, maximum=5),
        "clarity": number(minimum=0, maximum=3),
    }
)

SCORING = object_of(
    {
        "totalScore": number("CET band score", minimum=0, maximum=15),
        "subScores": SUB_SCORES,
        "generalComment": string("Comprehensive review in Chinese"),
        "issueOverview": object_of(
            {
                "critical": array_of(string(), "Major issues in Chinese"),
                "general": array_of(string(), "Moderate issues in Chinese"),
                "minor": array_of(string(), "Minor issues in Chinese"),
            }
        ),
    }
)

CRITIQUE_ITEM = object_of(
    {
        "original": string("Exact snippet from the essay, untranslated"),
        "context": string("Full sentence containing the snippet"),
        "revised": string(),
        "category": string(enum=("Content", "Organization", "Proficiency", "Clarity")),
        "severity": string(enum=("critical", "general", "minor")),
        "explanation": string("Diagnosis in Chinese"),
    }
)

CRITIQUE = object_of(
    {"critiques": array_of(CRITIQUE_ITEM, "Every issue found, one entry per error")}
)

CONTRASTIVE_POINT = object_of(
    {
        "category": string(
            enum=("Language Foundation", "Logical Reasoning", "Strategic Intent")
        ),
        "userContent": string(),
        "polishedContent": string("Exact text as it appears in polishedEssay"),
        "analysis": string("Strategic analysis in Chinese"),
    }
)

STYLE_POLISH = object_of(
    {
        "contrastiveLearning": array_of(CONTRASTIVE_POINT),
        "polishedEssay": string(
            "Polished essay with [INTRODUCTION], [BODY_PARA_1], [BODY_PARA_2], "
            "[CONCLUSION] tags and <highlight id='N'> tags matching "
            "contrastiveLearning indices"
        ),
    }
)

# --- Retraining & drills ---

RETRAINING_EXERCISE = object_of(
    {
        "type": string(enum=("Academic Upgrade", "Logic Bridge", "Intent Realization")),
        "question": string("Instruction in Chinese naming the strategy"),
        "originalContext": string("The sentence or context to improve"),
        "hint": string("Pointer to the model strategy, in Chinese"),
        "mandatoryKeywords": array_of(string(), "Keywords the answer must use"),
        "referenceAnswer": string(),
        "explanation": string("Explanation in Chinese"),
    }
)

LEARNING_MATERIAL = object_of(
    {
        "wordOrPhrase": string(),
        "definition": string("Chinese definition"),
        "example": string(),
    }
)

RETRAINING = object_of(
    {
        "retraining": object_of(
            {
                "exercises": array_of(RETRAINING_EXERCISE),
                "materials": array_of(LEARNING_MATERIAL),
            }
        )
    }
)

DRILL_MODES: tuple[str, ...] = ("grammar_doctor", "elevation_lab", "structure_architect")

DRILL_ITEM = object_of(
    {
        "id": string(),
        "mode": string(),
        "questionContext": string(),
        "highlightText": string(),
        "options": array_of(string()),
        "correctOption": string(),
        "explanation": string("Explanation in simplified Chinese"),
    },
    required=("id", "mode", "questionContext", "options", "correctOption", "explanation"),
)
DRILL_ITEMS = array_of(DRILL_ITEM)

RETRAINING_EVALUATION = object_of(
    {
        "status": string(enum=("pass", "partial", "fail")),
        "feedback": string("One sentence in simplified Chinese"),
    }
)
