"""Readability scoring based on Flesch reading ease and sentence length."""

from dataclasses import dataclass, field

from worker.scoring.text import count_syllables, split_sentences, words

LONG_SENTENCE_WORDS = 25
COMPLEX_WORD_SYLLABLES = 3

# (minimum Flesch score, label)
FLESCH_GRADES = [
    (90, "Very Easy"),
    (80, "Easy"),
    (70, "Fairly Easy"),
    (60, "Standard"),
    (50, "Fairly Difficult"),
    (30, "Difficult"),
]


@dataclass
class ReadabilityScore:
    score: int
    components: dict[str, int] = field(default_factory=dict)
    flesch_score: float = 0.0
    avg_sentence_length: float = 0.0
    sentence_count: int = 0
    word_count: int = 0
    complex_word_count: int = 0
    long_sentence_count: int = 0

    @property
    def flesch_grade(self) -> str:
        return flesch_grade(self.flesch_score)

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "components": self.components,
            "flesch_score": round(self.flesch_score, 1),
            "flesch_grade": self.flesch_grade,
            "avg_sentence_length": round(self.avg_sentence_length, 1),
            "sentence_count": self.sentence_count,
            "complex_word_count": self.complex_word_count,
            "long_sentence_count": self.long_sentence_count,
        }


def flesch_grade(score: float) -> str:
    for minimum, label in FLESCH_GRADES:
        if score >= minimum:
            return label
    return "Very Difficult"


def flesch_reading_ease(word_count: int, sentence_count: int, syllable_count: int) -> float:
    """Flesch reading ease, clamped to 0-100."""
    if word_count == 0 or sentence_count == 0:
        return 0.0
    score = 206.835 - 1.015 * (word_count / sentence_count) - 84.6 * (syllable_count / word_count)
    return max(0.0, min(100.0, score))


def _sentence_length_points(avg_length: float) -> int:
    if avg_length <= 15:
        return 25
    if avg_length <= 20:
        return 20
    if avg_length <= 25:
        return 12
    if avg_length <= 30:
        return 6
    return 0


def score_readability(text: str) -> ReadabilityScore:
    """Score how easy the content is to read. Empty content scores 0."""
    sentences = split_sentences(text or "")
    sentence_words = [words(sentence) for sentence in sentences]
    all_words = [word for sentence in sentence_words for word in sentence]

    if not all_words:
        return ReadabilityScore(
            score=0,
            components={"flesch": 0, "sentence_length": 0, "long_sentences": 0},
        )

    syllables = [count_syllables(word) for word in all_words]
    flesch = flesch_reading_ease(len(all_words), len(sentences), sum(syllables))
    avg_length = len(all_words) / len(sentences)
    long_sentences = sum(1 for sentence in sentence_words if len(sentence) > LONG_SENTENCE_WORDS)
    long_ratio = long_sentences / len(sentences)

    components = {
        "flesch": round(min(flesch, 60)),
        "sentence_length": _sentence_length_points(avg_length),
        # full marks with no long sentences, zero once 30% of sentences are long
        "long_sentences": round(15 * (1 - min(long_ratio / 0.3, 1))),
    }

    return ReadabilityScore(
        score=min(sum(components.values()), 100),
        components=components,
        flesch_score=flesch,
        avg_sentence_length=avg_length,
        sentence_count=len(sentences),
        word_count=len(all_words),
        complex_word_count=sum(1 for count in syllables if count >= COMPLEX_WORD_SYLLABLES),
        long_sentence_count=long_sentences,
    )
