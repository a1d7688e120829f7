"""Target text sources: random common words and document text."""

import random
from typing import Optional, Sequence

COMMON_WORDS = (
    "the", "be", "of", "and", "a", "to", "in", "he", "have", "it",
    "that", "for", "they", "with", "as", "not", "on", "she", "at", "by",
    "this", "we", "you", "do", "but", "from", "or", "which", "one", "would",
    "all", "will", "there", "say", "who", "make", "when", "can", "more", "if",
    "no", "man", "out", "other", "so", "what", "time", "up", "go", "about",
    "than", "into", "could", "state", "only", "new", "year", "some", "take", "come",
    "these", "know", "see", "use", "get", "like", "then", "first", "any", "work",
    "now", "may", "such", "give", "over", "think", "most", "even", "find", "day",
    "also", "after", "way", "many", "must", "look", "before", "great", "back", "through",
    "long", "where", "much", "should", "well", "people", "down", "own", "just", "because",
    "good", "each", "those", "feel", "seem", "how", "high", "too", "place", "little",
    "world", "very", "still", "nation", "hand", "old", "life", "tell", "write", "become",
    "here", "show", "house", "both", "between", "need", "mean", "call", "develop", "under",
    "last", "right", "move", "thing", "general", "school", "never", "same", "another", "begin",
    "while", "number", "part", "turn", "real", "leave", "might", "want", "point", "form",
    "off", "child", "few", "small", "since", "against", "ask", "late", "home", "interest",
    "large", "person", "end", "open", "public", "follow", "during", "present", "without", "again",
    "hold", "govern", "around", "possible", "head", "consider", "word", "program", "problem", "however",
    "lead", "system", "set", "order", "eye", "plan", "run", "keep", "face", "fact",
    "group", "play", "stand", "increase", "early", "course", "change", "help", "line", "city",
)


class RandomWordSource:
    """Draws words independently and uniformly from a fixed corpus."""

    def __init__(
        self,
        corpus: Sequence[str] = COMMON_WORDS,
        rng: Optional[random.Random] = None,
    ):
        """Initialize random word source.

        Args:
            corpus: Words to draw from (must not be empty)
            rng: Random generator, for reproducible sequences
        """
        if not corpus:
            raise ValueError("Word corpus must not be empty")
        self.corpus = tuple(corpus)
        self.rng = rng or random.Random()

    def generate(self, count: int = 25) -> tuple[str, ...]:
        """Generate count random words."""
        if count <= 0:
            return ()
        return tuple(self.rng.choice(self.corpus) for _ in range(count))


def to_word_sequence(text: str) -> tuple[str, ...]:
    """Split document text into words, dropping all whitespace."""
    return tuple(text.split())
