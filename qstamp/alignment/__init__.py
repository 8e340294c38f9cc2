from .aligner import align_questions, locate_question
from .matching import PhraseMatch, WordIndex, find_exact, find_fuzzy

__all__ = [
    "PhraseMatch",
    "WordIndex",
    "align_questions",
    "find_exact",
    "find_fuzzy",
    "locate_question",
]
