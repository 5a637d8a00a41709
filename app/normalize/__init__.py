from .utils import count_spacing_issues, first_word, normalize_cv_text, word_count

__all__ = [
    "count_spacing_issues",
    "first_word",
    "normalize_cv_text",
    "word_count",
]
