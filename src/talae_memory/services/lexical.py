"""Bag-of-words relevance scoring.

Text is lower-cased, split on runs of characters outside ``[a-z0-9]`` and
stripped of a small stopword list. Non-ASCII letters act as separators.
"""

import math
import re
from collections import Counter
from collections.abc import Iterable

STOPWORDS = frozenset(
    {
        "a",
        "an",
        "and",
        "are",
        "as",
        "at",
        "be",
        "but",
        "by",
        "for",
        "if",
        "in",
        "into",
        "is",
        "it",
        "no",
        "not",
        "of",
        "on",
        "or",
        "such",
        "that",
        "the",
        "their",
        "then",
        "there",
        "these",
        "they",
        "this",
        "to",
        "was",
        "will",
        "with",
    }
)

_SEPARATOR = re.compile(r"[^a-z0-9]+")


def tokenize(text: str) -> list[str]:
    """Split text into lower-case tokens, dropping empties and stopwords."""
    return [token for token in _SEPARATOR.split(text.lower()) if token and token not in STOPWORDS]


def term_frequency(tokens: Iterable[str]) -> Counter[str]:
    return Counter(tokens)


def cosine_similarity(query_tf: Counter[str], memory_tf: Counter[str]) -> float:
    """Sparse cosine similarity of two term-frequency vectors.

    Returns 0 when either vector is empty or they share no terms.
    """
    dot_product = sum(count * memory_tf[token] for token, count in query_tf.items() if token in memory_tf)
    if dot_product == 0:
        return 0.0

    query_magnitude = math.sqrt(sum(count * count for count in query_tf.values()))
    memory_magnitude = math.sqrt(sum(count * count for count in memory_tf.values()))
    if query_magnitude == 0 or memory_magnitude == 0:
        return 0.0

    return dot_product / (query_magnitude * memory_magnitude)
