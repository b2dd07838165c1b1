"""
Text normalization for content similarity.

Every text field compared by the similarity scorer goes through
TextNormalizer: markup is stripped, entities decoded, text lowercased and
split into word tokens, and short tokens and stopwords are discarded.
"""

import html
import re
from typing import Any, Iterable

from bs4 import BeautifulSoup

STOP_WORDS = frozenset({
    # Articles and conjunctions
    "the", "a", "an", "and", "or", "but", "nor", "so", "yet", "if", "than", "then",
    # Prepositions
    "in", "on", "at", "to", "for", "of", "with", "by", "from", "as", "into",
    "onto", "over", "under", "up", "down", "out", "off", "about", "through",
    "during", "including", "against", "among", "throughout", "despite",
    "towards", "upon", "concerning", "between", "before", "after", "via",
    # Auxiliary and modal verbs
    "is", "was", "are", "were", "be", "been", "being", "am", "have", "has",
    "had", "do", "does", "did", "will", "would", "could", "should", "may",
    "might", "must", "can", "shall",
    # Pronouns and determiners
    "it", "its", "this", "that", "these", "those", "they", "them", "their",
    "there", "we", "our", "you", "your", "he", "she", "his", "her", "i", "me",
    "my", "which", "what", "who", "whom", "when", "where", "why", "how",
    # Quantifiers and intensifiers
    "more", "most", "very", "much", "many", "some", "any", "all", "each",
    "every", "other", "another", "no", "not", "only", "just", "also", "too",
})

# WordPress emits typographic punctuation as numeric entities in titles
_TYPOGRAPHIC_REPLACEMENTS = {
    "‘": "'",
    "’": "'",
    "“": '"',
    "”": '"',
    " ": " ",
}

_TOKEN_PATTERN = re.compile(r"[^\W_]+", re.UNICODE)


def _ascii_punctuation(text: str) -> str:
    for source, target in _TYPOGRAPHIC_REPLACEMENTS.items():
        text = text.replace(source, target)
    return text


def decode_html_entities(text: Any) -> str:
    """Decode named, decimal and hex HTML entities into plain characters."""
    if not text or not isinstance(text, str):
        return ""
    return _ascii_punctuation(html.unescape(text))


def strip_html(text: Any) -> str:
    """
    Remove markup from text and decode entities.

    Script and style contents are dropped. Text without tags skips the
    parser and only has its entities decoded.
    """
    if not text or not isinstance(text, str):
        return ""
    if "<" not in text:
        return decode_html_entities(text)

    soup = BeautifulSoup(text, "html.parser")
    for element in soup(["script", "style"]):
        element.decompose()

    # get_text() output is already entity-decoded
    return _ascii_punctuation(soup.get_text(separator=" "))


class TextNormalizer:
    """
    Turn free text into a set of comparable tokens.

    Stateless after construction, so a single instance is shared by every
    scorer.
    """

    DEFAULT_MIN_TOKEN_LENGTH = 2

    def __init__(
        self,
        min_token_length: int = None,
        stop_words: Iterable[str] = None,
    ):
        """
        Initialize text normalizer.

        Args:
            min_token_length: Tokens shorter than this are discarded
            stop_words: Words ignored during comparison (lowercase)
        """
        self.min_token_length = (
            self.DEFAULT_MIN_TOKEN_LENGTH if min_token_length is None else min_token_length
        )
        self.stop_words = frozenset(stop_words) if stop_words is not None else STOP_WORDS

    def tokenize(self, text: Any) -> list[str]:
        """
        Split text into ordered tokens, keeping duplicates.

        Args:
            text: Raw text, possibly containing HTML

        Returns:
            Lowercased tokens with short words and stopwords removed
        """
        plain = strip_html(text)
        if not plain:
            return []

        return [
            token
            for token in _TOKEN_PATTERN.findall(plain.lower())
            if len(token) >= self.min_token_length and token not in self.stop_words
        ]

    def normalize(self, text: Any) -> frozenset[str]:
        """Return the unique tokens of text; empty for missing input."""
        return frozenset(self.tokenize(text))


# Singleton instance
text_normalizer = TextNormalizer()


def normalize(text: Any) -> frozenset[str]:
    """Normalize text with the shared default normalizer."""
    return text_normalizer.normalize(text)
