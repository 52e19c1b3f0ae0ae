from __future__ import annotations

import math
import re
from collections import Counter

from app.core.config.matching import get_matching_value
from app.schemas.analysis import ExtractedKeyword
from app.taxonomy import VocabularyProvider, get_default_vocabulary

# Words joined by inner dots stay one token ("node.js"); hyphens split words.
TOKEN_RE = re.compile(r"\w+(?:\.\w+)*")
NUMERIC_RE = re.compile(r"[\d.\-]+")

STOPWORDS = frozenset({
    "about", "above", "after", "again", "against", "all", "also", "am", "an", "and", "any",
    "are", "aren't", "as", "at", "be", "because", "been", "before", "being", "below",
    "between", "both", "but", "by", "can", "cannot", "could", "did", "does", "doing",
    "down", "during", "each", "etc", "few", "for", "from", "further", "had", "has", "have",
    "having", "her", "here", "hers", "herself", "him", "himself", "his", "how", "into",
    "its", "itself", "just", "let", "may", "more", "most", "must", "myself", "nor", "not",
    "now", "off", "once", "only", "other", "ought", "our", "ours", "ourselves", "out",
    "over", "own", "same", "shall", "she", "should", "some", "such", "than", "that",
    "the", "their", "theirs", "them", "themselves", "then", "there", "these", "they",
    "this", "those", "through", "too", "under", "until", "upon", "very", "was", "were",
    "what", "when", "where", "which", "while", "who", "whom", "whose", "why", "will",
    "with", "within", "without", "would", "you", "your", "yours", "yourself",
    "yourselves", "able", "across", "along", "already", "although", "among", "another",
    "anyone", "anything", "around", "either", "else", "ever", "every", "everyone",
    "however", "least", "less", "many", "might", "much", "neither", "none", "often",
    "otherwise", "per", "perhaps", "rather", "since", "so", "still", "though", "thus",
    "together", "toward", "towards", "via", "well", "whether", "yet",
    "e.g", "i.e", "a.k.a",
})


def _default_top_n() -> int:
    return int(get_matching_value("extraction.default_top_n", 20))


def _technical_ratio() -> float:
    return float(get_matching_value("extraction.technical_ratio", 0.7))


def _min_token_length() -> int:
    return int(get_matching_value("extraction.min_token_length", 3))


def _split_dotted(token: str) -> list[str]:
    # "e.g" or "u.s.a" are abbreviations, not dotted names like "node.js".
    parts = token.split(".")
    if len(parts) > 1 and any(len(part) < 2 for part in parts):
        return parts
    return [token]


def _raw_tokens(text: str) -> list[str]:
    tokens: list[str] = []
    for token in TOKEN_RE.findall(text.lower()):
        tokens.extend(_split_dotted(token))
    return tokens


def tokenize(text: str) -> list[str]:
    min_len = _min_token_length()
    tokens: list[str] = []
    for token in _raw_tokens(text):
        if len(token) < min_len:
            continue
        if token in STOPWORDS:
            continue
        if NUMERIC_RE.fullmatch(token):
            continue
        tokens.append(token)
    return tokens


def classify_keyword(term: str, vocabulary: VocabularyProvider | None = None) -> bool:
    provider = vocabulary or get_default_vocabulary()
    return provider.is_technical(term)


def rank_jd_keywords(
    job_description: str,
    vocabulary: VocabularyProvider | None = None,
) -> list[ExtractedKeyword]:
    """Rank every qualifying JD token, technical terms first.

    Each partition is ordered by descending frequency; ties keep the order in
    which the term first appeared in the text.
    """
    if not job_description or not job_description.strip():
        return []

    provider = vocabulary or get_default_vocabulary()
    counts: Counter[str] = Counter(tokenize(job_description))

    technical: list[ExtractedKeyword] = []
    generic: list[ExtractedKeyword] = []
    for term, frequency in counts.items():
        keyword = ExtractedKeyword(term=term, frequency=frequency, technical=provider.is_technical(term))
        (technical if keyword.technical else generic).append(keyword)

    technical.sort(key=lambda item: -item.frequency)
    generic.sort(key=lambda item: -item.frequency)
    return technical + generic


def extract_jd_keywords(
    job_description: str,
    top_n: int | None = None,
    vocabulary: VocabularyProvider | None = None,
) -> list[str]:
    limit = _default_top_n() if top_n is None else top_n
    if limit <= 0:
        return []

    ranked = rank_jd_keywords(job_description, vocabulary=vocabulary)
    technical = [item.term for item in ranked if item.technical]
    generic = [item.term for item in ranked if not item.technical]

    # Slots are fixed up front. A short technical pool hands its unused slots
    # to generic terms, but a short generic pool never gives slots back.
    technical_slots = min(limit, math.ceil(round(limit * _technical_ratio(), 9)))
    selected = technical[:technical_slots]
    selected.extend(generic[: limit - len(selected)])
    return selected
