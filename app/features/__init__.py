from .keyword_extractor import classify_keyword, extract_jd_keywords, rank_jd_keywords, tokenize
from .keyword_matcher import keyword_in_text, match_keywords
from .recalculator import build_initial_analysis, compute_match_score, document_match_text, recalculate

__all__ = [
    "classify_keyword",
    "extract_jd_keywords",
    "rank_jd_keywords",
    "tokenize",
    "keyword_in_text",
    "match_keywords",
    "build_initial_analysis",
    "compute_match_score",
    "document_match_text",
    "recalculate",
]
