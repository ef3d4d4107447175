"""Text helpers shared by the research pipeline."""

import re
from typing import List, Set

STOPWORDS = {
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "from", "how", "what", "where", "when", "why", "who",
    "which", "is", "are", "was", "were", "be", "been", "did", "does", "do",
    "has", "have", "had", "about", "any", "there", "this", "that", "these",
    "those", "it", "its", "me", "tell", "show", "find", "list", "all",
    "recent", "recently", "latest", "happened", "happen", "exist", "exists",
    "township", "teaneck", "town", "can", "you", "i", "we", "our", "my",
    "get", "give", "please", "information", "info", "anything", "say",
    "said", "decide", "decided", "discuss", "discussed", "regarding",
}


def normalize_query(query: str) -> str:
    """Normalize query whitespace."""
    return " ".join(query.split()).strip()


def normalize_text(text: str) -> str:
    """Lower-case, drop punctuation and collapse whitespace for comparisons."""
    cleaned = re.sub(r"[^\w\s]", " ", text.lower())
    return re.sub(r"\s+", " ", cleaned).strip()


def tokenize(text: str) -> Set[str]:
    """Word tokens of the normalized text."""
    return set(re.findall(r"\w+", normalize_text(text)))


def extract_keywords(text: str, max_keywords: int = 3) -> List[str]:
    """
    Pull the most useful search terms out of a natural-language question.

    Stop-words and very short words are dropped; numbers and capitalized
    words are kept. Order of appearance is preserved.

    Example:
        >>> extract_keywords("What did the Planning Board say about Main Street?")
        ['planning', 'board', 'main']
    """
    keywords: List[str] = []
    for word in re.findall(r"[\w'-]+", text):
        clean = word.strip("'-").lower()
        if not clean or clean in STOPWORDS or clean in keywords:
            continue
        if len(clean) > 2 or any(c.isdigit() for c in clean):
            keywords.append(clean)
        if len(keywords) >= max_keywords:
            break
    return keywords


def jaccard(a: str, b: str) -> float:
    """Token Jaccard similarity of two strings (1.0 for two empty strings)."""
    ta, tb = tokenize(a), tokenize(b)
    if not ta and not tb:
        return 1.0
    return len(ta & tb) / len(ta | tb)
