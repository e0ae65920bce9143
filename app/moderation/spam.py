"""
Keyword and pattern based spam scoring.

SpamFilter is stateless: no learning, no external calls. Scores are in
[0, 100]:

    +10  per spam keyword found (case-insensitive substring)
    +15  per spam pattern matched
    +20  more than 3 URLs
    +25  one word makes up more than 30% of a text of 10+ words, counting
         only words that contain no spam keyword

Usage:
    from moderation.spam import SpamFilter

    SpamFilter.score("Congratulations, you are a WINNER!!!!!!")
    SpamFilter.is_spam(text)
    SpamFilter.clean(text)   # None when too spammy
"""

from __future__ import annotations

import re
from collections import Counter

SPAM_KEYWORDS = (
    "viagra",
    "cialis",
    "pharmacy",
    "casino",
    "lottery",
    "winner",
    "prize",
    "congratulations",
    "click-here",
    "free-money",
    "earn-money",
    "work-from-home",
    "investment-opportunity",
    "guaranteed-income",
    "discount-offer",
    "limited-time",
    "exclusive-deal",
    "bitcoin",
    "crypto",
    "invest",
    "double-your-money",
    "weight-loss",
    "miracle-cure",
    "enlargement",
)

SPAM_PATTERNS = (
    re.compile(r"\b(earn|make)\s+\$?\d+k?\s+(per|a)\s+(day|week|month)\b", re.IGNORECASE),
    re.compile(r"\b(click|visit)\s+(here|now|this)\s+(link|url)\b", re.IGNORECASE),
    re.compile(r"\b(www\.|https?://)\S{30,}\b", re.IGNORECASE),
    re.compile(r"\b[A-Z]{10,}\b"),
    re.compile(r"(.)\1{5,}"),
    re.compile(r"\$\$\$+"),
)

URL_RE = re.compile(r"https?://\S+")

KEYWORD_POINTS = 10
PATTERN_POINTS = 15
EXCESSIVE_LINKS_POINTS = 20
REPEATED_CONTENT_POINTS = 25
MAX_SCORE = 100

SPAM_THRESHOLD = 70
CLEAN_THRESHOLD = 30
MAX_LINKS = 3
MIN_WORDS_FOR_REPETITION = 10
REPETITION_RATIO = 0.3

_KEYWORD_RES = tuple(
    re.compile(rf"\b{re.escape(keyword)}\b", re.IGNORECASE) for keyword in SPAM_KEYWORDS
)


class SpamFilter:
    @staticmethod
    def has_excessive_links(content: str) -> bool:
        return len(URL_RE.findall(content)) > MAX_LINKS

    @staticmethod
    def has_repeated_content(content: str) -> bool:
        words = [
            word
            for word in content.lower().split()
            if not any(keyword in word for keyword in SPAM_KEYWORDS)
        ]
        if len(words) < MIN_WORDS_FOR_REPETITION:
            return False
        most_common = Counter(words).most_common(1)[0][1]
        return most_common / len(words) > REPETITION_RATIO

    @classmethod
    def score(cls, content: str | None) -> int:
        if not content or not content.strip():
            return 0

        text = content.lower()
        score = sum(KEYWORD_POINTS for keyword in SPAM_KEYWORDS if keyword in text)
        score += sum(PATTERN_POINTS for pattern in SPAM_PATTERNS if pattern.search(content))
        if cls.has_excessive_links(content):
            score += EXCESSIVE_LINKS_POINTS
        if cls.has_repeated_content(content):
            score += REPEATED_CONTENT_POINTS
        return min(score, MAX_SCORE)

    @classmethod
    def is_spam(cls, content: str | None, threshold: int = SPAM_THRESHOLD) -> bool:
        return cls.score(content) >= threshold

    @classmethod
    def clean(cls, content: str | None) -> str | None:
        """
        Return the content with spam keywords replaced by "[removed]".

        Returns None for blank content or when the score reaches the spam
        threshold; content scoring below the clean threshold is returned
        unchanged.
        """
        if not content or not content.strip():
            return None

        score = cls.score(content)
        if score >= SPAM_THRESHOLD:
            return None
        if score < CLEAN_THRESHOLD:
            return content

        cleaned = content
        for keyword_re in _KEYWORD_RES:
            cleaned = keyword_re.sub("[removed]", cleaned)
        return cleaned
