import re
from newsfeed.models import TokenSet

_NON_WORD = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")
# A dash only separates a source when spaced ("Covid-19" is one word); a pipe always does
_SOURCE_SUFFIX = re.compile(r"(?:\s+[-–]\s+|\s*\|\s*)[^-–|]+$")
_BRACKETED = re.compile(r"\[.*?\]")
_HTML_TAG = re.compile(r"<[^>]+>")

DEFAULT_MIN_TOKEN_LENGTH = 3
DESCRIPTION_MAX_LENGTH = 300
SLUG_MAX_LENGTH = 50


def normalize(text: str) -> str:
    """Lower-case, drop punctuation/markup characters and collapse whitespace."""
    text = _NON_WORD.sub("", text.lower())
    return _WHITESPACE.sub(" ", text).strip()


def tokenize(text: str, min_length: int = DEFAULT_MIN_TOKEN_LENGTH) -> TokenSet:
    """
    Split a title into the set of words used for similarity matching.
    Words of min_length characters or fewer are too common to be useful and are dropped.
    """
    return {word for word in normalize(text).split(" ") if len(word) > min_length}


def clean_title(title: str) -> str:
    # "Headline - Reuters", "Headline | NDTV"
    title = _SOURCE_SUFFIX.sub("", title)
    return _BRACKETED.sub("", title).strip()


def clean_description(text: str, max_length: int = DESCRIPTION_MAX_LENGTH) -> str:
    text = _HTML_TAG.sub(" ", text or "")
    text = _BRACKETED.sub("", text)
    return _WHITESPACE.sub(" ", text).strip()[:max_length]


def slugify(title: str, tag: str, max_length: int = SLUG_MAX_LENGTH) -> str:
    """Stable id built from a title, e.g. slugify("PM visits Delhi", "merged") -> "merged-pm-visits-delhi"."""
    normalized = normalize(title)[:max_length]
    return f"{tag}-{_WHITESPACE.sub('-', normalized)}"
