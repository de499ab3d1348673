"""Sentence boundary detection for scientific and medical prose."""

import re

# Abbreviations whose trailing period never ends a sentence.
PROTECTED_ABBREVIATIONS: tuple[str, ...] = (
    "Fig.",
    "Dr.",
    "Mr.",
    "Mrs.",
    "Ms.",
    "Prof.",
    "Sr.",
    "Jr.",
    "No.",
    "Vol.",
    "vs.",
    "etc.",
    "i.e.",
    "e.g.",
    "et al.",
    "cf.",
    "ca.",
    "approx.",
)

# Whole words only, longest first so alternation never stops at a shorter prefix.
ABBREVIATION_PATTERN = re.compile(
    r"(?<!\w)(?:"
    + "|".join(
        re.escape(abbr)
        for abbr in sorted(PROTECTED_ABBREVIATIONS, key=len, reverse=True)
    )
    + ")",
    re.IGNORECASE,
)
DECIMAL_PATTERN = re.compile(r"\d+\.\d+")

# Terminal punctuation, then whitespace, then an ASCII capital.
SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+(?=[A-Z])")

# Private-use code points cannot appear in extracted text.
_PLACEHOLDER_OPEN = "\ue000"
_PLACEHOLDER_CLOSE = "\ue001"
_PLACEHOLDER_PATTERN = re.compile(f"{_PLACEHOLDER_OPEN}(\\d+){_PLACEHOLDER_CLOSE}")


def split_sentences(text: str | None) -> list[str]:
    """Split text into sentences, protecting abbreviations and decimals.

    Every protected abbreviation (case-insensitive) and every decimal number
    is swapped for a placeholder before splitting, then restored verbatim.
    Text without a detectable boundary comes back as a single sentence.

    Args:
        text: The text to split.

    Returns:
        Trimmed, non-empty sentences in order.
    """
    if not text or not text.strip():
        return []

    protected: list[str] = []

    def _protect(match: re.Match[str]) -> str:
        protected.append(match.group())
        return f"{_PLACEHOLDER_OPEN}{len(protected) - 1}{_PLACEHOLDER_CLOSE}"

    masked = ABBREVIATION_PATTERN.sub(_protect, text)
    masked = DECIMAL_PATTERN.sub(_protect, masked)

    sentences: list[str] = []
    for part in SENTENCE_BOUNDARY.split(masked):
        part = part.strip()
        if part:
            sentences.append(
                _PLACEHOLDER_PATTERN.sub(lambda m: protected[int(m.group(1))], part)
            )
    return sentences


def last_sentences(text: str | None, count: int) -> list[str]:
    """Return up to the last ``count`` sentences of ``text``."""
    if count <= 0:
        return []
    return split_sentences(text)[-count:]
