"""Script-based language detection for English, Hindi and Marathi."""

import re

DEVANAGARI_PATTERN = re.compile(r"[\u0900-\u097F]")

# Marathi and Hindi share Devanagari, so common Marathi words decide between them.
MARATHI_MARKERS = ("आहे", "आणि", "मी", "तू", "हे", "ते", "का", "कसे", "माझे")


def detect_language(text: str) -> str:
    """Guess the language code of a transcribed or typed message.

    Returns:
        "mr" or "hi" for Devanagari text, "en" otherwise
    """
    if not DEVANAGARI_PATTERN.search(text):
        return "en"

    if any(word in text for word in MARATHI_MARKERS):
        return "mr"
    return "hi"
