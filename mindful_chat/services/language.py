import re

DEFAULT_LANGUAGE = "en"

SUPPORTED_LANGUAGES = {
    "en": "English",
    "hi": "Hindi",
    "bn": "Bengali",
    "te": "Telugu",
    "ta": "Tamil",
    "mr": "Marathi",
    "gu": "Gujarati",
    "kn": "Kannada",
    "ml": "Malayalam",
    "pa": "Punjabi",
}

DEVANAGARI = re.compile("[\u0900-\u097F]")

# Scripts that identify a single display language. Marathi shares the
# Devanagari block with Hindi and can only be chosen explicitly.
SCRIPT_LANGUAGES = [
    (re.compile("[\u0980-\u09FF]"), "bn"),
    (re.compile("[\u0A00-\u0A7F]"), "pa"),
    (re.compile("[\u0A80-\u0AFF]"), "gu"),
    (re.compile("[\u0B80-\u0BFF]"), "ta"),
    (re.compile("[\u0C00-\u0C7F]"), "te"),
    (re.compile("[\u0C80-\u0CFF]"), "kn"),
    (re.compile("[\u0D00-\u0D7F]"), "ml"),
]


def detect_language(text: str) -> str:
    """
    Classify text by the Unicode script it is written in.

    Any Devanagari character means Hindi, regardless of what else the text
    contains. Otherwise the earliest character from one of the other
    supported Indic scripts decides. Everything else is English.
    """
    if not text:
        return DEFAULT_LANGUAGE

    if DEVANAGARI.search(text):
        return "hi"

    first_match = None
    for pattern, language in SCRIPT_LANGUAGES:
        match = pattern.search(text)
        if match and (first_match is None or match.start() < first_match[0]):
            first_match = (match.start(), language)

    return first_match[1] if first_match else DEFAULT_LANGUAGE


def language_name(code: str) -> str:
    return SUPPORTED_LANGUAGES.get(code, code)
