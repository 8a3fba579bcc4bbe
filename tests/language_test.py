import pytest
from mindful_chat.services.language import detect_language, language_name


@pytest.mark.parametrize(
    "text",
    ["नमस्ते", "मैं ठीक हूँ", "Hello नमस्ते", "I feel उदास today", "१२३"],
)
def test_devanagari_is_hindi(text):
    assert detect_language(text) == "hi"


@pytest.mark.parametrize(
    "text",
    ["Hello", "I can't sleep, I keep worrying about exams.", "1234 !?", "   "],
)
def test_ascii_is_english(text):
    assert detect_language(text) == "en"


def test_empty_string_is_english():
    assert detect_language("") == "en"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("আমি ভালো আছি", "bn"),
        ("ਸਤ ਸ੍ਰੀ ਅਕਾਲ", "pa"),
        ("કેમ છો", "gu"),
        ("வணக்கம்", "ta"),
        ("నమస్కారం", "te"),
        ("ನಮಸ್ಕಾರ", "kn"),
        ("നമസ്കാരം", "ml"),
    ],
)
def test_other_indic_scripts(text, expected):
    assert detect_language(text) == expected


def test_devanagari_wins_over_other_scripts():
    assert detect_language("வணக்கம் नमस्ते") == "hi"


def test_earliest_script_decides():
    assert detect_language("hello வணக்கம் আমি") == "ta"


def test_accented_latin_is_english():
    assert detect_language("¿Cómo estás? Ça va.") == "en"


def test_language_name():
    assert language_name("hi") == "Hindi"
    assert language_name("en") == "English"
    assert language_name("fr") == "fr"
