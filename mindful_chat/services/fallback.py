import random
from typing import Dict, List, Optional

FALLBACK_RESPONSES: Dict[str, List[str]] = {
    "en": [
        "I'm here to support you. Could you tell me more about how you're feeling?",
        "Thank you for sharing. Would you like to try a quick breathing exercise to help center yourself?",
        "I understand this might be difficult. Remember that it's okay to take things one step at a time.",
        "I appreciate you reaching out. How can I best support you right now?",
        "Sometimes talking about our feelings can help. Would you like to explore this further?",
    ],
    "hi": [
        "मैं आपका समर्थन करने के लिए यहां हूं। क्या आप मुझे बता सकते हैं कि आप कैसा महसूस कर रहे हैं?",
        "साझा करने के लिए धन्यवाद। क्या आप अपने आप को केंद्रित करने में मदद करने के लिए एक त्वरित श्वास व्यायाम करना चाहेंगे?",
        "मैं समझता हूं कि यह मुश्किल हो सकता है। याद रखें कि एक समय में एक कदम उठाना ठीक है।",
        "मैं आपके संपर्क की सराहना करता हूं। मैं अभी आपका सबसे अच्छा समर्थन कैसे कर सकता हूं?",
        "कभी-कभी अपनी भावनाओं के बारे में बात करने से मदद मिल सकती है। क्या आप इस पर और विचार करना चाहेंगे?",
    ],
}


class FallbackPolicy:
    """
    Canned supportive replies used when the generative API is unavailable.

    Languages without their own set get the default language's replies.
    """

    def __init__(
        self,
        responses: Optional[Dict[str, List[str]]] = None,
        default_language: str = "en",
        rng: Optional[random.Random] = None,
    ) -> None:
        responses = FALLBACK_RESPONSES if responses is None else responses
        defaults = responses.get(default_language)
        if not defaults:
            raise ValueError(f"No fallback replies configured for default language '{default_language}'")
        for language, replies in responses.items():
            if any(not reply or not reply.strip() for reply in replies):
                raise ValueError(f"Empty fallback reply configured for '{language}'")

        self.responses = {language: list(replies) for language, replies in responses.items() if replies}
        self.default_language = default_language
        self.rng = rng or random.Random()

    def replies_for(self, language: str) -> List[str]:
        return self.responses.get(language) or self.responses[self.default_language]

    def choose(self, language: str) -> str:
        return self.rng.choice(self.replies_for(language))
