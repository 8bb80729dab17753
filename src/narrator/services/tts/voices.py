"""Voice catalog and provider voice lookup tables."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Literal

Gender = Literal["MALE", "FEMALE", "NEUTRAL"]


@dataclass(frozen=True)
class Voice:
    name: str
    gender: Gender
    type: str
    display_name: str

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["displayName"] = payload.pop("display_name")
        return payload


def _neural(name: str, gender: Gender, display_name: str) -> Voice:
    return Voice(name=name, gender=gender, type="Neural", display_name=display_name)


# Voices offered to the UI, keyed by BCP-47 language code
VOICES_BY_LANGUAGE: dict[str, list[Voice]] = {
    "en-US": [
        _neural("en-US-Neural2-A", "MALE", "Alex"),
        _neural("en-US-Neural2-C", "FEMALE", "Clara"),
        _neural("en-US-Neural2-D", "MALE", "David"),
        _neural("en-US-Neural2-E", "FEMALE", "Emma"),
        _neural("en-US-Neural2-F", "FEMALE", "Fiona"),
        _neural("en-US-Neural2-G", "FEMALE", "Grace"),
        _neural("en-US-Neural2-H", "FEMALE", "Hannah"),
        _neural("en-US-Neural2-I", "MALE", "Ian"),
        _neural("en-US-Neural2-J", "MALE", "James"),
    ],
    "es-ES": [
        _neural("es-ES-Neural2-A", "FEMALE", "Alma"),
        _neural("es-ES-Neural2-B", "MALE", "Berto"),
        _neural("es-ES-Neural2-C", "FEMALE", "Carmen"),
        _neural("es-ES-Neural2-D", "FEMALE", "Dulce"),
        _neural("es-ES-Neural2-E", "FEMALE", "Elena"),
        _neural("es-ES-Neural2-F", "MALE", "Federico"),
    ],
    "fr-FR": [
        _neural("fr-FR-Neural2-A", "FEMALE", "Amélie"),
        _neural("fr-FR-Neural2-B", "MALE", "Bernard"),
        _neural("fr-FR-Neural2-C", "FEMALE", "Céline"),
        _neural("fr-FR-Neural2-D", "MALE", "Denis"),
        _neural("fr-FR-Neural2-E", "FEMALE", "Élise"),
    ],
    "de-DE": [
        _neural("de-DE-Neural2-A", "FEMALE", "Anna"),
        _neural("de-DE-Neural2-B", "MALE", "Bruno"),
        _neural("de-DE-Neural2-C", "FEMALE", "Clara"),
        _neural("de-DE-Neural2-D", "MALE", "David"),
        _neural("de-DE-Neural2-F", "FEMALE", "Frieda"),
    ],
    "it-IT": [
        _neural("it-IT-Neural2-A", "FEMALE", "Aurora"),
        _neural("it-IT-Neural2-C", "MALE", "Carlo"),
    ],
    "ja-JP": [
        _neural("ja-JP-Neural2-B", "FEMALE", "Chika"),
        _neural("ja-JP-Neural2-C", "MALE", "Daichi"),
        _neural("ja-JP-Neural2-D", "MALE", "Genta"),
    ],
    "cmn-CN": [
        _neural("cmn-CN-Neural2-A", "FEMALE", "Xiaoxiao"),
        _neural("cmn-CN-Neural2-B", "MALE", "Yunxi"),
    ],
}

# Gemini prebuilt voice for each catalog voice
GEMINI_VOICE_MAP: dict[str, str] = {
    "en-US-Neural2-A": "Kore",
    "en-US-Neural2-C": "Charon",
    "en-US-Neural2-D": "Kore",
    "en-US-Neural2-E": "Charon",
    "en-US-Neural2-F": "Puck",
    "en-US-Neural2-G": "Charon",
    "en-US-Neural2-H": "Puck",
    "en-US-Neural2-I": "Kore",
    "en-US-Neural2-J": "Kore",
    "es-ES-Neural2-A": "Charon",
    "es-ES-Neural2-B": "Kore",
    "es-ES-Neural2-C": "Puck",
    "es-ES-Neural2-D": "Charon",
    "es-ES-Neural2-E": "Puck",
    "es-ES-Neural2-F": "Kore",
    "fr-FR-Neural2-A": "Charon",
    "fr-FR-Neural2-B": "Kore",
    "fr-FR-Neural2-C": "Puck",
    "fr-FR-Neural2-D": "Kore",
    "fr-FR-Neural2-E": "Charon",
    "de-DE-Neural2-A": "Charon",
    "de-DE-Neural2-B": "Kore",
    "de-DE-Neural2-C": "Puck",
    "de-DE-Neural2-D": "Kore",
    "de-DE-Neural2-F": "Charon",
    "it-IT-Neural2-A": "Aoede",
    "it-IT-Neural2-C": "Orus",
    "ja-JP-Neural2-B": "Leda",
    "ja-JP-Neural2-C": "Fenrir",
    "ja-JP-Neural2-D": "Orus",
    "cmn-CN-Neural2-A": "Zephyr",
    "cmn-CN-Neural2-B": "Fenrir",
}
DEFAULT_GEMINI_VOICE = "Kore"

# Google Cloud TTS accepts catalog names directly; anything else uses this voice
GOOGLE_CLOUD_VOICES: frozenset[str] = frozenset(
    voice.name for voices in VOICES_BY_LANGUAGE.values() for voice in voices
)
DEFAULT_GOOGLE_CLOUD_VOICE = "en-US-Neural2-C"
DEFAULT_GOOGLE_CLOUD_LANGUAGE = "en-US"

# Sample sentences for voice previews, keyed by primary language subtag
PREVIEW_TEXTS: dict[str, str] = {
    "en": "Hello, this is how I sound. I can help you convert your text to natural speech.",
    "es": "Hola, así es como sueno. Puedo ayudarte a convertir tu texto en habla natural.",
    "fr": "Bonjour, voici comment je sonne. Je peux vous aider à convertir votre texte en parole naturelle.",
    "de": "Hallo, so klinge ich. Ich kann Ihnen helfen, Ihren Text in natürliche Sprache umzuwandeln.",
    "it": "Ciao, ecco come suono. Posso aiutarti a convertire il tuo testo in discorso naturale.",
    "pt": "Olá, é assim que eu soo. Posso ajudá-lo a converter seu texto em fala natural.",
    "ja": "こんにちは、これが私の声です。テキストを自然な音声に変換するお手伝いができます。",
    "ko": "안녕하세요, 이것이 제 목소리입니다. 텍스트를 자연스러운 음성으로 변환하는 데 도움을 드릴 수 있습니다.",
    "cmn": "你好，这是我的声音。我可以帮助你把文字转换成自然的语音。",
}


def get_voices_for_language(language: str) -> list[Voice]:
    """Return the catalog voices for ``language`` (empty when unsupported)."""
    return list(VOICES_BY_LANGUAGE.get(language, []))


def map_voice_to_gemini(voice_id: str) -> str:
    return GEMINI_VOICE_MAP.get(voice_id, DEFAULT_GEMINI_VOICE)


def map_voice_to_google_cloud(voice_id: str, language_code: str) -> tuple[str, str]:
    """Return ``(voice_name, language_code)`` for the Google Cloud TTS request.

    Catalog voices carry their locale as a name prefix (``fr-FR-Neural2-A``);
    that locale wins over ``language_code`` because Google rejects mismatches.
    """
    if voice_id in GOOGLE_CLOUD_VOICES:
        return voice_id, voice_id.rsplit("-", 2)[0]
    return DEFAULT_GOOGLE_CLOUD_VOICE, DEFAULT_GOOGLE_CLOUD_LANGUAGE


def get_preview_text(language: str) -> str:
    primary = language.split("-")[0].lower()
    return PREVIEW_TEXTS.get(primary, PREVIEW_TEXTS["en"])


__all__ = [
    "DEFAULT_GEMINI_VOICE",
    "DEFAULT_GOOGLE_CLOUD_LANGUAGE",
    "DEFAULT_GOOGLE_CLOUD_VOICE",
    "GEMINI_VOICE_MAP",
    "VOICES_BY_LANGUAGE",
    "Voice",
    "get_preview_text",
    "get_voices_for_language",
    "map_voice_to_gemini",
    "map_voice_to_google_cloud",
]
