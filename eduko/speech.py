import base64
import io
import logging
from typing import Callable

from gtts import gTTS, gTTSError

from .flows import FlowResult
from .models import SpeechInput, SpeechOutput

logger = logging.getLogger(__name__)

# Each prebuilt voice maps to one of the regional Google Translate accents.
VOICE_ACCENTS = {
    "Algenib": "com",
    "Arcturus": "co.uk",
    "Canopus": "com.au",
    "Antares": "ca",
    "Altair": "co.in",
    "Achernar": "ie",
    "Spica": "co.za",
    "Sirius": "us",
}

AUDIO_MIME = "audio/mpeg"

Synthesizer = Callable[[str, str], bytes]


class SpeechSynthesisError(RuntimeError):
    pass


def synthesize_gtts(text: str, voice: str) -> bytes:
    buffer = io.BytesIO()
    try:
        tts = gTTS(text=text, lang="en", tld=VOICE_ACCENTS[voice], slow=False)
        tts.write_to_fp(buffer)
    except (gTTSError, AssertionError) as exc:
        # gTTS asserts when nothing speakable is left after tokenizing.
        raise SpeechSynthesisError(f"Speech synthesis failed: {exc}") from exc
    return buffer.getvalue()


def to_data_uri(audio: bytes, mime: str = AUDIO_MIME) -> str:
    return f"data:{mime};base64,{base64.b64encode(audio).decode('ascii')}"


def generate_speech(data: SpeechInput, *, synthesizer: Synthesizer | None = None) -> FlowResult:
    synthesize = synthesizer or synthesize_gtts
    audio = synthesize(data.text, data.voice)
    if not audio:
        raise SpeechSynthesisError("No audio media was returned from the speech service.")
    logger.info("synthesized %d bytes of audio with voice %s", len(audio), data.voice)
    return FlowResult(output=SpeechOutput(audio_data_uri=to_data_uri(audio)))
