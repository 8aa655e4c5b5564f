import logging
from collections import deque
from threading import Lock, Thread

from voice_assistant.config import FeedbackConfig

logger = logging.getLogger(__name__)


class Speaker:
    """Text-to-speech output with at most one active utterance.

    A new utterance stops the one in progress. Without a working TTS engine
    utterances are only logged.
    """

    STOP_TIMEOUT = 2.0

    def __init__(self, config: FeedbackConfig) -> None:
        self.config = config
        self.engine = None
        self.lock = Lock()
        self.history: deque[str] = deque(maxlen=config.history_size)
        self._thread: Thread | None = None
        self._init_tts()

    def _init_tts(self) -> None:
        if not self.config.enabled:
            return

        try:
            import pyttsx3

            self.engine = pyttsx3.init()
            self.engine.setProperty("rate", self.config.voice_rate)
            self.engine.setProperty("volume", self.config.voice_volume)
        except Exception as e:
            logger.warning("TTS initialization failed, falling back to console output: %s", e)
            self.engine = None

    @property
    def last_utterance(self) -> str | None:
        return self.history[-1] if self.history else None

    def speak(self, text: str) -> None:
        if not text:
            return

        logger.info("[SPEAK] %s", text)
        self.history.append(text)

        if self.engine is None:
            return

        with self.lock:
            if self._thread is not None and self._thread.is_alive():
                self.engine.stop()
                # The engine's run loop must exit before the next runAndWait
                self._thread.join(timeout=self.STOP_TIMEOUT)
            self._thread = Thread(target=self._say, args=(text,), daemon=True)
            self._thread.start()

    def cancel(self) -> None:
        """Stop the current utterance, if any."""
        if self.engine is None:
            return
        with self.lock:
            if self._thread is not None and self._thread.is_alive():
                self.engine.stop()

    def _say(self, text: str) -> None:
        try:
            self.engine.say(text)
            self.engine.runAndWait()
        except Exception as e:
            logger.error("TTS error: %s", e)


if __name__ == "__main__":
    import time

    from voice_assistant.logging_config import setup_logging

    setup_logging()
    speaker = Speaker(FeedbackConfig(enabled=True))
    speaker.speak("Testing speech output.")
    time.sleep(0.5)
    speaker.speak("This sentence interrupts the previous one.")
    time.sleep(3)
