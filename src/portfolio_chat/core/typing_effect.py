from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Iterator


@dataclass(frozen=True)
class TypingConfig:
    chars_per_second: float = 110.0
    # replies this short are shown at once
    min_length_for_animation: int = 48
    frame_interval_s: float = 1 / 60

    @property
    def chars_per_frame(self) -> int:
        return max(1, round(self.chars_per_second * self.frame_interval_s))


REPLY_TYPING = TypingConfig(chars_per_second=160.0)


def typing_chunks(text: Any, config: TypingConfig = TypingConfig()) -> Iterator[str]:
    """Yield successive slices of ``text``, one per animation frame."""
    if not isinstance(text, str):
        yield "" if text is None else str(text)
        return
    if len(text) <= config.min_length_for_animation:
        yield text
        return
    step = config.chars_per_frame
    for i in range(0, len(text), step):
        yield text[i : i + step]


class TypingController:
    """Drives one typing animation; ``skip`` flushes the rest, ``cancel`` stops output."""

    def __init__(
        self,
        config: TypingConfig = TypingConfig(),
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config
        self._sleep = sleep
        self._skip = threading.Event()
        self._cancel = threading.Event()

    def skip(self) -> None:
        self._skip.set()

    def cancel(self) -> None:
        self._cancel.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    def stream(self, text: Any) -> Iterator[str]:
        chunks = typing_chunks(text, self.config)
        first = True
        for chunk in chunks:
            if not first and not self._skip.is_set():
                self._sleep(self.config.frame_interval_s)
            first = False
            if self._cancel.is_set():
                return
            if self._skip.is_set():
                yield chunk + "".join(chunks)
                return
            yield chunk
