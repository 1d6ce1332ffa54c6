"""Square-wave tone played while the sound timer is running."""

from __future__ import annotations

from array import array

from pychip8.utils import debug_enabled, debug_log

_AMPLITUDE = 12_000


class SquareWaveBeeper:
    """Single fixed-pitch tone gated on and off by the sound timer.

    The tone buffer is built once; :meth:`set_active` only starts or stops
    a looping mixer channel.
    """

    def __init__(
        self,
        *,
        frequency: float = 440.0,
        sample_rate: int = 44_100,
        volume: float = 0.25,
    ) -> None:
        if frequency <= 0.0:
            raise ValueError("frequency must be positive")
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required for audio output") from exc
        if pygame.mixer.get_init() is None:
            raise RuntimeError("pygame mixer must be initialised before creating SquareWaveBeeper")

        self._mixer = pygame.mixer
        self.frequency = frequency
        self._volume = min(1.0, max(0.0, volume))
        self._tone = self._mixer.Sound(buffer=square_wave(frequency, max(1, sample_rate)))
        self._channel = None
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def set_active(self, enabled: bool) -> None:
        """Start or stop the tone; repeated calls with the same value are no-ops."""

        if bool(enabled) == self._active:
            return
        if enabled:
            self._start()
        else:
            self._stop()

    def shutdown(self) -> None:
        self._stop()
        self._channel = None

    def _start(self) -> None:
        if self._channel is None:
            self._channel = self._mixer.find_channel(True)
        if self._channel is None:
            if debug_enabled("audio"):
                debug_log("audio", "no free mixer channel")
            return
        self._channel.play(self._tone, loops=-1)
        self._channel.set_volume(self._volume)
        self._active = True
        if debug_enabled("audio"):
            debug_log("audio", "tone on %.0fHz", self.frequency)

    def _stop(self) -> None:
        if self._channel is not None and self._active:
            self._channel.stop()
            if debug_enabled("audio"):
                debug_log("audio", "tone off")
        self._active = False


def square_wave(frequency: float, sample_rate: int) -> bytes:
    """One period of a signed 16-bit mono square wave at ``frequency``."""

    period = max(2, round(sample_rate / frequency))
    high = period // 2
    samples = array("h", [_AMPLITUDE] * high)
    samples.extend([-_AMPLITUDE] * (period - high))
    return samples.tobytes()


__all__ = ["SquareWaveBeeper", "square_wave"]
