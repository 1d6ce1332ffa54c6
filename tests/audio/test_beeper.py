from __future__ import annotations

from array import array

import pytest

from pychip8.audio.beeper import square_wave


def test_square_wave_has_one_period() -> None:
    samples = array("h")
    samples.frombytes(square_wave(440.0, 44_100))

    assert len(samples) == 100
    assert set(samples[:50]) == {12_000}
    assert set(samples[50:]) == {-12_000}


def test_square_wave_never_shorter_than_two_samples() -> None:
    samples = array("h")
    samples.frombytes(square_wave(30_000.0, 8_000))

    assert len(samples) == 2
    assert samples[0] == -samples[1]


@pytest.mark.parametrize("frequency", [220.0, 880.0, 1000.0])
def test_square_wave_is_balanced(frequency: float) -> None:
    samples = array("h")
    samples.frombytes(square_wave(frequency, 48_000))

    assert abs(sum(samples)) <= 12_000
