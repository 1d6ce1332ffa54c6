"""Unit tests for the framebuffer renderer."""

from __future__ import annotations

import pytest

from pychip8.video import MONOCHROME, PHOSPHOR, VIDEO_HEIGHT, VIDEO_WIDTH, Framebuffer, Renderer, validate_palette


def test_render_lit_and_dark_cells() -> None:
    buffer = Framebuffer()
    buffer.draw_sprite(0, 0, [0b1000_0000])
    result = Renderer(MONOCHROME).render(buffer.view())

    assert result.width == VIDEO_WIDTH
    assert result.height == VIDEO_HEIGHT
    assert result.get_pixel(0, 0) == (255, 255, 255)
    assert result.get_pixel(1, 0) == (0, 0, 0)
    assert result.get_pixel(0, 1) == (0, 0, 0)


def test_render_scale_factor() -> None:
    buffer = Framebuffer()
    buffer.draw_sprite(63, 0, [0b1000_0000])
    result = Renderer(PHOSPHOR).render(buffer.view(), scale=3)

    on = PHOSPHOR[1]
    off = PHOSPHOR[0]
    assert result.width == VIDEO_WIDTH * 3
    assert result.height == VIDEO_HEIGHT * 3
    assert result.get_pixel(189, 0) == on
    assert result.get_pixel(191, 2) == on
    assert result.get_pixel(188, 0) == off
    assert result.get_pixel(189, 3) == off
    assert len(result.pixels) == result.width * result.height * 3


def test_render_rejects_bad_input() -> None:
    renderer = Renderer()

    with pytest.raises(ValueError):
        renderer.render(bytes(VIDEO_WIDTH * VIDEO_HEIGHT), scale=0)
    with pytest.raises(ValueError):
        renderer.render(bytes(10))


def test_validate_palette() -> None:
    assert validate_palette([(0, 0, 0), (256, 1, 2)]) == ((0, 0, 0), (0, 1, 2))
    with pytest.raises(ValueError):
        validate_palette([(0, 0, 0)])
    with pytest.raises(ValueError):
        validate_palette([(0, 0), (1, 1, 1)])
