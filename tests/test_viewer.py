import numpy as np
import pygame
import pytest

import viewer
from config import global_config
from conftest import build_ppm
from pixmap import PixelMap
from viewer import Canvas


@pytest.fixture(autouse=True)
def default_config():
    global_config.reset_defaults()
    yield
    global_config.reset_defaults()


@pytest.fixture
def canvas():
    pixmap = PixelMap(8, 6)
    pixmap.green[:] = 40
    return Canvas(pixmap)


def test_canvas_starts_from_image(canvas):
    assert canvas.rgb_buffer.shape == (6, 8, 3)
    assert canvas.rgb_buffer.flags["C_CONTIGUOUS"]
    assert (canvas.rgb_buffer[..., 1] == 40).all()


def test_canvas_does_not_touch_pixmap():
    pixmap = PixelMap(2, 2)
    canvas = Canvas(pixmap)
    canvas.press((0, 0))
    canvas.drag_to((1, 1))
    assert not pixmap.red.any()


def test_drag_paints_brush_color(canvas):
    canvas.press((1, 1))
    canvas.drag_to((1, 1))
    assert list(canvas.rgb_buffer[1, 1]) == [255, 0, 0]
    assert list(canvas.rgb_buffer[0, 0]) == [0, 40, 0]


def test_drag_connects_positions(canvas):
    canvas.press((0, 2))
    canvas.drag_to((5, 2))
    assert (canvas.rgb_buffer[2, 0:6, 0] == 255).all()
    assert canvas.last_mouse_pos == (5, 2)


def test_motion_without_press_does_nothing(canvas):
    before = canvas.rgb_buffer.copy()
    canvas.drag_to((3, 3))
    canvas.press((3, 3))
    canvas.release()
    canvas.drag_to((4, 4))
    assert np.array_equal(canvas.rgb_buffer, before)


def test_drag_outside_is_clipped(canvas):
    before = canvas.rgb_buffer.copy()
    canvas.press((100, 100))
    canvas.drag_to((120, 130))
    assert np.array_equal(canvas.rgb_buffer, before)


def test_brush_color_from_config(canvas):
    global_config.brush_color.val = (0, 0, 255)
    canvas.press((2, 2))
    canvas.drag_to((2, 2))
    assert list(canvas.rgb_buffer[2, 2]) == [0, 0, 255]


def test_main_requires_one_argument(capsys):
    assert viewer.main([]) == 1
    assert viewer.main(["a.ppm", "b.ppm"]) == 1
    assert viewer.USAGE in capsys.readouterr().out


def test_main_open_failure(tmp_path, capsys):
    assert viewer.main([str(tmp_path / "missing.ppm")]) == 1
    assert capsys.readouterr().out.startswith("Error. Unable to open")


def test_main_header_error(write_file, capsys):
    assert viewer.main([write_file(b"P3\n1 1\n255\n")]) == 1
    assert "Header file format error" in capsys.readouterr().out


def test_load_image_keeps_truncated(write_file, capsys):
    pixmap = viewer.load_image(write_file(build_ppm(2, 1, [9, 9, 9])))
    assert pixmap is not None
    assert pixmap.pixel(0, 0) == (9, 9, 9)
    assert pixmap.pixel(1, 0) == (0, 0, 0)
    out = capsys.readouterr().out
    assert out.startswith("Warning. ")
    assert "truncated" in out


def test_main_runs_viewer(write_file, two_by_one, monkeypatch):
    shown = []

    class FakeViewer:
        def __init__(self, pixmap):
            shown.append(pixmap)

        def run(self):
            pass

    monkeypatch.setattr(viewer, "Viewer", FakeViewer)
    assert viewer.main([write_file(two_by_one)]) == 0
    assert shown[0].pixel(1, 0) == (200, 210, 220)


@pytest.fixture
def window(monkeypatch):
    monkeypatch.setenv("SDL_VIDEODRIVER", "dummy")
    monkeypatch.setenv("SDL_VIDEO_WINDOW_POS", "0,0")
    global_config.log_frame_time.val = False
    pixmap = PixelMap(8, 6)
    pixmap.blue[:] = 90
    view = viewer.Viewer(pixmap)
    yield view
    pygame.quit()


def mouse(event_type, pos, button=1):
    if event_type == pygame.MOUSEMOTION:
        return pygame.event.Event(event_type, pos=pos, rel=(0, 0), buttons=(1, 0, 0))
    return pygame.event.Event(event_type, pos=pos, button=button)


def test_window_matches_image(window):
    assert window.screen.get_size() == (8, 6)
    assert window.running


def test_quit_event_stops(window):
    window.handle_event(pygame.event.Event(pygame.QUIT))
    assert not window.running


def test_escape_stops(window):
    window.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE))
    assert not window.running


def test_other_keys_keep_running(window):
    window.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_a))
    assert window.running


def test_left_drag_paints(window):
    window.handle_event(mouse(pygame.MOUSEBUTTONDOWN, (1, 1)))
    window.handle_event(mouse(pygame.MOUSEMOTION, (4, 1)))
    window.handle_event(mouse(pygame.MOUSEBUTTONUP, (4, 1)))
    window.handle_event(mouse(pygame.MOUSEMOTION, (4, 5)))
    buffer = window.canvas.rgb_buffer
    assert (buffer[1, 1:5, 0] == 255).all()
    assert list(buffer[5, 4]) == [0, 0, 90]
    assert not window.canvas.dragging


def test_right_button_does_not_paint(window):
    before = window.canvas.rgb_buffer.copy()
    window.handle_event(mouse(pygame.MOUSEBUTTONDOWN, (2, 2), button=3))
    window.handle_event(mouse(pygame.MOUSEMOTION, (5, 2)))
    assert np.array_equal(window.canvas.rgb_buffer, before)
    assert not window.canvas.dragging


def test_debug_keys_dispatch(window, monkeypatch):
    calls = []
    monkeypatch.setattr(viewer.debug, "plot_channel_histogram", lambda pixmap: calls.append(("h", pixmap)))
    monkeypatch.setattr(viewer.debug, "draw_channels", lambda pixmap: calls.append(("p", pixmap)))
    window.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_h))
    window.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_p))
    assert calls == [("h", window.pixmap), ("p", window.pixmap)]


def test_run_exits_on_posted_quit(window):
    pygame.event.post(pygame.event.Event(pygame.QUIT))
    window.run()
    assert not window.running
    assert window.frame_count == 1
