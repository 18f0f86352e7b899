#!/usr/bin/python
# viewer.py

# Opens a window showing a binary PPM (P6) image.
#
#   python viewer.py image.ppm
#
# Dragging with the left mouse button paints on the image
# H to plot a histogram of the channels
# P to plot each channel plane
# ESC (or closing the window) to quit

import os
import sys
import ctypes
from typing import List, Optional, Tuple

import cv2
import numpy as np
import pygame
from numpy.typing import NDArray

import debug
import profiler
from config import global_config
from pixmap import PixelMap
from ppm import DecodeError, read_ppm
from profiler import FrameTimer, Profiler

# Make windows not scale this window (pixels do have to be perfect)
if sys.platform == "win32":
    ctypes.windll.user32.SetProcessDPIAware()

view_config = global_config

ENABLE_PROFILER = True
profiler.enabled_profiler = ENABLE_PROFILER

COLOR_BLACK = (0, 0, 0)

USAGE = "usage: viewer.py <image.ppm>"


class Canvas:
    """
    The interleaved (H, W, 3) RGB buffer that ends up on screen, plus the
    mouse drag state used to paint on it. Knows nothing about the window.
    """
    def __init__(self, pixmap: PixelMap):
        self.width = pixmap.width
        self.height = pixmap.height
        self.rgb_buffer: NDArray[np.uint8]  # (H, W, 3) RGB values
        self.rgb_buffer = np.ascontiguousarray(pixmap.to_interleaved())
        self.dragging = False
        self.last_mouse_pos: Tuple[int, int] = (0, 0)

    def _is_bounded(self, position: Tuple[int, int]) -> bool:
        x, y = position
        return 0 <= x < self.width and 0 <= y < self.height

    def draw_line(self, start: Tuple[int, int], end: Tuple[int, int], color: Tuple[int, int, int], width: int = 1) -> None:
        """
        Draws a line on the RGB buffer using OpenCV. Parts outside the
        buffer are clipped. A zero-length line marks a single pixel.
        """
        x1, y1 = map(int, start)
        x2, y2 = map(int, end)
        cv2.line(self.rgb_buffer, (x1, y1), (x2, y2), color, thickness=width)

    def press(self, pos: Tuple[int, int]) -> None:
        self.dragging = True
        self.last_mouse_pos = pos

    def release(self) -> None:
        self.dragging = False

    def drag_to(self, pos: Tuple[int, int]) -> None:
        if not self.dragging:
            return
        # Connect to the previous position so fast drags leave no gaps
        if self._is_bounded(pos) or self._is_bounded(self.last_mouse_pos):
            self.draw_line(self.last_mouse_pos, pos, view_config.brush_color.val, view_config.brush_size.val)
        self.last_mouse_pos = pos


class Viewer:
    def __init__(self, pixmap: PixelMap) -> None:
        self.pixmap = pixmap
        self.canvas = Canvas(pixmap)
        self.width = pixmap.width
        self.height = pixmap.height

        os.environ["SDL_VIDEO_WINDOW_POS"] = f"{view_config.window_x.val},{view_config.window_y.val}"
        pygame.init()
        pygame.display.set_caption(view_config.window_title.val)
        self.screen = pygame.display.set_mode((self.width, self.height))
        self.clock = pygame.time.Clock()
        self.frame_timer = FrameTimer()
        self.frame_count = 0
        self.running = True

    def handle_event(self, event) -> None:
        if event.type == pygame.QUIT:
            self.running = False
        elif event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                self.running = False
            elif event.key == pygame.K_h:
                debug.plot_channel_histogram(self.pixmap)
            elif event.key == pygame.K_p:
                debug.draw_channels(self.pixmap)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self.canvas.press(event.pos)
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self.canvas.release()
        elif event.type == pygame.MOUSEMOTION:
            self.canvas.drag_to(event.pos)

    @Profiler.timed("render_buffer")
    def render_buffer(self):
        # surfarray wants (W, H, 3)
        surface = pygame.surfarray.make_surface(self.canvas.rgb_buffer.swapaxes(0, 1))
        self.screen.blit(surface, (0, 0))

    def run(self):
        while self.running:
            self.frame_count += 1
            self.frame_timer.start()
            self.screen.fill(COLOR_BLACK)

            Profiler.profile_accumulate_start("events")
            for event in pygame.event.get():
                self.handle_event(event)
            Profiler.profile_accumulate_end("events")

            self.render_buffer()
            pygame.display.flip()
            self.frame_timer.end(log=view_config.log_frame_time.val)

            interval = view_config.profile_report_interval.val
            if interval > 0 and self.frame_count % interval == 0:
                Profiler.profile_accumulate_report(intervals=interval)

            self.clock.tick(view_config.target_fps.val)

        pygame.quit()


def load_image(filepath: str) -> Optional[PixelMap]:
    """
    Reads filepath and prints what went wrong, if anything. A truncated image
    is still returned (the missing pixels are black), anything else is None.
    """
    result = read_ppm(filepath)
    if result.ok:
        return result.pixmap
    if result.error == DecodeError.TRUNCATED_PAYLOAD:
        print(f"Warning. {result.message}")
        return result.pixmap
    print(f"Error. {result.message}")
    return None


def main(argv: List[str]) -> int:
    if len(argv) != 1:
        print(USAGE)
        return 1
    pixmap = load_image(argv[0])
    if pixmap is None:
        return 1
    print(f"Loaded {argv[0]}: {pixmap.width}x{pixmap.height}, max channel value {pixmap.max_channel_value}")
    Viewer(pixmap).run()
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
