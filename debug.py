# debug.py
# Quick matplotlib views of a decoded image. Handy from the viewer (press H or
# P) or from a debugger session to check what actually came out of a file.

import numpy as np
import matplotlib.pyplot as plt
import matplotlib.patches as patches

from pixmap import PixelMap

CHANNEL_NAMES = ("red", "green", "blue")
CHANNEL_CMAPS = ("Reds", "Greens", "Blues")


def _planes(pixmap: PixelMap):
    return [channel.reshape((pixmap.height, pixmap.width)) for channel in (pixmap.red, pixmap.green, pixmap.blue)]


def draw_channels(pixmap: PixelMap, show=True):
    """
    Show the composite image next to each channel plane. Hovering a plane
    reports the raw sample under the cursor.
    """
    h, w = pixmap.height, pixmap.width
    fig, axes = plt.subplots(1, 4, figsize=(16, 4))

    axes[0].imshow(pixmap.to_interleaved())
    axes[0].set_title("rgb")
    axes[0].add_patch(patches.Rectangle((0, 0), w-1, h-1, linewidth=1, edgecolor='red', facecolor='none'))

    for ax, plane, name, cmap in zip(axes[1:], _planes(pixmap), CHANNEL_NAMES, CHANNEL_CMAPS):
        ax.imshow(plane, cmap=cmap, vmin=0, vmax=pixmap.max_channel_value)
        ax.set_title(name)

        def format_coord(x: float, y: float, plane=plane) -> str:
            xi, yi = int(x + 0.5), int(y + 0.5)
            if 0 <= yi < h and 0 <= xi < w:
                return f"x={xi}, y={yi}, val={plane[yi, xi]}"
            return ""
        ax.format_coord = format_coord

    for ax in axes:
        ax.axis('off')

    if show:
        plt.show()
    return fig


def plot_channel_histogram(pixmap: PixelMap, show=True):
    """
    Histogram with one bin per sample value for every channel.
    """
    fig, ax = plt.subplots(figsize=(8, 5))
    bins = np.arange(0, 257)
    for channel, name in zip((pixmap.red, pixmap.green, pixmap.blue), CHANNEL_NAMES):
        ax.hist(channel, bins=bins, color=name, alpha=0.4, label=name)
    ax.axvline(pixmap.max_channel_value, color='black', linestyle='--', label="max channel value")
    ax.set_xlabel("sample value")
    ax.set_ylabel("pixels")
    ax.set_title(f"Channel histogram ({pixmap.width}x{pixmap.height})")
    ax.grid(True, linestyle='--', alpha=0.5)
    ax.legend()

    if show:
        plt.show()
    return fig
