# config.py

from typing import Generic, TypeVar

T = TypeVar('T')

class ConfigEntry(Generic[T]):
    def __init__(self, default_val: T, name=None, mutable=True):
        self._mutable = True  # Allow it to be mutable at the start
        if name == None:
            name = f"UnnamedConfigEntry_{id(self)}"
        self.name = name
        self.val = default_val
        self._mutable = mutable  # Then decide whether to remain mutable

    @property
    def val(self) -> T:
        return self._val

    @val.setter
    def val(self, new_val: T):
        if not self._mutable:
            raise AttributeError(f"{self.name} is immutable")
        self._val = new_val

class Config:
    def __init__(self):
        # === Window settings ===
        # Set once when the window opens, the window is then sized to the image
        self.window_title = ConfigEntry("PPM Viewer", name="window_title", mutable=False)
        self.window_x = ConfigEntry(100, name="window_x", mutable=False)
        self.window_y = ConfigEntry(100, name="window_y", mutable=False)
        self.target_fps = ConfigEntry(60, name="target_fps")

        # === Brush settings ===
        # Left mouse drag paints into the displayed image
        self.brush_color = ConfigEntry((255, 0, 0), name="brush_color")
        self.brush_size = ConfigEntry(1, name="brush_size")

        # === Logging ===
        self.log_frame_time = ConfigEntry(True, name="log_frame_time")  # Print "Frame time: ...ms" every frame
        self.profile_report_interval = ConfigEntry(60, name="profile_report_interval")  # In frames

    def reset_defaults(self):
        """Resets all configs to their default values."""
        self.__init__()  # Simple way to restore defaults


# Global instance
global_config = Config()
