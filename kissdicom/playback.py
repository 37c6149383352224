"""Frame playback control: play, fast forward, fast rewind and seeking."""

from __future__ import annotations

from enum import Enum
from typing import Callable, Optional


class PlaybackMode(Enum):
    """Which timer is running."""

    STOPPED = "stopped"
    PLAYING = "playing"
    FORWARD = "forward"
    BACKWARD = "backward"


class Button(Enum):
    """Control buttons."""

    NEXT = "next"
    NEXT_FAST = "next_fast"
    PREV = "prev"
    PREV_FAST = "prev_fast"
    PLAY = "play"
    PLUS = "plus"
    MINUS = "minus"


class PlaybackController:
    """State of a frame player driven by timer ticks.

    The slider position is reported through on_seek; the host shows that
    frame and reports back with update_time.  Without a callback the
    controller reports back to itself.
    """

    DEFAULT_FPS = 10

    def __init__(
        self,
        on_seek: Optional[Callable[[int], None]] = None,
        fps: int = DEFAULT_FPS,
    ) -> None:
        self.on_seek = on_seek
        self.time = 0
        self.total = 0
        self.position = 0
        self.maximum = 0
        self.mode = PlaybackMode.STOPPED
        self.paused = True
        self.visible = True
        self.fps = self.DEFAULT_FPS
        self.set_fps(fps)

    @property
    def play_interval(self) -> int:
        """Milliseconds between frames while playing."""
        return 1000 // self.fps

    @property
    def step_interval(self) -> int:
        """Milliseconds between frames while fast forwarding or rewinding."""
        return 400 // self.fps

    @property
    def running(self) -> bool:
        return self.mode is not PlaybackMode.STOPPED

    def _seek(self, value: int) -> None:
        value = max(0, min(value, self.maximum))
        if value == self.position:
            return
        self.position = value
        if self.on_seek is not None:
            self.on_seek(value)
        else:
            self.update_time(value, self.total)

    def _set_maximum(self, maximum: int) -> None:
        self.maximum = max(0, maximum)
        if self.position > self.maximum:
            self._seek(self.maximum)

    def _halt(self) -> None:
        self.mode = PlaybackMode.STOPPED

    def set_time(self, time: int) -> None:
        """Move to a frame chosen from outside."""
        self.time = time
        self._seek(time)

    def update_time(self, time: int, total: int) -> None:
        """Take the frame now shown and the frame count from the host."""
        self.time = time
        self.total = total
        self._set_maximum(total - 1)
        self._seek(self.time)
        if time <= 0 or time >= total:
            self._halt()
            self.paused = True
        if total == 0:
            self.stop()
            self.visible = False
        else:
            self.visible = True

    def set_fps(self, value: int) -> None:
        """Set the playing speed in frames per second."""
        if value < 1:
            raise ValueError("frames per second must be at least 1")
        self.fps = value

    def press(self, button: Button) -> None:
        """Handle a click on one of the control buttons."""
        if button is Button.PLUS:
            self.set_fps(self.fps + 1)
            return
        if button is Button.MINUS:
            if self.fps > 1:
                self.set_fps(self.fps - 1)
            return
        if self.total <= 0:
            return
        if button is Button.NEXT:
            self._seek(self.total)
        elif button is Button.NEXT_FAST:
            self.paused = False
            self._halt()
            self.mode = PlaybackMode.FORWARD
        elif button is Button.PREV:
            self._seek(0)
        elif button is Button.PREV_FAST:
            self.paused = False
            self._halt()
            self.mode = PlaybackMode.BACKWARD
        elif button is Button.PLAY:
            if self.running:
                self.paused = True
                self._halt()
            else:
                if self.time <= 0 or self.time >= self.total:
                    self._seek(0)
                self.paused = False
                self.mode = PlaybackMode.PLAYING

    def tick(self) -> None:
        """Advance one step of the running timer."""
        if self.mode is PlaybackMode.PLAYING:
            self._seek(self.time + 1)
            if self.time >= self.total - 1:
                self._seek(0)
        elif self.mode is PlaybackMode.FORWARD:
            self._seek(self.time + 1)
            if self.time >= self.total - 1:
                self.stop()
        elif self.mode is PlaybackMode.BACKWARD:
            self._seek(self.time - 1)
            if self.time <= 0:
                self.stop()

    def stop(self) -> None:
        """Stop the movie, as the play button would while running."""
        self.mode = PlaybackMode.PLAYING
        self.press(Button.PLAY)