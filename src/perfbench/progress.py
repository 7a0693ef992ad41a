"""Single-line console progress bar."""

import sys
from typing import TextIO


class ProgressBar:
    """
    Renders ``[.....     ] 50%`` on one console line.

    Parameters
    ----------
    max_value : int
        The value that corresponds to 100%.

    width : int
        Number of character cells of the bar.

    stream : TextIO, optional
        Where to draw. Defaults to ``sys.stdout``.
    """

    def __init__(self, max_value: int = 100, width: int = 80, stream: TextIO | None = None) -> None:
        if max_value <= 0:
            raise ValueError(f"Invalid max_value; expected >0 but got {max_value}")
        if width <= 0:
            raise ValueError(f"Invalid width; expected >0 but got {width}")

        self.max_value = max_value
        self.width = width
        self.current = 0
        self.position = -1
        self.percent = -1
        self._step = max_value / width
        self._stream = stream if stream is not None else sys.stdout

    def update(self, value: int | None = None) -> None:
        """
        Set or increment the progress.

        Parameters
        ----------
        value : int, optional
            New value, clamped to ``[0, max_value]``. Increments by one when omitted.
        """
        if value is None:
            self.current += 1
        else:
            self.current = value
        self.current = min(max(self.current, 0), self.max_value)

        position = round(self.current / self._step)
        percent = round(self.current / self.max_value * 100)
        if position == self.position and percent == self.percent:
            return

        self.position = position
        self.percent = percent
        filled = "." * position
        empty = " " * (self.width - position)
        self._stream.write(f"\r[{filled}{empty}] {percent}%")
        self._stream.flush()

    def finish(self) -> None:
        """Force a full bar at 100% and end the line."""
        self.update(self.max_value)
        self._stream.write("\n")
        self._stream.flush()
