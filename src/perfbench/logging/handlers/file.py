import os

from perfbench.logging.handlers.base import BaseLogHandler
from perfbench.time.time import time_iso8601

LOG_FILE_SUFFIXES = (".log", ".txt")


class FileLogHandler(BaseLogHandler):
    """
    Appends benchmark diagnostics to a log file shared by successive runs.

    Each handler marks the start of its run with a separator line written
    just before its first batch, so runs appended to the same file stay apart.
    """

    def __init__(self, filepath: str, create: bool = False, run_label: str = "") -> None:
        """
        Args:
            filepath (str): Path of the log file. Must end with ".log" or ".txt".
            create (bool): Create missing parent directories.
            run_label (str): Text appended to the run separator, e.g. the benchmarked targets.

        Raises:
            ValueError: If the path does not end with a log file suffix.
        """
        super().__init__()

        if not filepath.endswith(LOG_FILE_SUFFIXES):
            raise ValueError(
                f"Invalid filepath; expected string ending with one of {LOG_FILE_SUFFIXES} but got {filepath}"
            )

        if create:
            directory = os.path.dirname(filepath)
            if directory:
                os.makedirs(directory, exist_ok=True)

        self.filepath = filepath
        self.run_label = run_label
        self._started = False

    def separator(self) -> str:
        label = f" {self.run_label}" if self.run_label else ""
        return f"=== perfbench run {time_iso8601()}{label} ==="

    def push(self, buffer: list[str]) -> None:
        lines = buffer
        if not self._started:
            lines = [self.separator(), *buffer]
            self._started = True
        with open(self.filepath, "a") as file:
            file.write("\n".join(lines) + "\n")
