"""
File Chain (see DESIGN.md):
Doc Version: v1.0.0

- Called by: main.py
- Purpose: ANSI color-coded log formatter and the serialized diagnostics sink

BgpGen Color Output - Log Formatting and User Diagnostics

PURPOSE:
    Provides color-coded log output for better readability in terminal, and a
    single diagnostics sink for multi-line user reports. Reports are written
    under one process-wide lock so lines of concurrent callers never
    interleave.

WHO READS ME:
    - main.py: CustomFormatter for the console log handler, DIAGNOSTICS for
      error reports

WHO I READ:
    - None (leaf module, no internal dependencies)

DEPENDENCIES:
    - logging: Standard library logging.Formatter
    - threading: Lock serializing all diagnostics output
    - textwrap: wrapping of report text

COLOR SCHEME:
    - DEBUG: Grey
    - INFO: Cyan
    - WARNING: Yellow
    - ERROR: Red
    - CRITICAL: Bold Red

LOG FORMAT:
    %(asctime)s - %(message)s - (%(filename)s:%(lineno)d)

REPORT FORMAT:
    <policy file name, cyan>
    <empty line>
    Error: <text wrapped at 80 columns, continuation lines indented>
    --------------------------------------------------------------------------------
"""

import logging
import sys
import textwrap
import threading
from typing import TextIO

GREY = "\x1b[38;20m"
YELLOW = "\x1b[33;20m"
RED = "\x1b[31;20m"
GREEN = "\x1b[32;20m"
CYAN = "\x1b[36;20m"
BOLD_RED = "\x1b[31;1m"
RESET = "\x1b[0m"


class CustomFormatter(logging.Formatter):
    """return a formatter that prints log messages with color"""

    template = "%(asctime)s - %(message)s - (%(filename)s:%(lineno)d)"

    FORMATS = {
        logging.DEBUG: GREY + template + RESET,
        logging.INFO: CYAN + template + RESET,
        logging.WARNING: YELLOW + template + RESET,
        logging.ERROR: RED + template + RESET,
        logging.CRITICAL: BOLD_RED + template + RESET,
    }

    def format(self, record):
        log_fmt = self.FORMATS.get(record.levelno)
        formatter = logging.Formatter(log_fmt)
        return formatter.format(record)


class Diagnostics:
    """colored, multi-line user reports, serialized by a single lock"""

    FOOTER_SIZE = 80

    def __init__(self, stream: TextIO | None = None, color: bool = True):
        self.stream = stream
        self.color = color
        self.header = ""
        self._lock = threading.Lock()

    def _out(self) -> TextIO:
        return self.stream if self.stream is not None else sys.stdout

    def _paint(self, text: str, color: str) -> str:
        if not self.color:
            return text
        return f"{color}{text}{RESET}"

    def wrap(self, label: str, text: str) -> str:
        """wrap text behind a label, continuation lines line up after it"""
        return textwrap.fill(
            " ".join(text.split()),
            width=self.FOOTER_SIZE - 2,
            initial_indent=" " * len(label),
            subsequent_indent=" " * len(label),
        )[len(label):]

    def _report(self, label: str, color: str, text: str) -> str:
        lines = []
        if self.header:
            lines.append(self._paint(self.header, CYAN))
        lines.append("")
        lines.append(self._paint(label, color) + self.wrap(label, text))
        lines.append("-" * self.FOOTER_SIZE)
        report = "\n".join(lines) + "\n"
        with self._lock:
            out = self._out()
            out.write(report)
            out.flush()
        return report

    def error(self, text: str) -> str:
        """report a user error, the caller decides on the exit status"""
        return self._report("Error: ", RED, text)

    def warning(self, text: str) -> str:
        return self._report("Warning: ", YELLOW, text)

    def write(self, text: str, color: str | None = None):
        with self._lock:
            out = self._out()
            out.write(self._paint(text, color) if color else text)
            out.flush()

    def passed(self):
        self.write("passed\n", GREEN)

    def failed(self):
        self.write("failed\n", RED)


DIAGNOSTICS = Diagnostics()
