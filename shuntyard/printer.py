"""A module for printing results, errors, and progress bars to the command line.

The :class:`Printer` buffers what is written to it and emits whole lines with :func:`tqdm.write` so that results and
log messages do not corrupt a progress bar that is being displayed at the same time.

"""

import io
import sys
from typing import List, Optional, TextIO

import colorama
from colorama import Fore, Style
from colorama.ansi import AnsiFore
from tqdm import tqdm


class ANSIContext:
    """A context manager that wraps everything written to a :class:`Printer` in an ANSI color."""
    def __init__(self, printer: 'Printer', fore: Optional[AnsiFore] = None, bright: bool = False):
        self.printer: Printer = printer
        self.fore: Optional[AnsiFore] = fore
        self.bright: bool = bright

    def __enter__(self) -> 'Printer':
        if self.printer.ansi_color:
            if self.bright:
                self.printer.write(Style.BRIGHT)
            if self.fore is not None:
                self.printer.write(self.fore)
        return self.printer

    def __exit__(self, *args):
        if self.printer.ansi_color:
            self.printer.write(Style.RESET_ALL)


class Printer:
    """An ANSI color and status printer."""

    def __init__(self, out_stream: Optional[TextIO] = None, ansi_color: Optional[bool] = None, quiet: bool = False):
        """Initializes a Printer.

        Args:
            out_stream: The stream to which to print. If omitted, it defaults to :attr:`sys.stdout`.
            ansi_color: Whether or not color should be enabled in the output. If omitted, it defaults to
                :meth:`out_stream.isatty`.
            quiet: If :const:`True`, progress bars will be suppressed.

        """
        if out_stream is None:
            out_stream = sys.stdout
        self.status_stream: TextIO = out_stream
        self.quiet: bool = quiet
        self._buffer: List[str] = []
        self._reentries: int = 0
        try:
            self.write_raw: bool = self.quiet or (
                out_stream.fileno() != sys.stderr.fileno() and out_stream.fileno() != sys.stdout.fileno()
            )
        except (io.UnsupportedOperation, AttributeError, ValueError):
            self.write_raw = True
        self._ansi_color: bool = False
        self.ansi_color = ansi_color
        if self.ansi_color:
            colorama.init()

    @property
    def ansi_color(self) -> bool:
        """Returns whether this printer has color enabled."""
        return self._ansi_color

    @ansi_color.setter
    def ansi_color(self, is_color: Optional[bool]):
        if is_color is None:
            self._ansi_color = self.isatty()
        else:
            self._ansi_color = is_color

    def isatty(self) -> bool:
        try:
            return self.status_stream.isatty()
        except (AttributeError, ValueError):
            return False

    def tqdm(self, *args, **kwargs) -> tqdm:
        """Returns a :class:`tqdm.tqdm` object that is disabled if this printer is quiet."""
        if self.quiet:
            kwargs['disable'] = True
        return tqdm(*args, **kwargs)

    def color(self, foreground_color: AnsiFore) -> ANSIContext:
        """Returns a new context for this printer with the given foreground color."""
        return ANSIContext(self, fore=foreground_color)

    def bright(self) -> ANSIContext:
        return ANSIContext(self, bright=True)

    def error(self, message: str):
        with self.color(Fore.RED):
            self.write(message)
        self.write('\n')

    def write(self, text: str) -> int:
        if self.write_raw:
            return self.status_stream.write(text)
        self._buffer.append(text)
        if '\n' in text:
            self.flush()
        return len(text)

    def flush(self, final: bool = False):
        """Flushes this printer.

        If :obj:`final` is :const:`True`, any extra text will be flushed along with a final newline.

        """
        if self._buffer:
            text = ''.join(self._buffer)
            if final and not text.endswith('\n'):
                text += '\n'
            lines = text.split('\n')
            for line in lines[:-1]:
                tqdm.write(line, file=self.status_stream)
            self._buffer = [lines[-1]] if lines[-1] else []
        return self.status_stream.flush()

    def __enter__(self) -> 'Printer':
        self._reentries += 1
        return self

    def __exit__(self, *args):
        self._reentries -= 1
        if self._reentries == 0:
            self.flush(final=True)
