"""Indented trace output for the closest approach solvers.

A `Logger` prints messages indented by four spaces per open section. Sections
opened with `timed` report their processor time when they close. Output goes
to the stream given at construction, or to `sys.stdout` as it is at print time.

---

Copyright 2018 Edwin Steiner

Redistribution and use in source and binary forms, with or without
modification, are permitted provided that the following conditions are met:

1. Redistributions of source code must retain the above copyright notice, this
list of conditions and the following disclaimer.

2. Redistributions in binary form must reproduce the above copyright notice,
this list of conditions and the following disclaimer in the documentation
and/or other materials provided with the distribution.

THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND
ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED
WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE
DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE LIABLE
FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL
DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR
SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER
CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY,
OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE
OF THIS SOFTWARE, EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
"""

import sys
from time import process_time

class Logger:
    """Base class for objects that trace their work.
    Messages in sections nested deeper than `max_log_indent` are dropped.
    """
    class LogIndenter:
        """Context manager opening an untimed log section."""
        def __init__(self, logger):
            self._logger = logger
        def __enter__(self):
            self._logger._indent += 1
        def __exit__(self, *args):
            self._logger._indent -= 1

    class LogTimer(LogIndenter):
        """Context manager opening a log section headed by `caption`.
        After the section closes, `elapsed` holds its processor time in seconds.
        """
        def __init__(self, logger, caption):
            super(Logger.LogTimer, self).__init__(logger)
            self.caption = caption
            self.elapsed = None
        def __enter__(self):
            self._logger.log(self.caption, ":")
            super(Logger.LogTimer, self).__enter__()
            self._started = process_time()
            return self
        def __exit__(self, *args):
            self.elapsed = process_time() - self._started
            super(Logger.LogTimer, self).__exit__()
            self._logger.log("done %s: %.6fs" % (self.caption, self.elapsed))

    def __init__(self, max_log_indent=None, file=None):
        """
        Args:
            max_log_indent (None or int): deepest section level whose messages
                are printed. None prints everything, -1 prints nothing.
            file (None or file-like): stream for the messages (default: sys.stdout)
        """
        self._indent = 0
        self._max_log_indent = max_log_indent
        self._file = file
        self._indenter = self.LogIndenter(self)

    @property
    def indent(self):
        """Context manager for an untimed nested section."""
        return self._indenter

    @property
    def logging_enabled(self):
        """True if a message at the current section level is printed."""
        return self._max_log_indent is None or self._indent <= self._max_log_indent

    @property
    def stream(self):
        return self._file if self._file is not None else sys.stdout

    def timed(self, caption):
        """Returns a `LogTimer` section for `caption`."""
        return self.LogTimer(self, caption)

    def log(self, *args, sep='', end='\n', flush=False):
        """Print the concatenated args at the current indentation, if enabled."""
        if not self.logging_enabled:
            return
        print("    " * self._indent, *args, sep=sep, end=end, flush=flush, file=self.stream)
