"""
logger module

Copyright (c) 2024 Droplet Combustion Simulation 1D
Licensed under the MIT License - see LICENSE file for details.

This module provides TeeLogger, which duplicates everything written to stdout into a case log file.
"""

import sys


class TeeLogger:
    """write stream output to the terminal and to a log file"""

    def __init__(self, filename: str, mode: str = 'a', terminal=None):
        """
        initialize the tee logger

        Args:
            filename: log file path
            mode: file open mode, append by default
            terminal: stream to duplicate, default is the current sys.stdout
        """
        self.terminal = terminal if terminal is not None else sys.stdout
        self._previous = None
        self.log = open(filename, mode, encoding='utf-8')

    def write(self, message: str):
        self.terminal.write(message)
        self.log.write(message)

    def flush(self):
        self.terminal.flush()
        self.log.flush()

    def close(self):
        if not self.log.closed:
            self.log.flush()
            self.log.close()

    def __enter__(self):
        self._previous = sys.stdout
        sys.stdout = self
        return self

    def __exit__(self, exc_type, exc, tb):
        sys.stdout = self._previous
        self.close()
        return False
