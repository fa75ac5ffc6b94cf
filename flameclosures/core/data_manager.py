"""
data manager module - run information side channel of the combustion model

Copyright (c) 2024 Droplet Combustion Simulation 1D
Licensed under the MIT License - see LICENSE file for details.

main classes:
- RunInfoObserver: interface notified by the combustion model after each correct()
- RunInfoWriter: append-only csv log of the run information
- RunInfoPrinter: console summary of the run information

the observers only read the model state, a failure to write is reported as a warning and never interrupts the solve.
"""

import csv
import os
import warnings
from typing import Protocol, runtime_checkable


RUN_INFO_HEADER = ['Iteration', 'Time', 'HeatReleaseRate', 'sLMin', 'sLMax', 'cSourceMax', 'BurntVolume']


@runtime_checkable
class RunInfoObserver(Protocol):
    def notify(self, model) -> None:
        ...


def run_info_row(model) -> list:
    """collect the run information of a combustion model"""
    summary = model.summary()
    return [summary[key] for key in RUN_INFO_HEADER]


class RunInfoWriter:
    def __init__(self, filename: str, flush_interval: int = 1):
        """
        initialize the run information writer

        Args:
            filename: csv file, rows are appended to an existing file
            flush_interval: number of rows between two flushes of the file
        """
        self.filename = filename
        self.flush_interval = max(1, int(flush_interval))
        self.row_count = 0
        self._file = None

    def _open(self):
        directory = os.path.dirname(self.filename)
        if directory:
            os.makedirs(directory, exist_ok=True)
        new_file = not os.path.exists(self.filename) or os.path.getsize(self.filename) == 0
        self._file = open(self.filename, "a", newline='')
        if new_file:
            csv.writer(self._file).writerow(RUN_INFO_HEADER)
            self._file.flush()

    def notify(self, model) -> None:
        try:
            row = run_info_row(model)
            if self._file is None:
                self._open()
            csv.writer(self._file).writerow(row)
            self.row_count += 1
            if self.row_count % self.flush_interval == 0:
                self._file.flush()
        except OSError as e:
            warnings.warn(f"run information could not be written to {self.filename}: {e}")
            self.close()

    def close(self):
        if self._file is not None:
            try:
                self._file.close()
            except OSError as e:
                warnings.warn(f"run information file {self.filename} could not be closed: {e}")
            self._file = None


class RunInfoPrinter:
    """print the run information every print_interval iterations"""

    def __init__(self, print_interval: int = 1):
        self.print_interval = max(1, int(print_interval))

    def notify(self, model) -> None:
        summary = model.summary()
        if summary['Iteration'] % self.print_interval != 0:
            return
        print("=== combustion run information ===")
        print(f"iteration: {summary['Iteration']}, time: {summary['Time']:.6g} s")
        print(f"heat release rate: {summary['HeatReleaseRate']:.6g} W, burnt volume: {summary['BurntVolume']:.6g} m3")
        print(f"laminar burning velocity range: {summary['sLMin']:.4g} - {summary['sLMax']:.4g} m/s, "
              f"max consumption rate: {summary['cSourceMax']:.4g} kg/m3/s")
        print("="*50+"\n")
