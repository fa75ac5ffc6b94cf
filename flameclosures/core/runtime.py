"""
runtime module

Copyright (c) 2024 Droplet Combustion Simulation 1D
Licensed under the MIT License - see LICENSE file for details.

This module provides the clock of the host solver, the closure models read it through mesh.time():
1. current time, used as the flame development time by the ETFC closures
2. outer iteration index, reported in the combustion run information
3. stepping and stop control of the demonstration driver
"""


class Runtime:
    def __init__(self, time_step: float = 1e-4, end_time: float = 1.0, start_time: float = 0.0):
        """
        Args:
            time_step: time step [s]
            end_time: end time [s]
            start_time: time of the first iteration [s]
        """
        self.time_step = time_step
        self.end_time = end_time
        self.current_time = start_time
        self.iteration = 0
        self.running = True

    def value(self) -> float:
        """current time [s]"""
        return self.current_time

    def is_running(self) -> bool:
        """True until the end time is reached or stop() is called"""
        return self.current_time < self.end_time and self.running

    def stop(self):
        self.running = False

    def advance(self):
        """move to the next time level, one outer iteration per time step"""
        self.current_time += self.time_step
        self.iteration += 1
