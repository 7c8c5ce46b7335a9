#!/usr/bin/env python3
"""
Simulation driver.

Bridges the render loop and the World: each displayed frame hands its
wall-clock delta to advance(), which applies the pause gate and the time
acceleration before ticking the world. run() drives the world with a fixed
step for scripted (headless) runs.
"""

import logging
from typing import Callable, Optional

from .config import TimeControl
from .world import World

logger = logging.getLogger(__name__)


class Simulation:
    """
    Frame-driven simulation loop.

    Attributes:
        world: The simulated world
        time_control: Pause flag and time acceleration
        frame_count: Number of frames seen by advance()
    """

    def __init__(self, world: World, time_control: Optional[TimeControl] = None):
        self.world = world
        self.time_control = time_control or TimeControl()
        self.frame_count = 0
        self._running = False

    @property
    def paused(self) -> bool:
        return self.time_control.paused

    def pause(self) -> None:
        """Pause the simulation."""
        self.time_control.paused = True

    def resume(self) -> None:
        """Resume the simulation."""
        self.time_control.paused = False

    def set_time_acceleration(self, value: float) -> None:
        self.time_control.set_time_acceleration(value)

    def advance(self, real_dt: float) -> float:
        """
        Advance by one displayed frame.

        Args:
            real_dt: Wall-clock time since the previous frame (seconds)

        Returns:
            Simulated time step actually applied (0 while paused)
        """
        if real_dt < 0:
            raise ValueError(f"Frame delta must be non-negative, got {real_dt}")
        self.frame_count += 1
        dt = self.time_control.scaled_delta(real_dt)
        if dt > 0:
            self.world.tick(dt)
        return dt

    def run(
        self,
        duration: float,
        step: float = 1.0,
        stop_when: Optional[Callable[[World], bool]] = None
    ) -> float:
        """
        Tick the world with a fixed step for a simulated duration.

        Time acceleration and pause do not apply here.

        Args:
            duration: Simulated time to cover (seconds)
            step: Fixed time step (seconds)
            stop_when: Optional predicate checked after each tick

        Returns:
            Simulated time elapsed
        """
        if step <= 0:
            raise ValueError("Step must be positive")

        self._running = True
        elapsed = 0.0
        while self._running and elapsed < duration:
            dt = min(step, duration - elapsed)
            self.world.tick(dt)
            elapsed += dt
            if stop_when is not None and stop_when(self.world):
                break

        self._running = False
        logger.debug("Ran %.1f s of simulated time", elapsed)
        return elapsed

    def stop(self) -> None:
        """Stop a run() in progress (from a callback)."""
        self._running = False
