from __future__ import annotations

from dataclasses import dataclass
from typing import List
import random
import time


@dataclass
class SensorConfig:
    """Configuration for the simulated camera and LiDAR pair.

    ``*_duration`` fields model processing latency in seconds; keep them at
    zero for fast, non-interactive runs.
    """

    has_camera: bool = True
    has_lidar: bool = True
    camera_detection_prob: float = 0.2
    lidar_detection_prob: float = 0.2
    scan_duration: float = 0.0
    detect_duration: float = 0.0


@dataclass
class ScanReport:
    """Which instruments took part in an environment scan."""

    camera: bool
    lidar: bool

    @property
    def instruments(self) -> List[str]:
        used = []
        if self.camera:
            used.append("camera")
        if self.lidar:
            used.append("lidar")
        return used


class SensorSuite:
    """Stochastic obstacle detector.

    Each instrument reports an obstacle with a fixed probability per query;
    draws come from the injected RNG so runs are reproducible.
    """

    def __init__(self, config: SensorConfig, rng: random.Random) -> None:
        self.config = config
        self.rng = rng

    def scan_environment(self) -> ScanReport:
        self._wait(self.config.scan_duration)
        return ScanReport(camera=self.config.has_camera, lidar=self.config.has_lidar)

    def detect_obstacle(self) -> bool:
        """True if either instrument reports an obstacle.

        Both instruments are always queried so the RNG stream advances the
        same way regardless of the first result.
        """
        camera_result = self.detect_with_camera()
        lidar_result = self.detect_with_lidar()
        return camera_result or lidar_result

    def detect_with_camera(self) -> bool:
        self._wait(self.config.detect_duration)
        hit = self.rng.random() < self.config.camera_detection_prob
        return self.config.has_camera and hit

    def detect_with_lidar(self) -> bool:
        self._wait(self.config.detect_duration)
        hit = self.rng.random() < self.config.lidar_detection_prob
        return self.config.has_lidar and hit

    @staticmethod
    def _wait(seconds: float) -> None:
        if seconds > 0.0:
            time.sleep(seconds)
