"""
Simulation configuration.

Holds every tunable the scene/UI layer can change between ticks:
- Atmosphere (height, sea-level density)
- Physics switches (drag, Earth rotation, spaceship velocity alignment)
- Time control (pause flag and time acceleration)

Configurations can be loaded from JSON files (see data/simulation.json).
"""

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict

from .constants import (
    ATMOSPHERE_REGULAR_DENSITY_SURFACE,
    ATMOSPHERE_REGULAR_HEIGHT_KM,
    COLLISION_THRESHOLD_KM,
    DEFAULT_TIME_ACCELERATION,
    ENGINE_ACCELERATION,
    MAX_TIME_ACCELERATION,
    MIN_TIME_ACCELERATION,
    TROPOSPHERE_HEIGHT_RATIO,
    scale_from_km,
)

logger = logging.getLogger(__name__)


@dataclass
class AtmosphereConfig:
    """Exponential atmosphere model parameters."""
    height_km: float = ATMOSPHERE_REGULAR_HEIGHT_KM
    surface_density: float = ATMOSPHERE_REGULAR_DENSITY_SURFACE  # kg/m^3
    troposphere_ratio: float = TROPOSPHERE_HEIGHT_RATIO

    def __post_init__(self) -> None:
        if self.height_km < 0:
            raise ValueError("Atmosphere height must be non-negative")
        if self.surface_density < 0:
            raise ValueError("Atmosphere density must be non-negative")
        if self.troposphere_ratio <= 0:
            raise ValueError("Troposphere ratio must be positive")

    def set_height(self, height_km: float) -> None:
        """Change the atmosphere height; ignored below 0.1 km of change."""
        if height_km < 0:
            raise ValueError("Atmosphere height must be non-negative")
        if abs(height_km - self.height_km) < 0.1:
            return
        logger.info("Atmosphere height set to %.1f km", height_km)
        self.height_km = height_km

    def set_density(self, surface_density: float) -> None:
        if surface_density < 0:
            raise ValueError("Atmosphere density must be non-negative")
        logger.info("Atmosphere surface density set to %.3f", surface_density)
        self.surface_density = surface_density


@dataclass
class SimulationConfig:
    """
    Configuration shared by the world and the force models.

    Attributes:
        atmosphere: Earth atmosphere model
        collision_threshold_km: Clearance above a surface that counts as contact
        engine_acceleration: Spaceship acceleration at full power (scaled units/s^2)
        drag_enabled: Apply atmospheric drag to entities in flight
        earth_rotation_enabled: Spin the Earth frame each tick
        auto_align_to_velocity: Let spaceships drift toward their velocity vector
    """
    atmosphere: AtmosphereConfig = field(default_factory=AtmosphereConfig)
    collision_threshold_km: float = COLLISION_THRESHOLD_KM
    engine_acceleration: float = ENGINE_ACCELERATION
    drag_enabled: bool = True
    earth_rotation_enabled: bool = True
    auto_align_to_velocity: bool = False

    def __post_init__(self) -> None:
        if self.collision_threshold_km < 0:
            raise ValueError("Collision threshold must be non-negative")

    @property
    def collision_threshold(self) -> float:
        """Collision threshold in scaled units."""
        return scale_from_km(self.collision_threshold_km)

    @classmethod
    def from_json(cls, path: str) -> 'SimulationConfig':
        """Load configuration from JSON file."""
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Simulation config not found: {path}")

        with open(config_path) as f:
            data = json.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SimulationConfig':
        """Create configuration from dictionary, missing keys take defaults."""
        atmosphere_data = data.get("atmosphere", {})
        atmosphere = AtmosphereConfig(
            height_km=atmosphere_data.get("height_km", ATMOSPHERE_REGULAR_HEIGHT_KM),
            surface_density=atmosphere_data.get(
                "surface_density", ATMOSPHERE_REGULAR_DENSITY_SURFACE),
            troposphere_ratio=atmosphere_data.get(
                "troposphere_ratio", TROPOSPHERE_HEIGHT_RATIO),
        )
        return cls(
            atmosphere=atmosphere,
            collision_threshold_km=data.get("collision_threshold_km", COLLISION_THRESHOLD_KM),
            engine_acceleration=data.get("engine_acceleration", ENGINE_ACCELERATION),
            drag_enabled=data.get("drag_enabled", True),
            earth_rotation_enabled=data.get("earth_rotation_enabled", True),
            auto_align_to_velocity=data.get("auto_align_to_velocity", False),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class TimeControl:
    """Pause gate and time acceleration applied to wall-clock deltas."""
    paused: bool = False
    time_acceleration: float = DEFAULT_TIME_ACCELERATION

    def __post_init__(self) -> None:
        self.set_time_acceleration(self.time_acceleration)

    def set_time_acceleration(self, value: float) -> None:
        if not MIN_TIME_ACCELERATION <= value <= MAX_TIME_ACCELERATION:
            raise ValueError(
                f"Time acceleration must be within "
                f"[{MIN_TIME_ACCELERATION:g}, {MAX_TIME_ACCELERATION:g}], got {value}"
            )
        self.time_acceleration = value

    def toggle_pause(self) -> bool:
        self.paused = not self.paused
        return self.paused

    def scaled_delta(self, real_dt: float) -> float:
        """Simulation time step for a wall-clock delta (0 while paused)."""
        if self.paused:
            return 0.0
        return real_dt * self.time_acceleration
