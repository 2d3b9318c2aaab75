"""Session simulator — owns the simulated clock and every tracked body.

Each :meth:`Simulator.tick` advances simulated time, re-propagates every
catalogued and user-placed body, and recomputes the pairwise collision
scan from scratch. Nothing is carried over between ticks except the
bodies themselves.
"""
from __future__ import annotations

import logging
import math
import random
import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from orbwatch.core.ground_track import calculate_ground_track
from orbwatch.core.propagation import SatellitePosition, propagate
from orbwatch.core.screening import (
    CollisionPrediction,
    TrackedObject,
    check_all_collisions,
    screen_collisions,
)
from orbwatch.core.tle import ElementRecord, Malformed, OrbitalElements, parse_elements
from orbwatch.core.user_orbit import (
    OrbitState,
    UserSatellite,
    generate_satellite_color,
    propagate_user_satellite,
)
from orbwatch.core.validation import validate_satellite_position
from orbwatch.utils.constants import (
    DEFAULT_USER_MASS_KG,
    GROUND_TRACK_STEP_MINUTES,
    SIMULATOR_HORIZON_SECONDS,
    SIMULATOR_MAX_ALERTS,
    SIMULATOR_TICK_SECONDS,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulatorConfig:
    """Tick cadence and screening settings.

    Attributes:
        tick_seconds: Simulated seconds added per tick.
        horizon_seconds: Collision look-ahead in seconds.
        max_alerts: Cap on the number of predictions kept per tick.
        ground_track_step_minutes: Sample spacing of catalogued ground tracks.
        default_mass_kg: Mass used for user bodies when none is given.
        include_safe: Keep safe pairs in the prediction list.
    """

    tick_seconds: float = SIMULATOR_TICK_SECONDS
    horizon_seconds: float = SIMULATOR_HORIZON_SECONDS
    max_alerts: int = SIMULATOR_MAX_ALERTS
    ground_track_step_minutes: float = GROUND_TRACK_STEP_MINUTES
    default_mass_kg: float = DEFAULT_USER_MASS_KG
    include_safe: bool = False


@dataclass
class TrackedSatellite:
    """A catalogued satellite with its latest state."""

    record: ElementRecord
    elements: OrbitalElements
    position: SatellitePosition
    ground_track: list[SatellitePosition] = field(default_factory=list, repr=False)

    @property
    def id(self) -> str:
        return self.elements.catalog_id

    @property
    def name(self) -> str:
        return self.elements.name


@dataclass
class TrackedUserSatellite:
    """A user-placed body with its latest state."""

    satellite: UserSatellite
    state: OrbitState

    @property
    def id(self) -> str:
        return self.satellite.id

    @property
    def name(self) -> str:
        return self.satellite.name


@dataclass(frozen=True)
class AdmissionResult:
    """Outcome of adding a user body: the body, or the reason it was refused."""

    success: bool
    satellite: UserSatellite | None = None
    error: str | None = None


class Simulator:
    """Explicitly clocked simulation of catalogued and user-placed bodies.

    Args:
        start_time: Absolute time at simulated second zero. Defaults to now (UTC).
        config: Cadence and screening settings.
        rng: Random source for user body colours.

    Example::

        sim = Simulator(start_time=datetime(2024, 2, 14, tzinfo=timezone.utc))
        sim.load_records(parse_records(text))
        sim.add_user_satellite(7000.0, 0.0, 0.0, mass_kg=500.0)
        alerts = sim.tick()
    """

    def __init__(
        self,
        start_time: datetime | None = None,
        config: SimulatorConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        if start_time is None:
            start_time = datetime.now(timezone.utc)
        elif start_time.tzinfo is None:
            start_time = start_time.replace(tzinfo=timezone.utc)
        self.start_time = start_time
        self.config = config or SimulatorConfig()
        self._rng = rng or random.Random()
        self._elapsed = 0.0
        self._satellites: list[TrackedSatellite] = []
        self._user_satellites: list[TrackedUserSatellite] = []
        self._predictions: list[CollisionPrediction] = []

    @property
    def elapsed_seconds(self) -> float:
        """Simulated seconds since ``start_time``."""
        return self._elapsed

    @property
    def current_time(self) -> datetime:
        return self.start_time + timedelta(seconds=self._elapsed)

    @property
    def satellites(self) -> list[TrackedSatellite]:
        return list(self._satellites)

    @property
    def user_satellites(self) -> list[TrackedUserSatellite]:
        return list(self._user_satellites)

    @property
    def predictions(self) -> list[CollisionPrediction]:
        """Predictions from the most recent recomputation."""
        return list(self._predictions)

    def load_records(self, records: Iterable[ElementRecord]) -> list[Malformed]:
        """Replace the catalogued satellites with freshly parsed records.

        Malformed records are skipped with a warning and returned.
        """
        now = self.current_time
        loaded: list[TrackedSatellite] = []
        rejected: list[Malformed] = []

        for record in records:
            result = parse_elements(record)
            if isinstance(result, Malformed):
                logger.warning("Skipping malformed record %r: %s", record.name, result.reason)
                rejected.append(result)
                continue
            elements = result.elements
            loaded.append(
                TrackedSatellite(
                    record=record,
                    elements=elements,
                    position=propagate(elements, now),
                    ground_track=calculate_ground_track(
                        elements, now, elements.period_minutes, self.config.ground_track_step_minutes
                    ),
                )
            )

        self._satellites = loaded
        logger.info("Loaded %d satellites (%d malformed)", len(loaded), len(rejected))
        self._recompute()
        return rejected

    def add_user_satellite(
        self,
        x: float,
        y: float,
        z: float,
        mass_kg: float | None = None,
        name: str | None = None,
    ) -> AdmissionResult:
        """Place a user body at an ECI position (km) if it passes admission.

        Returns:
            The added body, or the reason it was refused. Never raises for
            bad input.
        """
        validation = validate_satellite_position(x, y, z)
        if not validation.valid:
            logger.warning("Rejected user satellite at (%.1f, %.1f, %.1f): %s", x, y, z, validation.error)
            return AdmissionResult(success=False, error=validation.error)

        if mass_kg is None:
            mass_kg = self.config.default_mass_kg
        if not (math.isfinite(mass_kg) and mass_kg > 0):
            error = f"mass must be a positive number of kg, got {mass_kg}."
            logger.warning("Rejected user satellite: %s", error)
            return AdmissionResult(success=False, error=error)

        satellite = UserSatellite(
            id=f"user-{uuid.uuid4().hex[:12]}",
            name=name or f"satellite-{len(self._user_satellites) + 1}",
            x=x,
            y=y,
            z=z,
            mass_kg=mass_kg,
            color=generate_satellite_color(self._rng),
            created_at=self.current_time,
        )
        self._user_satellites.append(
            TrackedUserSatellite(satellite, propagate_user_satellite(satellite, 0.0))
        )
        logger.debug("Added user satellite %s (%s)", satellite.id, satellite.name)
        self._recompute()
        return AdmissionResult(success=True, satellite=satellite)

    def remove_user_satellite(self, satellite_id: str) -> bool:
        """Remove a user body by id. Returns False if no such body exists."""
        before = len(self._user_satellites)
        self._user_satellites = [u for u in self._user_satellites if u.id != satellite_id]
        removed = len(self._user_satellites) < before
        if removed:
            self._recompute()
        return removed

    def clear_user_satellites(self) -> None:
        self._user_satellites = []
        self._recompute()

    def tracked_objects(self) -> list[TrackedObject]:
        """Current states of all bodies, user bodies first."""
        objects = [TrackedObject.from_state(u.id, u.name, u.state) for u in self._user_satellites]
        objects.extend(TrackedObject.from_state(s.id, s.name, s.position) for s in self._satellites)
        return objects

    def tick(self, seconds: float | None = None) -> list[CollisionPrediction]:
        """Advance simulated time and recompute everything.

        Args:
            seconds: Simulated seconds to advance. Defaults to ``config.tick_seconds``.

        Returns:
            The fresh collision predictions.

        Raises:
            ValueError: If ``seconds`` is negative.
        """
        if seconds is None:
            seconds = self.config.tick_seconds
        if seconds < 0:
            raise ValueError(f"Simulated time cannot run backwards, got {seconds}")
        self._elapsed += seconds
        self.refresh()
        return self.predictions

    def refresh(self) -> None:
        """Re-propagate every body at the current time and rescan collisions."""
        now = self.current_time
        for sat in self._satellites:
            sat.position = propagate(sat.elements, now)
        for user in self._user_satellites:
            elapsed = (now - user.satellite.created_at).total_seconds()
            user.state = propagate_user_satellite(user.satellite, elapsed, now)
        self._recompute()

    def _recompute(self) -> None:
        objects = self.tracked_objects()
        if len(objects) < 2:
            self._predictions = []
            return

        now = self.current_time
        horizon = self.config.horizon_seconds
        if self.config.include_safe:
            predictions = check_all_collisions(objects, horizon, now)
        else:
            predictions = screen_collisions(objects, horizon, now)
        self._predictions = predictions[: self.config.max_alerts]
        logger.debug("t=%.1fs: %d bodies, %d predictions", self._elapsed, len(objects), len(self._predictions))
