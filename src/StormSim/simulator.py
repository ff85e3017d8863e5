"""
Supercell Simulator

Factory and runner for a single-supercell simulation, including the
tornadoes it produces.

Example:
    >>> simulator = create_simulator({
    ...     "initial_state": {"temperature": 300, "pressure": 1.0},
    ...     "simulation_duration": 500,
    ...     "enable_logging": True,
    ... })
    >>> result = simulator.run()
"""

import logging
from dataclasses import asdict, dataclass, field, fields
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from .config import DEFAULT_SIMULATION_DURATION, DEFAULT_TIME_STEP
from .errors import InvalidConfigError
from .manager import EntityManager, TickReport
from .trajectory import SupercellTrajectory
from .types import (
    EntityConfig,
    EntityKind,
    SupercellParameters,
    SupercellState,
    is_number,
)

logger = logging.getLogger(__name__)


@dataclass
class SimulatorConfig:
    """
    Recognized simulator options.

    Attributes:
        initial_state: Initial SupercellState fields
        simulation_parameters: SupercellParameters fields
        simulation_duration: Total number of simulation steps
        enable_logging: Log per-step progress; no behavioral effect
        time_step: Seconds per step
        seed: Seed for tornado behavior
        position: Initial (x, y) of the supercell
    """
    initial_state: Mapping[str, float] = field(default_factory=dict)
    simulation_parameters: Mapping[str, float] = field(default_factory=dict)
    simulation_duration: int = DEFAULT_SIMULATION_DURATION
    enable_logging: bool = False
    time_step: float = DEFAULT_TIME_STEP
    seed: Optional[int] = None
    position: Tuple[float, float] = (0.0, 0.0)

    @classmethod
    def from_mapping(cls, options: Optional[Mapping[str, Any]]) -> "SimulatorConfig":
        options = dict(options or {})
        recognized = {f.name for f in fields(cls)}
        unknown = sorted(set(options) - recognized)
        if unknown:
            raise InvalidConfigError(f"Unrecognized simulator options: {', '.join(unknown)}")
        return cls(**options)


@dataclass
class SimulationResult:
    """
    Output of a simulator run.

    Attributes:
        steps: Steps executed
        history: Supercell state after each step
        tornadoes: Ids of tornadoes spawned during the run
        affected_counts: Number of affected world objects per step
    """
    steps: int
    history: List[SupercellState] = field(default_factory=list)
    tornadoes: List[str] = field(default_factory=list)
    affected_counts: List[int] = field(default_factory=list)

    @property
    def final_state(self) -> Optional[SupercellState]:
        return self.history[-1] if self.history else None


class Simulator:
    """Runs one supercell for ``simulation_duration`` steps."""

    def __init__(self, config: SimulatorConfig):
        if isinstance(config.simulation_duration, bool) or not isinstance(config.simulation_duration, int) \
                or config.simulation_duration <= 0:
            raise InvalidConfigError(
                f"simulation_duration must be a positive integer, got {config.simulation_duration!r}"
            )
        if not is_number(config.time_step) or config.time_step <= 0:
            raise InvalidConfigError(f"time_step must be a positive number, got {config.time_step!r}")

        self.config = config
        self.parameters = SupercellParameters.from_mapping(config.simulation_parameters)
        initial_state = SupercellState.from_mapping(config.initial_state)

        self.manager = EntityManager(
            trajectories={EntityKind.SUPERCELL: SupercellTrajectory(self.parameters)},
            seed=config.seed,
        )
        x, y = config.position
        self.supercell_id = self.manager.spawn(EntityConfig(
            kind=EntityKind.SUPERCELL,
            x=x,
            y=y,
            # Outlives the run so every step evolves the supercell
            duration=(config.simulation_duration + 1) * config.time_step,
            initial_state=asdict(initial_state),
        ))
        self.supercell = self.manager.get(self.supercell_id)
        self.step_count = 0

    @property
    def enable_logging(self) -> bool:
        return self.config.enable_logging

    @property
    def finished(self) -> bool:
        return self.step_count >= self.config.simulation_duration

    def step(self, environment: Any = None, world_objects: Sequence[Any] = ()) -> TickReport:
        """Advance the whole simulation by one time step."""
        report = self.manager.tick(self.config.time_step, world_objects, environment)
        self.step_count += 1

        if self.enable_logging:
            state = self.supercell.supercell_state
            logger.info(
                f"Step {self.step_count}/{self.config.simulation_duration}: "
                f"updraft={state.updraft:.2f} rotation={state.rotation:.3f} "
                f"entities={len(self.manager)} spawned={len(report.spawned)}"
            )
        return report

    def run(self, environment: Any = None, world_objects: Sequence[Any] = ()) -> SimulationResult:
        """
        Run the remaining steps.

        Args:
            environment: Snapshot applied to every step
            world_objects: Objects checked for impact every step

        Returns:
            SimulationResult with the supercell's state history
        """
        result = SimulationResult(steps=0)
        if self.enable_logging:
            logger.info(
                f"Starting supercell simulation: {self.config.simulation_duration} steps "
                f"of {self.config.time_step}s"
            )
        while not self.finished:
            report = self.step(environment, world_objects)
            result.steps += 1
            result.history.append(self.supercell.supercell_state)
            result.tornadoes.extend(report.spawned)
            result.affected_counts.append(sum(len(hits) for hits in report.affected.values()))
        if self.enable_logging:
            logger.info(f"Simulation finished: {len(result.tornadoes)} tornadoes spawned")
        return result


def create_simulator(config: Optional[Mapping[str, Any]] = None) -> Simulator:
    """
    Create a supercell simulator with default or custom parameters.

    Args:
        config: Optional mapping with initial_state, simulation_parameters,
            simulation_duration (default 100), enable_logging (default False),
            time_step, seed and position

    Returns:
        A ready-to-run Simulator

    Raises:
        InvalidConfigError: On unrecognized or out-of-range options
    """
    if isinstance(config, SimulatorConfig):
        return Simulator(config)
    return Simulator(SimulatorConfig.from_mapping(config))
