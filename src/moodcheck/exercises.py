from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Union

logger = logging.getLogger(__name__)


class ExerciseKind(Enum):
    BREATHING = "breathing"
    GROUNDING = "grounding"
    MUSCLE_RELAXATION = "muscle_relaxation"


@dataclass(frozen=True)
class Step:
    text: str
    duration: float


@dataclass(frozen=True)
class Routine:
    kind: ExerciseKind
    title: str
    intro: str
    steps: tuple[Step, ...]

    def __post_init__(self) -> None:
        if not self.steps:
            raise ValueError(f"{self.title}: routine needs at least one step")
        for s in self.steps:
            if s.duration <= 0:
                raise ValueError(f"{self.title}: step duration must be positive (got {s.duration})")


BREATHING = Routine(
    kind=ExerciseKind.BREATHING,
    title="4-7-8 Breathing Exercise",
    intro="Let's do a simple 4-7-8 breathing exercise to help you relax:",
    steps=(
        Step("Breathe in quietly through your nose for 4 seconds...", 4.0),
        Step("Hold your breath for 7 seconds...", 7.0),
        Step("Exhale completely through your mouth for 8 seconds...", 8.0),
    ),
)

GROUNDING = Routine(
    kind=ExerciseKind.GROUNDING,
    title="5-4-3-2-1 Grounding Exercise",
    intro="Let's do a 5-4-3-2-1 grounding exercise:",
    steps=(
        Step("Name 5 things you can see around you", 5.0),
        Step("Name 4 things you can touch right now", 5.0),
        Step("Name 3 things you can hear right now", 5.0),
        Step("Name 2 things you can smell or like the smell of", 5.0),
        Step("Name 1 thing you can taste or like the taste of", 5.0),
    ),
)

MUSCLE_RELAXATION = Routine(
    kind=ExerciseKind.MUSCLE_RELAXATION,
    title="Progressive Muscle Relaxation",
    intro="Let's try progressive muscle relaxation:",
    steps=(
        Step("Hands (clench fists)", 5.0),
        Step("Arms (bend elbows and tense biceps)", 5.0),
        Step("Shoulders (shrug them up)", 5.0),
        Step("Face (scrunch all facial muscles)", 5.0),
        Step("Stomach (tighten abs)", 5.0),
        Step("Legs (press feet down and tense thighs)", 5.0),
        Step("Feet (curl toes)", 5.0),
    ),
)

ROUTINES: dict[ExerciseKind, Routine] = {r.kind: r for r in (BREATHING, GROUNDING, MUSCLE_RELAXATION)}


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Running:
    step: int
    elapsed: float
    cycle: int = 0


RunState = Union[Idle, Running]

IDLE = Idle()


@dataclass(frozen=True)
class ExerciseView:
    kind: ExerciseKind
    title: str
    intro: str
    step_index: int
    step_count: int
    step_text: str
    progress: float
    cycle: int
    cycles: int


class ExerciseSequencer:
    """
    Timed step machine for one routine.

    tick() adds elapsed time to the current step; once it reaches the step's
    duration the timer resets and the next step begins (one step per tick, any
    overshoot is dropped). Finishing the last step of the last cycle returns the
    sequencer to Idle.
    """

    def __init__(self, routine: Routine, cycles: int = 1):
        if cycles < 1:
            raise ValueError(f"cycles must be >= 1 (got {cycles})")
        self.routine = routine
        self.cycles = cycles
        self._state: RunState = IDLE

    @property
    def kind(self) -> ExerciseKind:
        return self.routine.kind

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def is_running(self) -> bool:
        return isinstance(self._state, Running)

    @property
    def current_step(self) -> Step | None:
        if isinstance(self._state, Running):
            return self.routine.steps[self._state.step]
        return None

    @property
    def progress(self) -> float:
        st = self._state
        if not isinstance(st, Running):
            return 0.0
        return min(1.0, st.elapsed / self.routine.steps[st.step].duration)

    def start(self) -> None:
        self._state = Running(step=0, elapsed=0.0)
        logger.info("Started %s", self.routine.title)

    def stop(self) -> None:
        if isinstance(self._state, Running):
            logger.info("Stopped %s at step %d", self.routine.title, self._state.step)
        self._state = IDLE

    def tick(self, dt: float) -> bool:
        """Advance by dt seconds. Returns True when this tick finished the exercise."""
        if dt < 0:
            raise ValueError(f"dt must be >= 0 (got {dt})")

        st = self._state
        if not isinstance(st, Running):
            return False

        elapsed = st.elapsed + dt
        if elapsed < self.routine.steps[st.step].duration:
            self._state = Running(step=st.step, elapsed=elapsed, cycle=st.cycle)
            return False

        step = st.step + 1
        cycle = st.cycle
        if step >= len(self.routine.steps):
            step = 0
            cycle += 1
            if cycle >= self.cycles:
                self._state = IDLE
                logger.info("Completed %s", self.routine.title)
                return True

        self._state = Running(step=step, elapsed=0.0, cycle=cycle)
        return False

    def view(self) -> ExerciseView | None:
        st = self._state
        if not isinstance(st, Running):
            return None
        return ExerciseView(
            kind=self.kind,
            title=self.routine.title,
            intro=self.routine.intro,
            step_index=st.step,
            step_count=len(self.routine.steps),
            step_text=self.routine.steps[st.step].text,
            progress=self.progress,
            cycle=st.cycle,
            cycles=self.cycles,
        )


class ExercisePanel:
    """One independent sequencer per exercise kind; several may run at once."""

    def __init__(self, breathing_cycles: int = 1):
        self._sequencers: dict[ExerciseKind, ExerciseSequencer] = {
            kind: ExerciseSequencer(routine, cycles=breathing_cycles if kind is ExerciseKind.BREATHING else 1)
            for kind, routine in ROUTINES.items()
        }

    def __getitem__(self, kind: ExerciseKind) -> ExerciseSequencer:
        return self._sequencers[kind]

    def start(self, kind: ExerciseKind) -> None:
        self._sequencers[kind].start()

    def stop(self, kind: ExerciseKind) -> None:
        self._sequencers[kind].stop()

    def stop_all(self) -> None:
        for seq in self._sequencers.values():
            seq.stop()

    def tick(self, dt: float) -> list[ExerciseKind]:
        """Drive every sequencer once; returns the kinds that completed on this tick."""
        if dt < 0:
            raise ValueError(f"dt must be >= 0 (got {dt})")
        return [kind for kind, seq in self._sequencers.items() if seq.tick(dt)]

    def active_kinds(self) -> list[ExerciseKind]:
        return [kind for kind, seq in self._sequencers.items() if seq.is_running]

    def views(self) -> list[ExerciseView]:
        out: list[ExerciseView] = []
        for seq in self._sequencers.values():
            v = seq.view()
            if v is not None:
                out.append(v)
        return out
