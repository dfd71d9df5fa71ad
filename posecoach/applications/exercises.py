"""
Exercise state machines.

Each exercise consumes one pose per ``update`` call and mutates its own
count, status and feedback. Rep-based exercises count completed
contracted/extended cycles; hold-based exercises time how long a posture is
continuously held.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from ..config import Clock, monotonic_ms
from ..data.keypoints import (
    Pose, NOSE,
    LEFT_ELBOW, RIGHT_ELBOW, LEFT_WRIST, RIGHT_WRIST,
    LEFT_HIP, RIGHT_HIP, LEFT_KNEE, RIGHT_KNEE, LEFT_ANKLE, RIGHT_ANKLE
)
from ..inference.utils import (
    LEFT, RIGHT, SidePoints, angle, distance, dominant_side, side_points, is_valid
)


logger = logging.getLogger(__name__)

START_STATUS = "start"
DEFAULT_FEEDBACK = "Get in position"


class ExerciseKind(str, Enum):
    """How an exercise is scored."""
    REPS = "reps"
    HOLD = "hold"


@dataclass(frozen=True)
class ExerciseState:
    """Read-only snapshot of an exercise for display."""
    name: str
    count: Union[int, float]
    status: str
    feedback: str
    kind: ExerciseKind


class Exercise(ABC):
    """Base class for all exercise state machines."""

    name = "exercise"
    kind = ExerciseKind.REPS

    def __init__(self, clock: Clock = monotonic_ms):
        """
        Initialize exercise.

        Args:
            clock: Callable returning the current instant in milliseconds
        """
        self.clock = clock
        self.reset()

    def reset(self):
        """Reinitialize count, status, feedback and transient fields."""
        self.count = 0.0 if self.kind is ExerciseKind.HOLD else 0
        self.status = START_STATUS
        self.feedback = DEFAULT_FEEDBACK

    @abstractmethod
    def update(self, pose: Pose):
        """
        Advance the state machine by one pose frame.

        Args:
            pose: Current pose
        """

    def is_valid(self, points) -> bool:
        """Confidence gate; a failing frame is skipped without touching state."""
        return is_valid(points)

    def side(self, pose: Pose) -> SidePoints:
        """Keypoints of the side with the higher detection confidence."""
        return side_points(pose, dominant_side(pose))

    def state(self) -> ExerciseState:
        """Snapshot of the current count, status and feedback."""
        return ExerciseState(
            name=self.name,
            count=self.count,
            status=self.status,
            feedback=self.feedback,
            kind=self.kind
        )

    def _complete_rep(self, feedback: str):
        self.count += 1
        self.feedback = feedback
        logger.debug("%s rep %d", self.name, self.count)


def _beyond(value: float, above: Optional[float], below: Optional[float]) -> bool:
    return ((above is not None and value > above) or
            (below is not None and value < below))


class HingeExercise(Exercise):
    """
    Rep counter driven by a single joint angle with two thresholds.

    Entering the prime zone sets ``prime_status``; entering the rep zone
    while primed counts a rep. Angles between the zones change nothing, so
    jitter around one cutoff cannot double count.
    """

    prime_status = "down"
    prime_feedback: Optional[str] = None
    prime_above: Optional[float] = None
    prime_below: Optional[float] = None

    rep_status = "up"
    rep_feedback = "Good Rep!"
    rep_above: Optional[float] = None
    rep_below: Optional[float] = None

    # rep zone only changes status when coming from the prime zone
    rep_requires_prime = False

    @abstractmethod
    def measure(self, pose: Pose) -> Optional[float]:
        """Diagnostic angle for this frame, or None to skip the frame."""

    def update(self, pose: Pose):
        value = self.measure(pose)
        if value is None:
            return

        if _beyond(value, self.rep_above, self.rep_below):
            primed = self.status == self.prime_status
            if primed:
                self._complete_rep(self.rep_feedback)
            if primed or not self.rep_requires_prime:
                self.status = self.rep_status
        elif _beyond(value, self.prime_above, self.prime_below):
            self.status = self.prime_status
            if self.prime_feedback is not None:
                self.feedback = self.prime_feedback
        else:
            self.on_dead_zone(value)

    def on_dead_zone(self, value: float):
        """Hook for interim feedback between the thresholds."""


class HoldExercise(Exercise):
    """
    Timer for a static posture.

    The hold start is latched on the first qualifying frame and the count is
    the running hold duration in seconds. A disqualifying frame clears the
    start so the next hold times from zero; the count keeps its last value
    until then.
    """

    kind = ExerciseKind.HOLD
    hold_status = "hold"
    break_status = "break"
    hold_feedback = "Hold..."

    def reset(self):
        super().reset()
        self.hold_started_at = None

    @abstractmethod
    def check(self, pose: Pose) -> Optional[Tuple[bool, str]]:
        """
        Evaluate the posture.

        Returns:
            None for a frame to skip, else (qualifies, correction feedback)
        """

    def update(self, pose: Pose):
        result = self.check(pose)
        if result is None:
            return

        held, correction = result
        if held:
            now = self.clock()
            if self.hold_started_at is None:
                self.hold_started_at = now
            self.count = round((now - self.hold_started_at) / 1000.0, 1)
            self.status = self.hold_status
            self.feedback = self.hold_feedback
        else:
            self.hold_started_at = None
            self.status = self.break_status
            self.feedback = correction


# --- Hinge and squat movements ---

class Squat(HingeExercise):
    name = "squat"
    prime_below, prime_feedback = 100, "Deep enough!"
    rep_above, rep_feedback = 165, "Good Rep!"

    def measure(self, pose):
        p = self.side(pose)
        if not self.is_valid([p.hip, p.knee, p.ankle]):
            return None
        return angle(p.hip, p.knee, p.ankle)

    def on_dead_zone(self, value):
        if value < 140 and self.status == self.rep_status:
            self.feedback = "Lower..."


class PushUp(HingeExercise):
    name = "pushup"
    prime_below, prime_feedback = 90, "Good depth!"
    rep_above, rep_feedback = 160, "Up!"

    def measure(self, pose):
        p = self.side(pose)
        if not self.is_valid([p.shoulder, p.elbow, p.wrist]):
            return None
        return angle(p.shoulder, p.elbow, p.wrist)


class Lunge(HingeExercise):
    """Uses the more bent knee so either leg can lead. No confidence gate."""

    name = "lunge"
    prime_below, prime_feedback = 100, "Hold..."
    rep_above, rep_feedback = 160, "Nice lunge!"

    def measure(self, pose):
        left = side_points(pose, LEFT)
        right = side_points(pose, RIGHT)
        return min(angle(left.hip, left.knee, left.ankle),
                   angle(right.hip, right.knee, right.ankle))


class Dip(HingeExercise):
    name = "dip"
    prime_below, prime_feedback = 100, "Deep..."
    rep_above, rep_feedback = 160, "Push up!"

    def measure(self, pose):
        p = self.side(pose)
        if not self.is_valid([p.shoulder, p.elbow, p.wrist]):
            return None
        return angle(p.shoulder, p.elbow, p.wrist)


class SitUp(HingeExercise):
    """Lying flat primes the rep; crunching up counts it."""

    name = "situp"
    prime_above, prime_feedback = 120, "Crunch up!"
    rep_below, rep_feedback = 60, "Great core work!"

    def measure(self, pose):
        p = self.side(pose)
        if not self.is_valid([p.shoulder, p.hip, p.knee]):
            return None
        return angle(p.shoulder, p.hip, p.knee)


class LegRaise(HingeExercise):
    name = "legraise"
    prime_above, prime_feedback = 170, "Lift legs!"
    rep_below, rep_feedback = 100, "Control down..."

    def measure(self, pose):
        p = self.side(pose)
        if not self.is_valid([p.shoulder, p.hip, p.knee]):
            return None
        return angle(p.shoulder, p.hip, p.knee)


class DonkeyKick(HingeExercise):
    name = "donkeykick"
    prime_status = "in"
    prime_below, prime_feedback = 100, "Kick back!"
    rep_status = "out"
    rep_above, rep_feedback = 160, "Squeeze glute!"

    def measure(self, pose):
        p = self.side(pose)
        return angle(p.shoulder, p.hip, p.knee)


class CalfRaise(Exercise):
    """
    Counts heel raises from the vertical position of the nose.

    The resting height is an exponentially smoothed baseline that only
    adapts while in the down band, so slow camera or stance drift is
    absorbed without pulling the baseline toward the raised position.
    """

    name = "calfraise"
    min_score = 0.5
    down_margin = 10
    up_margin = 40
    smoothing = 0.9

    def reset(self):
        super().reset()
        self.baseline_y = None

    def update(self, pose):
        nose = pose[NOSE]
        if nose.score < self.min_score:
            return
        if self.baseline_y is None:
            self.baseline_y = nose.y

        if nose.y > self.baseline_y - self.down_margin:
            self.status = "down"
            self.baseline_y = self.baseline_y * self.smoothing + nose.y * (1 - self.smoothing)
        elif nose.y < self.baseline_y - self.up_margin:
            if self.status == "down":
                self._complete_rep("High heels!")
            self.status = "up"


# --- Vertical / cardio ---

class JumpingJack(Exercise):
    name = "jumpingjack"
    ankle_spread = 150

    def update(self, pose):
        l_w, r_w = pose[LEFT_WRIST], pose[RIGHT_WRIST]
        l_a, r_a = pose[LEFT_ANKLE], pose[RIGHT_ANKLE]
        nose = pose[NOSE]
        if not self.is_valid([l_w, r_w, l_a, r_a]):
            return

        hands_up = l_w.y < nose.y and r_w.y < nose.y
        legs_wide = abs(l_a.x - r_a.x) > self.ankle_spread

        if hands_up and legs_wide:
            self.status = "star"
            self.feedback = "Together!"
        elif not hands_up and not legs_wide:
            if self.status == "star":
                self._complete_rep("Go!")
            self.status = "pencil"


class HighKnees(Exercise):
    """Either knee above its hip counts as up. No confidence gate."""

    name = "highknees"

    def update(self, pose):
        left_up = pose[LEFT_KNEE].y < pose[LEFT_HIP].y
        right_up = pose[RIGHT_KNEE].y < pose[RIGHT_HIP].y

        if left_up or right_up:
            if self.status == "down":
                self._complete_rep("Higher!")
            self.status = "up"
        else:
            self.status = "down"


class ButtKicks(HingeExercise):
    name = "buttkicks"
    prime_status = "down"
    prime_above = 120
    rep_status = "up"
    rep_below, rep_feedback = 45, "Kick!"

    def measure(self, pose):
        p = self.side(pose)
        return angle(p.hip, p.knee, p.ankle)


class SquatJump(HingeExercise):
    name = "squatjump"
    prime_status = "squat"
    prime_below, prime_feedback = 100, "EXPLODE UP!"
    rep_status = "jump"
    rep_above, rep_feedback = 170, "Land Softly"
    rep_requires_prime = True

    def measure(self, pose):
        p = self.side(pose)
        if not self.is_valid([p.hip, p.knee, p.ankle]):
            return None
        return angle(p.hip, p.knee, p.ankle)


class BoxJump(Exercise):
    """
    Counts jumps from how far the hip rises above the floor level.

    The floor level is the lowest hip position seen (largest y). No
    confidence gate.
    """

    name = "boxjump"
    air_rise = 150
    ground_rise = 50

    def reset(self):
        super().reset()
        self.floor_y = None

    def update(self, pose):
        hip = self.side(pose).hip
        if self.floor_y is None or hip.y > self.floor_y:
            self.floor_y = hip.y

        rise = self.floor_y - hip.y
        if rise > self.air_rise:
            if self.status == "ground":
                self._complete_rep("On Box!")
            self.status = "air"
        elif rise < self.ground_rise:
            self.status = "ground"
            self.feedback = "Jump!"


# --- Static holds ---

def _hips_piked(p: SidePoints) -> bool:
    """True if the hip sits above the shoulder-ankle line on screen."""
    dx = p.ankle.x - p.shoulder.x
    if dx == 0:
        return False
    t = (p.hip.x - p.shoulder.x) / dx
    return p.hip.y < p.shoulder.y + t * (p.ankle.y - p.shoulder.y)


class Plank(HoldExercise):
    name = "plank"
    hold_feedback = "Hold..."
    band = (165, 195)

    def check(self, pose):
        p = self.side(pose)
        if not self.is_valid([p.shoulder, p.hip, p.ankle]):
            return None
        body = angle(p.shoulder, p.hip, p.ankle)
        low, high = self.band
        correction = "Lower Hips" if _hips_piked(p) else "Lift Hips"
        return low < body < high, correction


class SidePlank(HoldExercise):
    name = "sideplank"
    hold_feedback = "Stay strong"
    band = (160, 200)

    def check(self, pose):
        p = self.side(pose)
        if not self.is_valid([p.shoulder, p.hip, p.ankle]):
            return None
        body = angle(p.shoulder, p.hip, p.ankle)
        low, high = self.band
        return low < body < high, "Align body"


class WallSit(HoldExercise):
    name = "wallsit"
    hold_feedback = "Burn!"
    band = (80, 110)

    def check(self, pose):
        p = self.side(pose)
        if not self.is_valid([p.hip, p.knee, p.ankle]):
            return None
        knee = angle(p.hip, p.knee, p.ankle)
        low, high = self.band
        return low < knee < high, "Knees at 90°"


class GluteBridge(HoldExercise):
    name = "glutebridge"
    hold_feedback = "Squeeze!"
    min_angle = 160

    def check(self, pose):
        p = self.side(pose)
        if not self.is_valid([p.shoulder, p.hip, p.knee]):
            return None
        return angle(p.shoulder, p.hip, p.knee) > self.min_angle, "Hips higher"


class SideStretch(HoldExercise):
    """Arm overhead with the torso bent out of line."""

    name = "sidestretch"
    hold_feedback = "Feel the stretch"

    def check(self, pose):
        p = self.side(pose)
        if not self.is_valid([p.shoulder, p.wrist, p.hip, p.ankle]):
            return None
        body = angle(p.shoulder, p.hip, p.ankle)
        reaching = p.wrist.y < p.shoulder.y
        return reaching and (body < 160 or body > 200), "Lean & Reach"


class ForwardFold(HoldExercise):
    name = "forwardfold"
    hold_feedback = "Breathe..."
    fold_depth = 30

    def check(self, pose):
        p = self.side(pose)
        if not self.is_valid([p.shoulder, p.hip]):
            return None
        return p.shoulder.y > p.hip.y + self.fold_depth, "Touch Toes"


# --- Complex / cross-body ---

class BicycleCrunch(Exercise):
    name = "bicycle"
    close_distance = 100

    def update(self, pose):
        le, re = pose[LEFT_ELBOW], pose[RIGHT_ELBOW]
        lk, rk = pose[LEFT_KNEE], pose[RIGHT_KNEE]
        if not self.is_valid([le, re, lk, rk]):
            return

        if min(distance(le, rk), distance(re, lk)) < self.close_distance:
            if self.status == "open":
                self._complete_rep("Twist!")
            self.status = "close"
        else:
            self.status = "open"


class MountainClimber(Exercise):
    name = "climbers"
    front_distance = 150

    def update(self, pose):
        p = self.side(pose)
        if not self.is_valid([p.knee, p.elbow]):
            return

        if distance(p.knee, p.elbow) < self.front_distance:
            if self.status == "back":
                self._complete_rep("Fast!")
            self.status = "front"
        else:
            self.status = "back"


class Burpee(Exercise):
    """
    Two-phase burpee counter.

    ``phase`` is STAND or PLANK. Standing moves to plank once the hip drops
    below ``low_hip_y`` on screen; plank returns to standing, counting a
    rep, once the hip is back above ``high_hip_y`` with a straight body.
    No confidence gate.
    """

    name = "burpee"
    STAND, PLANK = 0, 1
    high_hip_y = 300
    low_hip_y = 350
    straight_angle = 160
    tall_angle = 165

    def reset(self):
        super().reset()
        self.phase = self.STAND

    def update(self, pose):
        p = self.side(pose)
        body = angle(p.shoulder, p.hip, p.ankle)
        hip_y = p.hip.y

        if self.phase == self.STAND and body > self.tall_angle and hip_y < self.high_hip_y:
            self.feedback = "Drop down!"
        if self.phase == self.STAND and hip_y > self.low_hip_y:
            self.phase = self.PLANK
            self.status = "plank"
            self.feedback = "Kick feet back!"
        if self.phase == self.PLANK and hip_y < self.high_hip_y and body > self.straight_angle:
            self.phase = self.STAND
            self.status = "stand"
            self._complete_rep("Jump!")


# Registration order used by the selection UI
EXERCISE_CLASSES = (
    Squat, PushUp, Lunge, Dip, SitUp, LegRaise, DonkeyKick, CalfRaise,
    JumpingJack, HighKnees, ButtKicks, SquatJump, BoxJump,
    Plank, SidePlank, WallSit, GluteBridge,
    BicycleCrunch, MountainClimber, Burpee,
    SideStretch, ForwardFold,
)
