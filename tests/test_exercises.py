"""Tests for the exercise state machines."""

import pytest

from posecoach.applications.exercises import (
    ExerciseKind, Squat, PushUp, Lunge, Dip, SitUp, LegRaise, DonkeyKick,
    CalfRaise, JumpingJack, HighKnees, ButtKicks, SquatJump, BoxJump,
    Plank, SidePlank, WallSit, GluteBridge, SideStretch, ForwardFold,
    BicycleCrunch, MountainClimber, Burpee, EXERCISE_CLASSES
)

from conftest import make_pose, angle_pose, joint_points


KNEE = (11, 13, 15)      # hip, knee, ankle (left)
ELBOW = (5, 7, 9)        # shoulder, elbow, wrist (left)
HIP = (5, 11, 13)        # shoulder, hip, knee (left)
BODY = (5, 11, 15)       # shoulder, hip, ankle (left)


def feed(exercise, indices, angles, score=0.9):
    for theta in angles:
        exercise.update(angle_pose(indices, theta, score=score))
    return exercise


def lunge_pose(left_theta, right_theta=180, score=0.9):
    la, lb, lc = joint_points(left_theta, vertex=(200.0, 300.0))
    ra, rb, rc = joint_points(right_theta, vertex=(450.0, 300.0))
    return make_pose({11: la, 13: lb, 15: lc, 12: ra, 14: rb, 16: rc}, score=score)


# --- Single hinge angle ---

@pytest.mark.parametrize("exercise_cls, indices, extended", [
    (Squat, KNEE, "up"),
    (PushUp, ELBOW, "up"),
    (Dip, ELBOW, "up"),
    (DonkeyKick, HIP, "out"),
])
def test_full_range_counts_once(exercise_cls, indices, extended):
    exercise = feed(exercise_cls(), indices, [170, 80, 170])
    assert exercise.count == 1
    assert exercise.status == extended


@pytest.mark.parametrize("exercise_cls, indices", [
    (Squat, KNEE), (PushUp, ELBOW), (Dip, ELBOW), (DonkeyKick, HIP),
])
def test_dead_zone_frames_do_not_double_count(exercise_cls, indices):
    exercise = feed(exercise_cls(), indices, [170, 90, 120, 85, 130, 150, 95, 170])
    assert exercise.count == 1


def test_partial_range_does_not_count():
    pushup = feed(PushUp(), ELBOW, [170, 120, 130, 90, 170])
    assert pushup.count == 0
    assert pushup.status == "up"


def test_lunge_uses_the_more_bent_knee():
    lunge = Lunge()
    for left in (170, 90, 170):
        lunge.update(lunge_pose(left))
    assert lunge.count == 1

    for right in (90, 170):
        lunge.update(lunge_pose(180, right_theta=right))
    assert lunge.count == 2
    assert lunge.feedback == "Nice lunge!"


def test_squat_feedback():
    squat = Squat()
    assert squat.feedback == "Get in position"
    feed(squat, KNEE, [170])
    feed(squat, KNEE, [130])
    assert squat.feedback == "Lower..."
    feed(squat, KNEE, [90])
    assert squat.status == "down"
    assert squat.feedback == "Deep enough!"
    feed(squat, KNEE, [170])
    assert squat.feedback == "Good Rep!"


def test_situp_counts_on_crunch():
    situp = feed(SitUp(), HIP, [130, 90, 50])
    assert situp.count == 1
    assert situp.status == "up"
    assert situp.feedback == "Great core work!"

    feed(situp, HIP, [50, 50])
    assert situp.count == 1


def test_leg_raise():
    leg_raise = feed(LegRaise(), HIP, [175, 90, 175, 90])
    assert leg_raise.count == 2
    assert leg_raise.status == "up"


def test_butt_kicks_count_on_heel_up():
    kicks = feed(ButtKicks(), KNEE, [130, 40, 130, 40, 80, 40])
    assert kicks.count == 2
    assert kicks.status == "up"


def test_squat_jump_needs_squat_first():
    jump = feed(SquatJump(), KNEE, [175])
    assert jump.status == "start"
    assert jump.count == 0

    feed(jump, KNEE, [90, 168])
    assert jump.status == "squat"
    assert jump.feedback == "EXPLODE UP!"

    feed(jump, KNEE, [175])
    assert jump.count == 1
    assert jump.status == "jump"
    assert jump.feedback == "Land Softly"

    feed(jump, KNEE, [175])
    assert jump.count == 1


# --- Confidence gate ---

@pytest.mark.parametrize("exercise_cls, indices", [
    (Squat, KNEE), (PushUp, ELBOW), (Dip, ELBOW), (SitUp, HIP),
    (LegRaise, HIP), (SquatJump, KNEE),
])
def test_zero_confidence_is_a_no_op(exercise_cls, indices):
    exercise = feed(exercise_cls(), indices, [170, 90], score=0.9)
    status, count = exercise.status, exercise.count

    feed(exercise, indices, [170, 30, 175, 60, 170] * 3, score=0.0)
    assert exercise.status == status
    assert exercise.count == count


def test_ungated_exercises_read_raw_coordinates():
    lunge = Lunge()
    for left in (170, 90, 170):
        lunge.update(lunge_pose(left, score=0.0))
    assert lunge.count == 1

    kick = feed(DonkeyKick(), HIP, [170, 90, 170], score=0.0)
    assert kick.count == 1

    kicks = feed(ButtKicks(), KNEE, [130, 40], score=0.0)
    assert kicks.count == 1


# --- Calf raise ---

def nose_pose(y, score=0.9):
    return make_pose({0: (320, y)}, scores={0: score})


def test_calf_raise_counts_against_baseline():
    calf = CalfRaise()
    for y in (200, 150, 200, 150):
        calf.update(nose_pose(y))
    assert calf.count == 2
    assert calf.status == "up"
    assert calf.feedback == "High heels!"


def test_calf_raise_baseline_adapts_only_when_down():
    calf = CalfRaise()
    calf.update(nose_pose(200))
    calf.update(nose_pose(205))
    assert calf.baseline_y == pytest.approx(200.5)

    calf.update(nose_pose(150))
    assert calf.baseline_y == pytest.approx(200.5)

    # between the bands: neither adapts nor changes status
    calf.update(nose_pose(180))
    assert calf.status == "up"
    assert calf.baseline_y == pytest.approx(200.5)


def test_calf_raise_ignores_uncertain_nose():
    calf = CalfRaise()
    calf.update(nose_pose(100, score=0.4))
    assert calf.baseline_y is None
    assert calf.status == "start"


def test_calf_raise_reset_clears_baseline():
    calf = CalfRaise()
    calf.update(nose_pose(200))
    calf.reset()
    assert calf.baseline_y is None


# --- Cardio ---

def jack_pose(hands_up, legs_wide):
    wrist_y = 100 if hands_up else 300
    l_ankle, r_ankle = (100, 450), (300 if legs_wide else 200, 450)
    return make_pose({0: (200, 200), 9: (150, wrist_y), 10: (250, wrist_y),
                      15: l_ankle, 16: r_ankle})


def test_jumping_jack():
    jack = JumpingJack()
    jack.update(jack_pose(True, True))
    assert jack.status == "star"
    assert jack.feedback == "Together!"

    jack.update(jack_pose(True, False))
    assert jack.status == "star"

    jack.update(jack_pose(False, False))
    assert jack.count == 1
    assert jack.status == "pencil"
    assert jack.feedback == "Go!"


def knees_pose(left_up, right_up, score=0.9):
    return make_pose({
        11: (280, 300), 12: (360, 300),
        13: (280, 250 if left_up else 380), 14: (360, 250 if right_up else 380),
    }, score=score)


def test_high_knees_either_side():
    knees = HighKnees()
    for left, right in [(False, False), (True, False), (False, False),
                        (False, True), (True, True), (False, False)]:
        knees.update(knees_pose(left, right))
    assert knees.count == 2
    assert knees.status == "down"


def test_high_knees_has_no_confidence_gate():
    knees = HighKnees()
    knees.update(knees_pose(False, False, score=0.0))
    knees.update(knees_pose(True, False, score=0.0))
    assert knees.count == 1


def hip_pose(y):
    return make_pose({11: (300, y), 12: (340, y)}, score=0.0)


def test_box_jump_tracks_floor():
    box = BoxJump()
    for y in (400, 200, 300, 390, 220):
        box.update(hip_pose(y))
    assert box.floor_y == 400
    assert box.count == 2
    assert box.status == "air"


def test_box_jump_floor_follows_lowest_hip():
    box = BoxJump()
    box.update(hip_pose(300))
    box.update(hip_pose(420))
    assert box.floor_y == 420
    assert box.status == "ground"
    assert box.feedback == "Jump!"


# --- Cross body ---

def test_bicycle_crunch_counts_close_after_open():
    near = make_pose({7: (300, 300), 14: (350, 300), 8: (600, 100), 13: (0, 400)})
    far = make_pose({7: (100, 100), 14: (500, 400), 8: (600, 100), 13: (0, 400)})
    mirror = make_pose({8: (300, 300), 13: (350, 300), 7: (600, 100), 14: (0, 400)})

    bicycle = BicycleCrunch()
    for pose in (near, far, mirror, far, near):
        bicycle.update(pose)
    assert bicycle.count == 2
    assert bicycle.status == "close"


def test_mountain_climber():
    front = make_pose({13: (300, 300), 7: (320, 260)})
    back = make_pose({13: (500, 300), 7: (200, 260)})

    climber = MountainClimber()
    for pose in (front, back, front, back, front):
        climber.update(pose)
    assert climber.count == 2
    assert climber.feedback == "Fast!"


def test_cross_body_gate():
    near = make_pose({7: (300, 300), 14: (350, 300)}, score=0.0)
    bicycle = BicycleCrunch()
    bicycle.update(near)
    assert bicycle.status == "start"


# --- Burpee ---

def standing():
    return make_pose({5: (300, 100), 11: (300, 250), 15: (300, 400)})


def plank_position():
    return make_pose({5: (100, 380), 11: (300, 380), 15: (500, 380)})


def test_burpee_cycle():
    burpee = Burpee()
    burpee.update(standing())
    assert burpee.phase == Burpee.STAND
    assert burpee.feedback == "Drop down!"

    burpee.update(plank_position())
    assert burpee.phase == Burpee.PLANK
    assert burpee.feedback == "Kick feet back!"

    burpee.update(standing())
    assert burpee.phase == Burpee.STAND
    assert burpee.count == 1
    assert burpee.feedback == "Jump!"


def test_burpee_needs_plank_before_counting():
    burpee = Burpee()
    for _ in range(3):
        burpee.update(standing())
    assert burpee.count == 0


def test_burpee_reset_returns_to_stand():
    burpee = Burpee()
    burpee.update(plank_position())
    burpee.reset()
    assert burpee.phase == Burpee.STAND


# --- Holds ---

def test_hold_grows_while_held(clock):
    plank = Plank(clock=clock)
    assert plank.kind is ExerciseKind.HOLD
    assert plank.count == 0.0

    plank.update(angle_pose(BODY, 180))
    assert plank.count == 0.0
    assert plank.feedback == "Hold..."

    clock.set(1500)
    plank.update(angle_pose(BODY, 180))
    assert plank.count == 1.5

    clock.set(2340)
    plank.update(angle_pose(BODY, 175))
    assert plank.count == 2.3


def test_interrupted_hold_restarts_from_zero(clock):
    plank = Plank(clock=clock)
    plank.update(angle_pose(BODY, 180))
    clock.set(4000)
    plank.update(angle_pose(BODY, 180))
    assert plank.count == 4.0

    clock.set(4100)
    plank.update(angle_pose(BODY, 120))
    assert plank.hold_started_at is None
    assert plank.count == 4.0

    clock.set(5000)
    plank.update(angle_pose(BODY, 180))
    assert plank.count == 0.0

    clock.set(6200)
    plank.update(angle_pose(BODY, 180))
    assert plank.count == 1.2


def bent(indices, theta):
    return dict(zip(indices, joint_points(theta)))


LEANING = {5: (300, 200), 9: (350, 100), 11: (300, 300), 15: (200, 390)}
UPRIGHT = {5: (300, 200), 9: (350, 100), 11: (300, 300), 15: (300, 400)}
FOLDED = {5: (300, 340), 11: (300, 300)}
UNFOLDED = {5: (300, 200), 11: (300, 300)}


@pytest.mark.parametrize("exercise_cls, held, broken", [
    (Plank, bent(BODY, 180), bent(BODY, 120)),
    (SidePlank, bent(BODY, 180), bent(BODY, 120)),
    (WallSit, bent(KNEE, 90), bent(KNEE, 150)),
    (GluteBridge, bent(HIP, 170), bent(HIP, 120)),
    (SideStretch, LEANING, UPRIGHT),
    (ForwardFold, FOLDED, UNFOLDED),
])
def test_low_confidence_keeps_hold_running(clock, exercise_cls, held, broken):
    exercise = exercise_cls(clock=clock)
    exercise.update(make_pose(held))
    assert exercise.status == "hold"
    feedback = exercise.feedback

    for t in (500, 1000, 1500):
        clock.set(t)
        exercise.update(make_pose(broken, score=0.0))
    assert exercise.hold_started_at == 0.0
    assert exercise.count == 0.0
    assert exercise.status == "hold"
    assert exercise.feedback == feedback

    clock.set(2000)
    exercise.update(make_pose(held))
    assert exercise.count == 2.0


def test_plank_correction_direction():
    plank = Plank()
    piked = make_pose({5: (100, 300), 11: (300, 200), 15: (500, 300)})
    sagging = make_pose({5: (100, 300), 11: (300, 400), 15: (500, 300)})

    plank.update(piked)
    assert plank.feedback == "Lower Hips"
    plank.update(sagging)
    assert plank.feedback == "Lift Hips"


@pytest.mark.parametrize("exercise_cls, indices, held, broken, correction", [
    (SidePlank, BODY, 170, 150, "Align body"),
    (WallSit, KNEE, 100, 130, "Knees at 90°"),
    (GluteBridge, HIP, 170, 120, "Hips higher"),
])
def test_hold_bands(clock, exercise_cls, indices, held, broken, correction):
    exercise = exercise_cls(clock=clock)
    exercise.update(angle_pose(indices, held))
    assert exercise.hold_started_at == 0.0

    clock.set(800)
    exercise.update(angle_pose(indices, broken))
    assert exercise.hold_started_at is None
    assert exercise.feedback == correction


def test_side_stretch(clock):
    stretch = SideStretch(clock=clock)
    leaning = make_pose({5: (300, 200), 9: (350, 100), 11: (300, 300), 15: (200, 390)})
    upright = make_pose({5: (300, 200), 9: (350, 100), 11: (300, 300), 15: (300, 400)})

    stretch.update(leaning)
    clock.set(1000)
    stretch.update(leaning)
    assert stretch.count == 1.0
    assert stretch.feedback == "Feel the stretch"

    stretch.update(upright)
    assert stretch.feedback == "Lean & Reach"


def test_forward_fold(clock):
    fold = ForwardFold(clock=clock)
    fold.update(make_pose({5: (300, 340), 11: (300, 300)}))
    assert fold.feedback == "Breathe..."
    fold.update(make_pose({5: (300, 200), 11: (300, 300)}))
    assert fold.feedback == "Touch Toes"


# --- Base contract ---

@pytest.mark.parametrize("exercise_cls", EXERCISE_CLASSES)
def test_reset_restores_defaults(clock, exercise_cls):
    exercise = exercise_cls(clock=clock)
    exercise.count = 7
    exercise.status = "down"
    exercise.feedback = "Something"
    exercise.reset()

    assert exercise.count == 0
    assert exercise.status == "start"
    assert exercise.feedback == "Get in position"
    if exercise.kind is ExerciseKind.HOLD:
        assert exercise.hold_started_at is None


def test_state_snapshot():
    squat = feed(Squat(), KNEE, [170, 90, 170])
    state = squat.state()
    assert state.name == "squat"
    assert state.count == 1
    assert state.status == "up"
    assert state.kind is ExerciseKind.REPS
