"""
Tests for the geometric gesture classifier
"""

import itertools

import pytest
from fake_hands import FINGERS, make_frame, make_hand, transform

from gesturock.classifier import OPEN_FINGER_RATIO, classify, classify_frame, fingers_state
from gesturock.gestures import Gesture
from gesturock.models.landmarks import HandFrame, HandLandmark, Landmark


def move_tip(landmarks: list[Landmark], tip: HandLandmark, pip: HandLandmark, ratio: float) -> list[Landmark]:
    """Put the tip on the wrist-PIP line, at `ratio` times the PIP distance from the wrist."""
    wrist = landmarks[HandLandmark.WRIST]
    pip_point = landmarks[pip]
    landmarks = list(landmarks)
    landmarks[tip] = Landmark(
        wrist.x + (pip_point.x - wrist.x) * ratio,
        wrist.y + (pip_point.y - wrist.y) * ratio,
        0.0,
    )
    return landmarks


class TestClassify:
    def test_all_fingers_closed_is_rock(self):
        assert classify(make_hand()) == Gesture.ROCK

    def test_all_fingers_open_is_paper(self):
        assert classify(make_hand(index=True, middle=True, ring=True, pinky=True)) == Gesture.PAPER

    def test_index_and_middle_open_is_scissors(self):
        assert classify(make_hand(index=True, middle=True)) == Gesture.SCISSORS

    def test_every_other_combination_is_unknown(self):
        known = {
            (False, False, False, False): Gesture.ROCK,
            (True, True, True, True): Gesture.PAPER,
            (True, True, False, False): Gesture.SCISSORS,
        }
        for states in itertools.product((False, True), repeat=4):
            hand = make_hand(**dict(zip(FINGERS, states)))
            assert classify(hand) == known.get(states, Gesture.UNKNOWN), states

    @pytest.mark.parametrize("thumb_out", [False, True])
    def test_thumb_is_ignored(self, thumb_out):
        assert classify(make_hand(thumb_out=thumb_out)) == Gesture.ROCK
        assert classify(make_hand(index=True, middle=True, thumb_out=thumb_out)) == Gesture.SCISSORS

    def test_depth_is_ignored(self):
        hand = [Landmark(lm.x, lm.y, (i % 5) * 0.7) for i, lm in enumerate(make_hand(index=True, middle=True))]
        assert classify(hand) == Gesture.SCISSORS

    @pytest.mark.parametrize(
        "scale, dx, dy",
        [(0.5, 0.0, 0.0), (2.0, -0.3, -0.4), (0.3, 0.25, 0.1), (1.0, 0.2, -0.2)],
    )
    def test_invariant_under_scaling_and_translation(self, scale, dx, dy):
        for hand in (
            make_hand(),
            make_hand(index=True, middle=True, ring=True, pinky=True),
            make_hand(index=True, middle=True),
            make_hand(pinky=True),
        ):
            assert classify(transform(hand, scale, dx, dy)) == classify(hand)

    def test_barely_extended_finger_is_still_closed(self):
        # Tip farther than the PIP joint, but within the margin
        hand = move_tip(make_hand(), HandLandmark.INDEX_FINGER_TIP, HandLandmark.INDEX_FINGER_PIP, 1.05)
        assert fingers_state(hand).index is False
        assert classify(hand) == Gesture.ROCK

    def test_finger_beyond_margin_is_open(self):
        hand = move_tip(make_hand(), HandLandmark.INDEX_FINGER_TIP, HandLandmark.INDEX_FINGER_PIP, 1.15)
        assert fingers_state(hand).index is True
        assert classify(hand) == Gesture.UNKNOWN

    def test_default_ratio(self):
        assert OPEN_FINGER_RATIO == 1.1

    def test_custom_ratio(self):
        hand = move_tip(make_hand(), HandLandmark.INDEX_FINGER_TIP, HandLandmark.INDEX_FINGER_PIP, 1.05)
        assert classify(hand, open_ratio=1.0) == Gesture.UNKNOWN

    @pytest.mark.parametrize("count", [0, 20, 22])
    def test_wrong_landmarks_count(self, count):
        with pytest.raises(ValueError):
            classify([Landmark(0.5, 0.5)] * count)


class TestFingersState:
    def test_state_per_finger(self):
        state = fingers_state(make_hand(middle=True, pinky=True))
        assert state == (False, True, False, True)
        assert state.middle and state.pinky
        assert not state.all_open and not state.all_closed


class TestClassifyFrame:
    def test_no_hand_is_none(self):
        result = classify_frame(make_frame(None))
        assert result.gesture == Gesture.NONE
        assert result.landmarks == []

    def test_landmarks_are_passed_through(self):
        frame = make_frame(Gesture.PAPER)
        result = classify_frame(frame)
        assert result.gesture == Gesture.PAPER
        assert result.landmarks == frame.landmarks

    def test_only_first_hand_is_used(self):
        frame = HandFrame(hands=[make_hand(index=True, middle=True), make_hand()], timestamp=1.0)
        assert classify_frame(frame).gesture == Gesture.SCISSORS

    def test_to_dict(self):
        data = classify_frame(make_frame(Gesture.ROCK)).to_dict()
        assert data["gesture"] == "Rock"
        assert len(data["landmarks"]) == 21
