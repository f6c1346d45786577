from types import SimpleNamespace

import pytest
from fake_hands import make_hand

from gesturock.gestures import PLAYABLE_GESTURES, Gesture
from gesturock.models.game import GameResult, Score, Winner, determine_winner
from gesturock.models.landmarks import HandFrame, Landmark


class TestDetermineWinner:
    @pytest.mark.parametrize(
        "user, cpu",
        [
            (Gesture.ROCK, Gesture.SCISSORS),
            (Gesture.PAPER, Gesture.ROCK),
            (Gesture.SCISSORS, Gesture.PAPER),
        ],
    )
    def test_winning_moves(self, user, cpu):
        assert determine_winner(user, cpu) == Winner.USER
        assert determine_winner(cpu, user) == Winner.CPU

    def test_draw_only_on_equal_moves(self):
        for user in PLAYABLE_GESTURES:
            for cpu in PLAYABLE_GESTURES:
                assert (determine_winner(user, cpu) == Winner.DRAW) == (user == cpu)

    def test_tournament_is_antisymmetric(self):
        opposite = {Winner.USER: Winner.CPU, Winner.CPU: Winner.USER, Winner.DRAW: Winner.DRAW}
        for user in PLAYABLE_GESTURES:
            for cpu in PLAYABLE_GESTURES:
                assert determine_winner(cpu, user) == opposite[determine_winner(user, cpu)]

    @pytest.mark.parametrize("move", [Gesture.NONE, Gesture.UNKNOWN])
    def test_non_playable_moves_are_rejected(self, move):
        with pytest.raises(ValueError):
            determine_winner(move, Gesture.ROCK)
        with pytest.raises(ValueError):
            determine_winner(Gesture.ROCK, move)


class TestScore:
    def test_record(self):
        score = Score()
        score.record(Winner.USER)
        score.record(Winner.CPU)
        score.record(Winner.CPU)
        assert score.to_dict() == {"user": 1, "cpu": 2}

    def test_draw_changes_nothing(self):
        score = Score(user=2, cpu=3)
        score.record(Winner.DRAW)
        assert (score.user, score.cpu) == (2, 3)


class TestGameResult:
    def test_forfeit(self):
        result = GameResult(Gesture.NONE, Gesture.PAPER, Winner.CPU, message="no hand", turn=4)
        assert result.is_forfeit
        assert result.to_dict() == {
            "user_move": "None",
            "cpu_move": "Paper",
            "winner": "cpu",
            "message": "no hand",
            "turn": 4,
        }

    def test_is_immutable(self):
        result = GameResult(Gesture.ROCK, Gesture.PAPER, Winner.CPU)
        with pytest.raises(AttributeError):
            result.winner = Winner.USER  # type: ignore[misc]


class TestHandFrame:
    def test_no_hand(self):
        frame = HandFrame(timestamp=1.5)
        assert not frame
        assert frame.landmarks is None

    def test_first_hand(self):
        first, second = make_hand(), make_hand(index=True)
        frame = HandFrame(hands=[first, second])
        assert frame
        assert frame.landmarks is first

    @pytest.mark.parametrize("count", [1, 20, 22])
    def test_incomplete_hand_is_rejected(self, count):
        with pytest.raises(ValueError):
            HandFrame(hands=[[Landmark(0.1, 0.2)] * count])


class TestLandmark:
    def test_from_normalized(self):
        normalized = SimpleNamespace(x=0.25, y=0.4, z=-0.1)
        assert Landmark.from_normalized(normalized) == Landmark(0.25, 0.4, -0.1)
        assert Landmark.from_normalized(normalized, mirroring=True) == Landmark(0.75, 0.4, -0.1)

    def test_to_pixels(self):
        assert Landmark(0.5, 0.25).to_pixels(640, 480) == (320, 120)


class TestGesture:
    def test_playable(self):
        assert [gesture for gesture in Gesture if gesture.is_playable] == list(PLAYABLE_GESTURES)

    def test_labels(self):
        assert Gesture.ROCK.label == "Piedra"
        assert Gesture.NONE.emoji == ""
