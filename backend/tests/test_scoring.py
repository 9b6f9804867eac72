from scribble.game import scoring
from scribble.game.words import pick_words, word_blanks


def test_guess_points_scale_with_time_left():
    assert scoring.guess_points(60, 60) == 500
    assert scoring.guess_points(30, 60) == 250
    assert scoring.guess_points(59, 60) == 492


def test_guess_points_floor():
    assert scoring.guess_points(0, 60) == 100
    assert scoring.guess_points(1, 60) == 100
    assert scoring.guess_points(None, 60) == 100
    assert scoring.guess_points(-3, 60) == 100


def test_drawer_award_is_flat_per_guesser():
    assert scoring.DRAWER_POINTS_PER_GUESS == 50


def test_word_blanks_one_placeholder_per_character():
    assert word_blanks('cat') == '_ _ _ '
    assert word_blanks('elephant').count('_') == len('elephant')
    assert word_blanks('') == ''


def test_pick_words_without_replacement():
    picked = pick_words(['a', 'b', 'c', 'd'], 3)
    assert len(picked) == 3
    assert len(set(picked)) == 3

    assert sorted(pick_words(['x', 'x', 'y'], 5)) == ['x', 'y']
    assert pick_words([], 3) == []
