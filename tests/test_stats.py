import pytest

import play_stats
from play_stats import analyze_results, play_games, print_statistics

RESULTS = [
    {'seed': 1, 'max_tile': 256, 'score': 3000, 'turns': 300},
    {'seed': 2, 'max_tile': 2048, 'score': 21000, 'turns': 1000},
    {'seed': 3, 'max_tile': 512, 'score': 6000, 'turns': 500},
]


def test_analyze_results():
    stats = analyze_results(RESULTS)
    assert stats['num_games'] == 3
    assert stats['avg_score'] == pytest.approx(10000)
    assert stats['avg_turns'] == pytest.approx(600)
    assert stats['best_score'] == 21000
    assert stats['best_seed'] == 2
    assert stats['win_rate'] == pytest.approx(100 / 3)
    assert stats['tile_stats'][4] == (3, 100.0)
    assert stats['tile_stats'][512][0] == 2
    assert stats['tile_stats'][2048][0] == 1
    assert max(stats['tile_stats']) == 2048


def test_tiles_past_2048_extend_the_table():
    stats = analyze_results([{'seed': 0, 'max_tile': 8192, 'score': 1, 'turns': 1}])
    assert max(stats['tile_stats']) == 8192


def test_custom_win_threshold():
    stats = analyze_results(RESULTS, win_threshold=512)
    assert stats['win_rate'] == pytest.approx(200 / 3)


def test_print_statistics(capsys):
    print_statistics(analyze_results(RESULTS))
    out = capsys.readouterr().out
    assert "Statistics for 3 games:" in out
    assert "Average score: 10000.0" in out
    assert "1/3" in out
    assert "33.3%" in out
    assert "Win Rate (>=2048 tile): 33.3%" in out


def test_play_games_seeds_each_game(monkeypatch):
    seen = []

    def fake_game(seed, deadline_ms, expectimax, max_depth):
        seen.append(seed)
        return {'seed': seed, 'max_tile': 4, 'score': 0, 'turns': 0}

    monkeypatch.setattr(play_stats, "play_game", fake_game)
    first = play_games(num_games=3, seed=11, deadline_ms=0)
    second_seen, seen[:] = seen[:], []
    play_games(num_games=3, seed=11, deadline_ms=0)

    assert len(first) == 3
    assert seen == second_seen
    assert len(set(seen)) == 3
