import json
import threading

import pytest

from clidle.models.score import OutcomeHistogram
from clidle.services.score_store import ScoreStore, StoreReadError, StoreWriteError


def write_raw(path, text):
    import os
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(text)


def test_missing_file_loads_zero_histogram(store):
    assert store.load().guesses == [0, 0, 0, 0, 0, 0, 0]


@pytest.mark.parametrize('guesses,expected', [
    ([0, 0, 0, 0, 0, 0, 0], 0),
    ([0, 1, 0, 0, 0, 0, 0], 100),
    ([2, 0, 1, 0, 0, 0, 0], 80),
    ([0, 0, 0, 0, 0, 0, 1], 50),
    ([5, 1, 1, 1, 1, 1, 1], 450),
])
def test_score(guesses, expected):
    histogram = OutcomeHistogram(guesses=list(guesses))
    assert ScoreStore.score(histogram) == expected
    assert histogram.guesses == guesses


def test_record_loss_and_win():
    histogram = OutcomeHistogram()
    ScoreStore.record_loss(histogram)
    ScoreStore.record_win(histogram, 1)
    ScoreStore.record_win(histogram, 6)
    ScoreStore.record_win(histogram, 6)
    assert histogram.guesses == [1, 1, 0, 0, 0, 0, 2]
    assert histogram.losses == 1
    assert histogram.wins == 3


@pytest.mark.parametrize('guesses_used', [0, 7, -1])
def test_record_win_rejects_out_of_range(guesses_used):
    with pytest.raises(ValueError):
        ScoreStore.record_win(OutcomeHistogram(), guesses_used)


def test_save_writes_guesses_record(store, score_path):
    store.save(OutcomeHistogram(guesses=[2, 0, 1, 0, 0, 0, 0]))
    with open(score_path, encoding='utf-8') as f:
        assert json.load(f) == {'guesses': [2, 0, 1, 0, 0, 0, 0]}


def test_save_of_load_leaves_histogram_unchanged(store, score_path):
    write_raw(score_path, json.dumps({'guesses': [3, 1, 4, 1, 5, 9, 2]}))
    store.save(store.load())
    assert store.load().guesses == [3, 1, 4, 1, 5, 9, 2]


@pytest.mark.parametrize('content', [
    '{not json',
    '[]',
    '{"wins": 3}',
    '{"guesses": [0, 0, 0]}',
    '{"guesses": [0, 0, 0, 0, 0, 0, -1]}',
    '{"guesses": [0, 0, 0, 0, 0, 0, "1"]}',
    '{"guesses": [0, 0, 0, 0, 0, 0, true]}',
])
def test_malformed_file_is_a_read_error(store, score_path, content):
    write_raw(score_path, content)
    with pytest.raises(StoreReadError):
        store.load()


def test_unreadable_path_is_a_read_error(tmp_path):
    (tmp_path / 'blocker').write_text('file, not a directory')
    store = ScoreStore(str(tmp_path / 'blocker' / 'db.json'))
    with pytest.raises(StoreReadError):
        store.load()


def test_unwritable_path_is_a_write_error(tmp_path):
    (tmp_path / 'blocker').write_text('file, not a directory')
    store = ScoreStore(str(tmp_path / 'blocker' / 'db.json'))
    with pytest.raises(StoreWriteError):
        store.save(OutcomeHistogram())


def test_update_runs_one_cycle(store):
    saved = store.update(ScoreStore.record_loss)
    assert saved.guesses == [1, 0, 0, 0, 0, 0, 0]
    assert store.load().guesses == [1, 0, 0, 0, 0, 0, 0]


def test_concurrent_updates_keep_every_increment(store):
    def record_many():
        for _ in range(10):
            store.update(lambda histogram: ScoreStore.record_win(histogram, 3))

    threads = [threading.Thread(target=record_many) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert store.load().guesses[3] == 40


def test_interrupted_save_keeps_previous_contents(store, score_path, monkeypatch):
    import os
    store.save(OutcomeHistogram(guesses=[1, 2, 3, 4, 5, 6, 7]))

    def fail_replace(src, dst):
        raise OSError('disk full')

    monkeypatch.setattr(os, 'replace', fail_replace)
    with pytest.raises(StoreWriteError):
        store.save(OutcomeHistogram(guesses=[9, 9, 9, 9, 9, 9, 9]))
    monkeypatch.undo()

    assert store.load().guesses == [1, 2, 3, 4, 5, 6, 7]
    assert os.listdir(os.path.dirname(score_path)) == ['db.json']
