import pytest

from wavedeck.domain.errors import DuplicateIdError, NotFoundError
from wavedeck.domain.playlist import PlaylistStore


def test_append_then_find_index_returns_last_position(playlist, make_track):
    track = make_track(99)

    playlist.append(track)

    assert playlist.find_index(99) == len(playlist) - 1
    assert playlist.get(99) is track
    assert playlist.tracks[-1] is track


def test_append_rejects_duplicate_id(playlist, make_track):
    with pytest.raises(DuplicateIdError):
        playlist.append(make_track(2, title="Other"))

    assert len(playlist) == 3


def test_seed_with_duplicate_ids_is_rejected(make_track):
    with pytest.raises(DuplicateIdError):
        PlaylistStore([make_track(1), make_track(1)])


def test_find_index_missing_returns_none(playlist):
    assert playlist.find_index(404) is None
    assert playlist.get(404) is None


def test_neighbor_wraps_in_both_directions(playlist):
    assert playlist.neighbor(1, 1).id == 2
    assert playlist.neighbor(3, 1).id == 1
    assert playlist.neighbor(1, -1).id == 3
    assert playlist.neighbor(2, -1).id == 1


def test_neighbor_round_trip_returns_same_track(playlist, make_track):
    playlist.append(make_track(4))
    for track in playlist:
        forward = playlist.neighbor(track.id, 1)
        assert playlist.neighbor(forward.id, -1) is track


def test_neighbor_on_single_track_is_itself(make_track):
    store = PlaylistStore([make_track(7)])

    assert store.neighbor(7, 1).id == 7
    assert store.neighbor(7, -1).id == 7


def test_neighbor_errors_for_missing_id_and_empty_playlist(playlist):
    with pytest.raises(NotFoundError):
        playlist.neighbor(404, 1)
    with pytest.raises(NotFoundError, match="empty"):
        PlaylistStore().neighbor(1, 1)


def test_first_and_iteration_follow_insertion_order(playlist):
    assert playlist.first().id == 1
    assert [track.id for track in playlist] == [1, 2, 3]
    assert PlaylistStore().first() is None
