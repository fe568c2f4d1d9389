from datetime import datetime, timezone

import pytest
import sqlalchemy as sa

from app.core.errors import ErrorKind, NotFoundError, ValidationError
from app.models.match import Match, MatchParticipant
from app.schemas.match import MatchCreateIn
from app.services import matches as match_service


def _payload(players, winners, *, pfw=50, pfl=25, date="2025-08-06T20:00:00.000Z") -> MatchCreateIn:
    return MatchCreateIn(
        date=date,
        players=players,
        winners=winners,
        points_for_winners=pfw,
        points_for_losers=pfl,
    )


def _ids(players):
    return [p.id for p in players]


def _match_count(session) -> int:
    return session.execute(sa.select(sa.func.count()).select_from(Match)).scalar_one()


def test_create_match_assigns_points_to_winners_and_losers(session, players):
    a, b, c, d = players
    match = match_service.create_match(session, _payload(_ids(players), [a.id, d.id]))

    assert len(match.participants) == 4
    by_user = {p.user_id: p for p in match.participants}
    assert by_user[a.id].is_winner and by_user[a.id].points == 50
    assert by_user[d.id].is_winner and by_user[d.id].points == 50
    assert not by_user[b.id].is_winner and by_user[b.id].points == -25
    assert not by_user[c.id].is_winner and by_user[c.id].points == -25


def test_create_match_lists_winners_first(session, players):
    a, b, c, d = players
    match = match_service.create_match(session, _payload(_ids(players), [d.id, b.id]))
    assert [p.user_id for p in match.participants] == [d.id, b.id, a.id, c.id]


def test_create_match_snapshots_participant_identity(session, players):
    match = match_service.create_match(session, _payload(_ids(players), [players[0].id, players[1].id]))
    first = match.participants[0]
    assert first.user_name == "A"
    assert first.user_last_name == "Ason"
    assert first.user_email == "a@example.com"


def test_create_match_stores_date_in_utc(session, players):
    match = match_service.create_match(
        session,
        _payload(_ids(players), [players[0].id, players[1].id], date="2025-08-06T22:00:00+02:00"),
    )
    assert match.date.replace(tzinfo=None) == datetime(2025, 8, 6, 20, 0)


def test_zero_points_for_losers_is_allowed(session, players):
    match = match_service.create_match(session, _payload(_ids(players), [players[0].id, players[1].id], pfl=0))
    assert sorted(p.points for p in match.participants) == [0, 0, 50, 50]


@pytest.mark.parametrize(
    "players_idx, winners_idx, kwargs, code",
    [
        ([0, 1, 2, 3], [0, 1], {"date": None}, "invalid_date"),
        ([0, 1, 2, 3], [0, 1], {"date": "not a date"}, "invalid_date"),
        ([0, 1, 2], [0, 1], {}, "players_count"),
        ([0, 1, 2, 3, 3], [0, 1], {}, "players_count"),
        ([0, 1, 2, 3], [0], {}, "winners_count"),
        ([0, 1, 2, 2], [0, 1], {}, "players_not_distinct"),
        ([0, 1, 2, 3], [0, 0], {}, "winners_not_distinct"),
        ([0, 1, 2, 3], [0, 1], {"pfw": 0}, "invalid_points"),
        ([0, 1, 2, 3], [0, 1], {"pfl": -1}, "invalid_points"),
        ([0, 1, 2, 3], [0, 1], {"pfw": 2**31}, "invalid_points"),
        ([0, 1, 2, 3], [0, 1], {"pfl": 2**31}, "invalid_points"),
    ],
)
def test_invalid_input_is_rejected_without_persisting(session, players, players_idx, winners_idx, kwargs, code):
    ids = [players[i].id for i in players_idx]
    winners = [players[i].id for i in winners_idx]

    with pytest.raises(ValidationError) as err:
        match_service.create_match(session, _payload(ids, winners, **kwargs))

    assert err.value.code == code
    assert err.value.kind is ErrorKind.VALIDATION
    assert _match_count(session) == 0


def test_winner_outside_players_is_rejected(session, players):
    with pytest.raises(ValidationError) as err:
        match_service.create_match(session, _payload(_ids(players), [players[0].id, 9999]))
    assert err.value.code == "winner_not_player"


def test_checks_run_in_order(session, players):
    # Wrong player count and bad points: the count rule comes first.
    with pytest.raises(ValidationError) as err:
        match_service.create_match(session, _payload(_ids(players)[:3], [players[0].id], pfw=0))
    assert err.value.code == "players_count"


def test_unknown_players_report_missing_count(session, players):
    ids = [players[0].id, players[1].id, 9998, 9999]
    with pytest.raises(ValidationError) as err:
        match_service.create_match(session, _payload(ids, [players[0].id, players[1].id]))

    assert err.value.code == "players_not_found"
    assert "2 of the selected players" in err.value.message
    assert _match_count(session) == 0


def test_failure_after_match_insert_rolls_everything_back(session, players, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("store went away")

    monkeypatch.setattr(match_service, "_participant_rows", boom)

    with pytest.raises(RuntimeError):
        match_service.create_match(session, _payload(_ids(players), [players[0].id, players[1].id]))

    assert _match_count(session) == 0
    assert session.execute(sa.select(sa.func.count()).select_from(MatchParticipant)).scalar_one() == 0


def test_list_matches_most_recent_first_with_pagination(session, players):
    ids = _ids(players)
    for day in (3, 1, 2):
        match_service.create_match(session, _payload(ids, ids[:2], date=f"2025-01-0{day}T10:00:00Z"))

    rows = match_service.list_matches(session)
    assert [m.date.day for m in rows] == [3, 2, 1]
    assert all(len(m.participants) == 4 for m in rows)

    page = match_service.list_matches(session, limit=1, offset=1)
    assert [m.date.day for m in page] == [2]


def test_get_match_missing_raises_not_found(session):
    with pytest.raises(NotFoundError):
        match_service.get_match(session, 12345)


def test_delete_match_removes_participants_and_returns_snapshot(session, players):
    match = match_service.create_match(session, _payload(_ids(players), [players[0].id, players[1].id]))
    match_id = match.id

    deleted = match_service.delete_match(session, match_id)

    assert deleted.id == match_id
    assert len(deleted.participants) == 4
    assert _match_count(session) == 0
    remaining = session.execute(
        sa.select(sa.func.count()).select_from(MatchParticipant).where(MatchParticipant.match_id == match_id)
    ).scalar_one()
    assert remaining == 0


def test_delete_missing_match_raises_not_found(session):
    with pytest.raises(NotFoundError):
        match_service.delete_match(session, 777)


def test_naive_date_is_taken_as_utc(session, players):
    match = match_service.create_match(
        session,
        _payload(_ids(players), [players[0].id, players[1].id], date="2025-03-01T09:30:00"),
    )
    expected = datetime(2025, 3, 1, 9, 30, tzinfo=timezone.utc)
    assert match.date.replace(tzinfo=timezone.utc) == expected
