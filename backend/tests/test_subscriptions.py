"""Tests for joining and leaving games.

Covers idempotent join/leave and the max_players cap, both through the API
and directly against the store-enforced seat counter.
"""
import pytest
from sqlalchemy.exc import IntegrityError

from tabletop_scheduler.errors import CapacityExceeded, NotFoundOrForbidden
from tabletop_scheduler.models.game import Game, GameSubscription
from tabletop_scheduler.models.user import User
from tabletop_scheduler.services import subscription_service
from tests.conftest import auth_headers, create_test_game, create_test_user


def _join(client, user, game):
    return client.post(f"/api/games/{game['game_id']}/subscribe", headers=auth_headers(user))


def _leave(client, user, game):
    return client.delete(f"/api/games/{game['game_id']}/subscribe", headers=auth_headers(user))


class TestSubscribe:

    def test_capacity_example(self, client):
        """maxPlayers=1: X joins, Y is rejected, X joining again is unchanged."""
        dm = create_test_user(client, name="DM")
        x = create_test_user(client, name="X")
        y = create_test_user(client, name="Y")
        game = create_test_game(client, dm, max_players=1)

        first = _join(client, x, game)
        assert first.status_code == 201
        assert first.json()["created"] is True

        rejected = _join(client, y, game)
        assert rejected.status_code == 409
        assert rejected.json() == {"success": False, "error": "Game is full"}

        again = _join(client, x, game)
        assert again.status_code == 200
        assert again.json()["created"] is False
        assert again.json()["subscription"] == first.json()["subscription"]

    def test_nth_succeeds_and_next_is_rejected(self, client):
        dm = create_test_user(client, name="DM")
        game = create_test_game(client, dm, max_players=3)
        players = [create_test_user(client, name=f"Player {i}") for i in range(4)]

        for player in players[:3]:
            assert _join(client, player, game).status_code == 201
        assert _join(client, players[3], game).status_code == 409

        resp = client.get(f"/api/games/{game['game_id']}", headers=auth_headers(dm))
        assert resp.json()["game"]["subscription_count"] == 3

    def test_uncapped_game(self, client):
        dm = create_test_user(client, name="DM")
        game = create_test_game(client, dm, is_always_available=True)
        for i in range(5):
            assert _join(client, create_test_user(client, name=f"P{i}"), game).status_code == 201

    def test_unknown_game(self, client):
        user = create_test_user(client)
        resp = client.post("/api/games/missing/subscribe", headers=auth_headers(user))
        assert resp.status_code == 404


class TestUnsubscribe:

    def test_leave_without_subscription_succeeds(self, client):
        dm = create_test_user(client, name="DM")
        player = create_test_user(client, name="Player")
        game = create_test_game(client, dm)
        resp = _leave(client, player, game)
        assert resp.status_code == 200
        assert resp.json()["success"] is True

    def test_leave_unknown_game_succeeds(self, client):
        player = create_test_user(client, name="Player")
        resp = client.delete("/api/games/missing/subscribe", headers=auth_headers(player))
        assert resp.status_code == 200

    def test_leaving_frees_a_seat(self, client):
        dm = create_test_user(client, name="DM")
        x = create_test_user(client, name="X")
        y = create_test_user(client, name="Y")
        game = create_test_game(client, dm, max_players=1)

        assert _join(client, x, game).status_code == 201
        assert _leave(client, x, game).status_code == 200
        assert _leave(client, x, game).status_code == 200
        assert _join(client, y, game).status_code == 201


class TestSubscriptionService:
    """Direct service calls — the counter and constraints do the enforcing."""

    @pytest.fixture
    def seeded(self, db):
        users = [User(email=f"u{i}@example.com", display_name=f"U{i}") for i in range(3)]
        db.add_all(users)
        db.flush()
        game = Game(name="Capped", dm_id=users[0].user_id, is_always_available=True, max_players=1)
        db.add(game)
        db.commit()
        return game.game_id, [u.user_id for u in users]

    def test_join_is_idempotent(self, db, seeded):
        game_id, (_, alice, _) = seeded
        first, created = subscription_service.join_game(db, game_id, alice)
        again, created_again = subscription_service.join_game(db, game_id, alice)
        assert (created, created_again) == (True, False)
        assert again.subscription_id == first.subscription_id
        assert db.query(GameSubscription).count() == 1

    def test_capacity_error(self, db, seeded):
        game_id, (_, alice, bob) = seeded
        subscription_service.join_game(db, game_id, alice)
        with pytest.raises(CapacityExceeded) as exc:
            subscription_service.join_game(db, game_id, bob)
        assert exc.value.status_code == 409
        assert db.query(Game).filter(Game.game_id == game_id).one().subscription_count == 1

    def test_missing_game(self, db):
        with pytest.raises(NotFoundOrForbidden):
            subscription_service.join_game(db, "nope", "nobody")

    def test_duplicate_rows_rejected_by_store(self, db, seeded):
        game_id, (_, alice, _) = seeded
        db.add(GameSubscription(game_id=game_id, user_id=alice))
        db.commit()
        db.add(GameSubscription(game_id=game_id, user_id=alice))
        with pytest.raises(IntegrityError):
            db.commit()
        db.rollback()

    def test_leave_decrements_counter(self, db, seeded):
        game_id, (_, alice, _) = seeded
        subscription_service.join_game(db, game_id, alice)
        assert subscription_service.leave_game(db, game_id, alice) == 1
        assert subscription_service.leave_game(db, game_id, alice) == 0
        assert db.query(Game).filter(Game.game_id == game_id).one().subscription_count == 0

    @staticmethod
    def _stale_first_lookup(monkeypatch):
        """Make the first subscription lookup miss, as a racing request would."""
        real_find = subscription_service._find_subscription
        calls = {"n": 0}

        def _find(db, game_id, user_id):
            calls["n"] += 1
            if calls["n"] == 1:
                return None
            return real_find(db, game_id, user_id)

        monkeypatch.setattr(subscription_service, "_find_subscription", _find)

    def test_stale_read_on_full_game_returns_existing(self, db, seeded, monkeypatch):
        game_id, (_, alice, _) = seeded
        first, _ = subscription_service.join_game(db, game_id, alice)

        self._stale_first_lookup(monkeypatch)
        again, created = subscription_service.join_game(db, game_id, alice)
        assert created is False
        assert again.subscription_id == first.subscription_id
        assert db.query(Game).filter(Game.game_id == game_id).one().subscription_count == 1

    def test_stale_read_on_full_game_still_rejects_others(self, db, seeded, monkeypatch):
        game_id, (_, alice, bob) = seeded
        subscription_service.join_game(db, game_id, alice)

        self._stale_first_lookup(monkeypatch)
        with pytest.raises(CapacityExceeded):
            subscription_service.join_game(db, game_id, bob)

    def test_duplicate_insert_race_returns_existing(self, db, seeded, monkeypatch):
        _, (dm, alice, _) = seeded
        game = Game(name="Open table", dm_id=dm, is_always_available=True)
        db.add(game)
        db.commit()
        game_id = game.game_id
        first, _ = subscription_service.join_game(db, game_id, alice)

        self._stale_first_lookup(monkeypatch)
        again, created = subscription_service.join_game(db, game_id, alice)
        assert created is False
        assert again.subscription_id == first.subscription_id
        assert db.query(GameSubscription).filter(GameSubscription.game_id == game_id).count() == 1
        assert db.query(Game).filter(Game.game_id == game_id).one().subscription_count == 1

    def test_counter_cannot_exceed_max_players(self, db, seeded):
        game_id, _ = seeded
        game = db.query(Game).filter(Game.game_id == game_id).one()
        game.subscription_count = 2
        with pytest.raises(IntegrityError):
            db.commit()
        db.rollback()
