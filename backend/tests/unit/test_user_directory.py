import pytest

from backend.src.services.container import Services
from backend.src.services.errors import NotFoundError

FIVE_MINUTES_MS = 5 * 60 * 1000


def test_first_login_creates_user(services: Services, clock) -> None:
    user = services.users.login("alice", "teamA")

    assert user.username == "alice"
    assert user.display_name == "alice"
    assert user.workspace == "teamA"
    assert user.last_active == clock.now
    assert user.id


def test_repeated_login_moves_workspace_without_duplicating(services: Services, clock) -> None:
    first = services.users.login("alice", "teamA")
    clock.advance(1_000)

    second = services.users.login("alice", "teamB")

    assert second.id == first.id
    assert second.workspace == "teamB"
    assert second.last_active == clock.now
    assert services.users.list_active("teamA") == []
    assert [u.id for u in services.users.list_active("teamB")] == [first.id]
    assert services.users.count_active() == 1


def test_logout_unknown_user_raises_not_found(services: Services) -> None:
    with pytest.raises(NotFoundError, match="User not found"):
        services.users.logout("ghost")


def test_logout_immediately_excludes_user(services: Services, clock) -> None:
    services.users.login("alice", "teamA")
    services.users.login("bob", "teamA")

    services.users.logout("alice")

    assert [u.username for u in services.users.list_active("teamA")] == ["bob"]
    record = services.users.get_current("alice")
    assert record is not None
    assert record.last_active == clock.now - FIVE_MINUTES_MS


def test_list_active_orders_most_recent_first(services: Services, clock) -> None:
    services.users.login("alice", "teamA")
    clock.advance(10)
    services.users.login("bob", "teamA")
    clock.advance(10)
    services.users.login("carol", "teamB")

    active = services.users.list_active("teamA")

    assert [u.username for u in active] == ["bob", "alice"]


def test_users_expire_after_presence_window(services: Services, clock) -> None:
    services.users.login("alice", "teamA")
    clock.advance(FIVE_MINUTES_MS - 1)
    assert services.users.count_active() == 1

    clock.advance(1)

    assert services.users.list_active("teamA") == []
    assert services.users.count_active() == 0


def test_get_current_returns_none_for_unknown(services: Services) -> None:
    assert services.users.get_current("nobody") is None


def test_touch_refreshes_presence_and_ignores_unknown(services: Services, clock) -> None:
    services.users.login("alice", "teamA")
    clock.advance(60_000)

    services.users.touch("alice")
    services.users.touch("nobody")

    assert services.users.get_current("alice").last_active == clock.now
    assert services.users.get_current("nobody") is None


def test_login_and_logout_are_recorded_in_activity_log(services: Services) -> None:
    services.users.login("alice", "teamA")
    services.users.logout("alice")

    operations = [entry.operation for entry in services.activity_log.list()]

    assert operations == ["auth.logoutUser", "auth.loginDemoUser"]
