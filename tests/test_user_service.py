import pytest

from phoenixapi.config import settings
from phoenixapi.core.exceptions import ConflictError, NotFoundError, ValidationError
from phoenixapi.schemas.user import ProfileUpdate
from phoenixapi.services.user_service import UserService


@pytest.fixture
def service(db):
    return UserService(db, settings=settings)


def test_profile_includes_follow_counts(service, alice, bob, admin):
    service.follow(bob.id, alice.id)
    service.follow(admin.id, alice.id)
    service.follow(alice.id, bob.id)

    profile = service.get_profile(alice.id)

    assert profile.username == "alice"
    assert profile.followers == 2
    assert profile.following == 1


def test_profile_for_missing_user(service):
    with pytest.raises(NotFoundError):
        service.get_profile(424242)


def test_update_profile_changes_only_given_fields(service, alice):
    profile = service.update_profile(alice.id, ProfileUpdate(bio="Long-term investor"))

    assert profile.bio == "Long-term investor"
    assert profile.display_name == "Alice"

    profile = service.update_profile(alice.id, ProfileUpdate(display_name="  Ally "))
    assert profile.display_name == "Ally"
    assert profile.bio == "Long-term investor"


def test_cannot_follow_self(service, alice):
    with pytest.raises(ValidationError):
        service.follow(alice.id, alice.id)


def test_follow_twice_conflicts(service, alice, bob):
    service.follow(alice.id, bob.id)

    with pytest.raises(ConflictError):
        service.follow(alice.id, bob.id)


def test_follow_unknown_user(service, alice):
    with pytest.raises(NotFoundError):
        service.follow(alice.id, 999)


def test_unfollow_requires_edge(service, alice, bob):
    with pytest.raises(NotFoundError):
        service.unfollow(alice.id, bob.id)

    service.follow(alice.id, bob.id)
    service.unfollow(alice.id, bob.id)
    assert service.follow_status(alice.id, bob.id).is_following is False


def test_follow_status_reports_mutual(service, alice, bob):
    service.follow(alice.id, bob.id)
    status = service.follow_status(alice.id, bob.id)
    assert (status.is_following, status.is_followed_by, status.is_mutual) == (True, False, False)

    service.follow(bob.id, alice.id)
    status = service.follow_status(alice.id, bob.id)
    assert status.is_mutual is True


def test_search_users_excludes_caller(service, alice, bob, make_user):
    make_user("bobby")

    result = service.search_users("bob", exclude_user_id=bob.id)

    assert [u.username for u in result.users] == ["bobby"]
    assert result.count == 1


def test_search_blank_pattern_returns_nothing(service, alice):
    assert service.search_users("   ").count == 0


def test_search_treats_wildcards_literally(service, make_user):
    make_user("ann_lee")
    make_user("annxlee")

    assert [u.username for u in service.search_users("n_l").users] == ["ann_lee"]
    assert service.search_users("%").count == 0
