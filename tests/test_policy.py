from types import SimpleNamespace

from marketplace.domain import policy

client = SimpleNamespace(id=1, role="client")
stranger = SimpleNamespace(id=2, role="client")
provider_user = SimpleNamespace(id=3, role="provider")
other_provider_user = SimpleNamespace(id=4, role="provider")
admin = SimpleNamespace(id=5, role="admin")

# profile id deliberately differs from the owning user's id
profile = SimpleNamespace(id=40, user_id=3)
booking = SimpleNamespace(client_id=1, provider_id=40, provider=profile)


def test_only_clients_create_bookings():
    assert policy.can_create_booking(client).allowed
    assert not policy.can_create_booking(provider_user).allowed
    assert not policy.can_create_booking(admin).allowed


def test_client_owned_actions_require_booking_client():
    for action in ("update", "cancel", "delete", "rate"):
        assert policy.check_booking_action(client, booking, action).allowed
        decision = policy.check_booking_action(stranger, booking, action)
        assert not decision.allowed
        assert decision.reason


def test_provider_actions_check_profile_owner_not_profile_id():
    imposter = SimpleNamespace(id=40, role="provider")

    for action in ("confirm", "start"):
        assert policy.check_booking_action(provider_user, booking, action).allowed
        assert not policy.check_booking_action(other_provider_user, booking, action).allowed
        assert not policy.check_booking_action(imposter, booking, action).allowed
        assert not policy.check_booking_action(client, booking, action).allowed


def test_either_party_completes():
    assert policy.check_booking_action(client, booking, "complete").allowed
    assert policy.check_booking_action(provider_user, booking, "complete").allowed
    assert not policy.check_booking_action(stranger, booking, "complete").allowed


def test_view_allows_parties_and_admin():
    assert policy.can_view_booking(client, booking).allowed
    assert policy.can_view_booking(provider_user, booking).allowed
    assert policy.can_view_booking(admin, booking).allowed
    assert not policy.can_view_booking(stranger, booking).allowed


def test_listing_management_requires_provider_owner():
    listing = SimpleNamespace(provider=profile)

    assert policy.can_manage_listing(provider_user, listing).allowed
    assert not policy.can_manage_listing(other_provider_user, listing).allowed
    # role check comes first
    assert not policy.can_manage_listing(SimpleNamespace(id=3, role="client"), listing).allowed


def test_admin_only():
    assert policy.is_admin(admin).allowed
    assert not policy.is_admin(client).allowed
