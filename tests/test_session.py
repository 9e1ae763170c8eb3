from decimal import Decimal

import pytest

from dispatch.exceptions import EmptyAddressError, InvalidTransitionError, NoProviderAvailableError
from providers.directory import StaticProviderDirectory
from providers.models import ServiceProvider
from rides.models import RideStatus, SessionStage
from rides.session import TowSession
from routing.distance_estimator import DistanceEstimator


@pytest.fixture
def session(clock, estimator, directory):
    return TowSession(clock, estimator=estimator, directory=directory)


def settle_distance(session, clock, origin="Rua A, 123", destination="Rua B, 456"):
    session.edit_origin(origin)
    session.edit_destination(destination)
    clock.advance(2.0)


def quoted(session, clock, **addresses):
    settle_distance(session, clock, **addresses)
    session.request_quote()
    clock.advance(2.0)
    return session.quote


def test_end_to_end_tow_request(clock, directory):
    session = TowSession(clock, estimator=DistanceEstimator(seed=2024), directory=directory)
    statuses = []
    session.subscribe(lambda snapshot: statuses.append(snapshot.status) if snapshot.request else None)

    settle_distance(session, clock)
    assert 20.0 <= session.draft.distance_km <= 30.0

    session.request_quote()
    assert session.snapshot().quoting
    clock.advance(2.0)

    quote = session.quote
    assert quote.price == Decimal("150.00")
    assert quote.distance_km == session.draft.distance_km
    assert not quote.fallback_used

    request = session.confirm_request()
    assert request.provider.distance_km == 2.3
    assert request.eta_minutes == 8
    assert request.distance_km == quote.distance_km
    assert request.price == quote.price

    clock.advance(15)
    assert session.request.status == RideStatus.ARRIVED

    session.finalize()
    assert session.request.status == RideStatus.FINISHED

    # collapse consecutive duplicates from non-status snapshots
    observed = [s for i, s in enumerate(statuses) if i == 0 or statuses[i - 1] != s]
    assert observed == [
        RideStatus.REQUESTING,
        RideStatus.ACCEPTED,
        RideStatus.EN_ROUTE,
        RideStatus.ARRIVED,
        RideStatus.FINISHED,
    ]


def test_distance_is_session_state(clock, session):
    settle_distance(session, clock, origin="Aeroporto", destination="Centro")

    snapshot = session.snapshot()
    assert snapshot.draft.distance_km == 30.0
    assert not snapshot.computing_distance


def test_computing_flag_visible_to_listeners(clock, session):
    seen = []
    session.subscribe(lambda snapshot: seen.append(snapshot.computing_distance))

    settle_distance(session, clock)

    assert True in seen
    assert seen[-1] is False


def test_failed_estimate_publishes_idle_snapshot(clock, directory):
    class BrokenEstimator:
        def estimate(self, origin, destination):
            raise RuntimeError("routing down")

    session = TowSession(clock, estimator=BrokenEstimator(), directory=directory)
    seen = []
    session.subscribe(lambda snapshot: seen.append(snapshot.computing_distance))

    session.edit_origin("Rua A")
    session.edit_destination("Rua B")
    with pytest.raises(RuntimeError):
        clock.advance(5)

    assert True in seen
    assert seen[-1] is False
    assert session.snapshot().computing_distance is False
    assert session.draft.distance_km is None


def test_quote_uses_fallback_when_no_distance_yet(clock, session):
    session.edit_origin("Rua A")
    session.edit_destination("Rua B")
    session.request_quote()
    clock.advance(2.0)

    quote = session.quote
    assert quote.distance_km == 35.0
    assert quote.fallback_used
    assert quote.price == Decimal("150.00")


def test_long_trip_priced_in_high_tier(clock, directory, make_jitter):
    session = TowSession(clock, estimator=DistanceEstimator(rng=make_jitter(1.2)), directory=directory)

    quote = quoted(session, clock, origin="Aeroporto", destination="Shopping Center Norte")

    assert quote.distance_km == 54.0
    assert quote.price == Decimal("180.00")


@pytest.mark.parametrize("origin, destination", [("", "Rua B"), ("Rua A", ""), ("  ", "  ")])
def test_quote_with_blank_address_fails(session, origin, destination):
    session.edit_origin(origin)
    session.edit_destination(destination)

    with pytest.raises(EmptyAddressError):
        session.request_quote()

    assert not session.snapshot().quoting


def test_edit_invalidates_quote_and_pending_quote(clock, session):
    quoted(session, clock)
    assert session.quote is not None

    session.edit_destination("Rua C, 789")
    assert session.quote is None
    assert session.draft.distance_km is None

    session.request_quote()
    clock.advance(1.0)
    session.edit_origin("Rua D")
    clock.advance(5.0)

    assert session.quote is None
    assert session.draft.distance_km == 25.0


def test_confirm_without_quote_fails(clock, session):
    settle_distance(session, clock)

    with pytest.raises(InvalidTransitionError):
        session.confirm_request()

    session.request_quote()
    with pytest.raises(InvalidTransitionError):
        session.confirm_request()


def test_confirm_with_no_providers_leaves_session_unchanged(clock, estimator):
    directory = StaticProviderDirectory([
        ServiceProvider.new("9", "Off Duty", "OFF-0000", 4.0, 1.0, 3, False),
    ])
    session = TowSession(clock, estimator=estimator, directory=directory)
    quote = quoted(session, clock)

    with pytest.raises(NoProviderAvailableError):
        session.confirm_request()

    snapshot = session.snapshot()
    assert snapshot.request is None
    assert snapshot.quote == quote
    assert snapshot.stage == SessionStage.QUOTED
    assert snapshot.providers == ()


def test_single_active_request(clock, session):
    quoted(session, clock)
    session.confirm_request()

    with pytest.raises(InvalidTransitionError):
        session.confirm_request()

    with pytest.raises(InvalidTransitionError):
        session.request_quote()


def test_finalize_outside_arrived_fails(clock, session):
    with pytest.raises(InvalidTransitionError):
        session.finalize()

    quoted(session, clock)
    session.confirm_request()
    clock.advance(5)

    with pytest.raises(InvalidTransitionError):
        session.finalize()
    assert session.request.status == RideStatus.EN_ROUTE


def test_reset_before_acceptance_cancels_lifecycle(clock, session):
    quoted(session, clock)
    session.confirm_request()
    clock.advance(1)

    session.reset()
    clock.advance(20)

    snapshot = session.snapshot()
    assert snapshot.request is None
    assert snapshot.quote is None
    assert snapshot.draft.origin == ""
    assert snapshot.stage == SessionStage.START


def test_reset_cancels_pending_recalculation(clock, session):
    session.edit_origin("Rua A")
    session.edit_destination("Rua B")
    clock.advance(1.0)
    assert session.snapshot().computing_distance

    session.reset()
    clock.advance(5)

    assert session.draft.distance_km is None
    assert not session.snapshot().computing_distance


def test_new_request_after_reset(clock, session):
    quoted(session, clock)
    first = session.confirm_request()
    clock.advance(15)
    session.finalize()
    session.reset()

    quoted(session, clock)
    second = session.confirm_request()

    assert second.id != first.id
    assert session.request.status == RideStatus.REQUESTING


def test_stage_progression(clock, session):
    stages = [session.snapshot().stage]

    quoted(session, clock)
    stages.append(session.snapshot().stage)
    session.confirm_request()
    stages.append(session.snapshot().stage)
    clock.advance(3)
    stages.append(session.snapshot().stage)
    clock.advance(12)
    stages.append(session.snapshot().stage)
    session.finalize()
    stages.append(session.snapshot().stage)

    assert stages == [
        SessionStage.START,
        SessionStage.QUOTED,
        SessionStage.REQUESTING,
        SessionStage.TRACKING,
        SessionStage.TRACKING,
        SessionStage.PAYMENT,
    ]


def test_snapshot_lists_available_providers(session):
    assert [p.id for p in session.snapshot().providers] == ["3", "1"]


def test_unsubscribe_stops_notifications(clock, session):
    seen = []
    unsubscribe = session.subscribe(seen.append)

    session.edit_origin("Rua A")
    unsubscribe()
    session.edit_origin("Rua AB")

    assert len(seen) == 1
