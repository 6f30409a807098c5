from datetime import date

from fleetdesk.models.load import (
    Load,
    LoadStatus,
    RentalType,
    compute_rental_amount,
    days_between,
)


def _load(**overrides) -> Load:
    defaults = dict(vehicle_type="Trailer", from_location="Riyadh", to_location="Jeddah")
    defaults.update(overrides)
    return Load(**defaults)


class TestDaysBetween:
    def test_three_day_span(self):
        assert days_between(date(2026, 3, 1), date(2026, 3, 4)) == 3

    def test_same_day_counts_as_one(self):
        assert days_between(date(2026, 3, 1), date(2026, 3, 1)) == 1

    def test_missing_dates(self):
        assert days_between(None, date(2026, 3, 1)) == 0
        assert days_between(date(2026, 3, 1), None) == 0


class TestComputeRentalAmount:
    def test_per_day(self):
        assert compute_rental_amount(RentalType.PER_DAY, 100, days=3) == 300

    def test_per_km(self):
        assert compute_rental_amount(RentalType.PER_KM, 10, distance_km=50) == 500

    def test_per_km_rounds(self):
        assert compute_rental_amount(RentalType.PER_KM, 10, distance_km=12.56) == 126

    def test_per_job_is_fixed(self):
        assert compute_rental_amount(RentalType.PER_JOB, 7500, days=9) == 7500


class TestReprice:
    def test_per_day_three_days(self):
        load = _load(
            rental_type=RentalType.PER_DAY,
            rental_price_per_day=100,
            start_date=date(2026, 3, 1),
            end_date=date(2026, 3, 4),
        )
        load.reprice()
        assert load.days_rented == 3
        assert load.rental_amount == 300

    def test_per_km(self):
        load = _load(rental_type=RentalType.PER_KM, rental_price_per_day=10, distance_km=50)
        load.reprice()
        assert load.rental_amount == 500

    def test_explicit_amount_kept_without_pricing(self):
        load = _load(rental_amount=42000)
        load.reprice()
        assert load.rental_amount == 42000
        assert load.days_rented == 0

    def test_per_day_without_dates_keeps_amount(self):
        load = _load(rental_price_per_day=100, rental_amount=900)
        assert not load.has_pricing
        load.reprice()
        assert load.rental_amount == 900


class TestTransitions:
    def test_pending_can_be_assigned(self):
        assert _load().can_transition(LoadStatus.ASSIGNED)

    def test_pending_cannot_complete(self):
        assert not _load().can_transition(LoadStatus.COMPLETED)

    def test_assigned_can_complete_or_cancel(self):
        load = _load(status=LoadStatus.ASSIGNED)
        assert load.can_transition(LoadStatus.COMPLETED)
        assert load.can_transition(LoadStatus.CANCELLED)
        assert load.can_transition(LoadStatus.IN_TRANSIT)

    def test_in_transit_cannot_cancel(self):
        assert not _load(status=LoadStatus.IN_TRANSIT).can_transition(LoadStatus.CANCELLED)

    def test_terminal_states(self):
        for status in (LoadStatus.COMPLETED, LoadStatus.CANCELLED):
            load = _load(status=status)
            assert not any(load.can_transition(target) for target in LoadStatus)
