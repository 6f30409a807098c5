from datetime import date

from fleetdesk.models.load import LoadStatus, RentalType


class TestLoadRepo:
    def test_create_and_get(self, load_repo, sample_load):
        created = load_repo.create(sample_load(rental_type=RentalType.PER_KM, distance_km=50.5))

        assert created.id is not None
        assert created.rental_code == "RNT-2026-001"
        assert created.status == LoadStatus.PENDING
        assert created.rental_type == RentalType.PER_KM
        assert created.distance_km == 50.5
        assert created.rental_date == date(2026, 3, 10)

    def test_get_by_rental_code(self, load_repo, sample_load):
        created = load_repo.create(sample_load())
        assert load_repo.get_by_rental_code("RNT-2026-001").uuid == created.uuid
        assert load_repo.get_by_rental_code("RNT-1999-001") is None

    def test_update(self, load_repo, sample_load):
        load = load_repo.create(sample_load())
        load.status = LoadStatus.ASSIGNED
        load.to_location = "Dammam"
        updated = load_repo.update(load)
        assert updated.status == LoadStatus.ASSIGNED
        assert updated.to_location == "Dammam"

    def test_list_by_status_and_search(self, load_repo, sample_load):
        load_repo.create(sample_load())
        second = load_repo.create(sample_load(rental_code="RNT-2026-002", vehicle_type="Reefer"))
        second.status = LoadStatus.COMPLETED
        load_repo.update(second)

        assert len(load_repo.list_all()) == 2
        assert [x.rental_code for x in load_repo.list_all(status="completed")] == ["RNT-2026-002"]
        assert [x.rental_code for x in load_repo.search("reef")] == ["RNT-2026-002"]
        assert len(load_repo.search("rnt-2026")) == 2

    def test_delete_hides_load(self, load_repo, sample_load):
        load = load_repo.create(sample_load())
        load_repo.delete(load.id)
        assert load_repo.get_by_uuid(load.uuid) is None
        assert load_repo.get_by_rental_code(load.rental_code) is None
