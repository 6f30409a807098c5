from fleetdesk.models.driver import DriverStatus
from fleetdesk.models.vehicle import Vehicle, VehicleStatus


class TestCompanyRepo:
    def test_create_and_lookups(self, company_repo, sample_company):
        created = company_repo.create(sample_company())

        assert created.id is not None
        assert created.company_code == "COMP-001"
        assert company_repo.get_by_uuid(created.uuid).id == created.id
        assert company_repo.get_by_name("Al Noor Logistics").id == created.id
        assert company_repo.get_by_name("al noor") is None
        assert created.phone == "+91500000001"

    def test_update(self, company_repo, sample_company):
        company = company_repo.create(sample_company())
        company.address = "King Fahd Road"
        assert company_repo.update(company).address == "King Fahd Road"

    def test_delete_and_purge(self, company_repo, sample_company):
        kept = company_repo.create(sample_company())
        gone = company_repo.create(sample_company(company_code="COMP-002", name="Najd Freight"))
        company_repo.delete(kept.id)
        company_repo.purge(gone.id)
        assert company_repo.get_by_id(kept.id) is None
        assert company_repo.list_all() == []


class TestDriverRepo:
    def test_create_and_lookup_by_iqama(self, driver_repo, sample_driver):
        created = driver_repo.create(sample_driver())

        assert created.driver_code == "DRV-001"
        assert created.status == DriverStatus.ACTIVE
        assert driver_repo.get_by_iqama_id("2400000001").id == created.id
        assert driver_repo.get_by_iqama_id("0000") is None

    def test_blank_iqama_stored_as_null(self, driver_repo, sample_driver):
        first = driver_repo.create(sample_driver(iqama_id=""))
        second = driver_repo.create(sample_driver(driver_code="DRV-002", iqama_id=None))
        assert first.iqama_id is None
        assert second.iqama_id is None

    def test_update_status(self, driver_repo, sample_driver):
        driver = driver_repo.create(sample_driver())
        driver.status = DriverStatus.SUSPENDED
        assert driver_repo.update(driver).status == DriverStatus.SUSPENDED

    def test_iqama_lookup_can_include_deleted(self, driver_repo, sample_driver):
        driver = driver_repo.create(sample_driver())
        driver_repo.delete(driver.id)

        assert driver_repo.get_by_iqama_id("2400000001") is None
        held = driver_repo.get_by_iqama_id("2400000001", include_deleted=True)
        assert held.id == driver.id
        assert held.deleted_at is not None


class TestVehicleRepo:
    def test_create_and_update_status(self, vehicle_repo, company_repo, sample_company):
        company = company_repo.create(sample_company())
        vehicle = vehicle_repo.create(
            Vehicle(
                vehicle_code="VEH-001",
                company_id=company.id,
                vehicle_type="Trailer",
                plate_no="ABC-1234",
                acquisition_cost=5000000,
            )
        )

        assert vehicle_repo.get_by_plate_no("ABC-1234").id == vehicle.id
        vehicle_repo.update_status(vehicle.id, VehicleStatus.RENTED)
        assert vehicle_repo.get_by_id(vehicle.id).status == VehicleStatus.RENTED
        assert len(vehicle_repo.list_all()) == 1

    def test_plate_lookup_can_include_deleted(self, vehicle_repo, company_repo, sample_company):
        company = company_repo.create(sample_company())
        vehicle = vehicle_repo.create(
            Vehicle(vehicle_code="VEH-001", company_id=company.id, vehicle_type="Dyna", plate_no="DYN-1")
        )
        vehicle_repo.delete(vehicle.id)

        assert vehicle_repo.get_by_plate_no("DYN-1") is None
        held = vehicle_repo.get_by_plate_no("DYN-1", include_deleted=True)
        assert held.id == vehicle.id
        assert held.deleted_at is not None
