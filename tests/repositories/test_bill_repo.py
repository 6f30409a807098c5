from datetime import date

from fleetdesk.models.ledger import Installment, LedgerStatus


class TestBillRepoCRUD:
    def test_create_and_get(self, bill_repo, sample_bill):
        created = bill_repo.create(sample_bill())

        assert created.id is not None
        assert created.uuid != ""
        assert created.total_amount == 100000
        assert created.status == LedgerStatus.UNPAID
        assert created.date == date(2026, 3, 1)
        assert created.installments == []

    def test_get_by_id_not_found(self, bill_repo):
        assert bill_repo.get_by_id(9999) is None

    def test_get_by_uuid(self, bill_repo, sample_bill):
        created = bill_repo.create(sample_bill())
        fetched = bill_repo.get_by_uuid(created.uuid)
        assert fetched is not None
        assert fetched.id == created.id

    def test_get_by_uuid_not_found(self, bill_repo):
        assert bill_repo.get_by_uuid("nonexistent") is None

    def test_update_replaces_installments_and_keeps_uuids(self, bill_repo, sample_bill):
        bill = bill_repo.create(sample_bill())
        bill.installments = [
            Installment(uuid="01INSTALLMENTA", amount=40000, paid_date=date(2026, 3, 2), notes="cash"),
            Installment(amount=10000, paid_date=date(2026, 3, 5)),
        ]
        bill.refresh()
        updated = bill_repo.update(bill)

        assert updated.paid_amount == 50000
        assert updated.status == LedgerStatus.PARTIAL
        assert [i.amount for i in updated.installments] == [40000, 10000]
        assert updated.installments[0].uuid == "01INSTALLMENTA"
        assert updated.installments[0].notes == "cash"
        assert updated.installments[1].uuid != ""

        updated.installments = updated.installments[1:]
        updated.refresh()
        again = bill_repo.update(updated)
        assert len(again.installments) == 1
        assert again.paid_amount == 10000

    def test_soft_delete_hides_bill(self, bill_repo, sample_bill):
        bill = bill_repo.create(sample_bill())
        bill_repo.delete(bill.id)
        assert bill_repo.get_by_id(bill.id) is None
        assert bill_repo.list_all() == []


class TestBillRepoList:
    def test_filters(self, bill_repo, sample_bill):
        from fleetdesk.models.bill import BillType

        bill_repo.create(sample_bill(name="Diesel"))
        bill_repo.create(sample_bill(name="Storage", type=BillType.INCOME))

        assert len(bill_repo.list_all()) == 2
        assert [b.name for b in bill_repo.list_all(bill_type="income")] == ["Storage"]
        assert len(bill_repo.list_all(status="unpaid")) == 2
        assert bill_repo.list_all(status="paid") == []

    def test_list_loads_installments(self, bill_repo, sample_bill):
        bill = bill_repo.create(sample_bill())
        bill.installments = [Installment(amount=100, paid_date=date(2026, 3, 2))]
        bill.refresh()
        bill_repo.update(bill)
        bill_repo.create(sample_bill(name="Tyres"))

        by_name = {b.name: b for b in bill_repo.list_all()}
        assert len(by_name["Diesel"].installments) == 1
        assert by_name["Tyres"].installments == []
