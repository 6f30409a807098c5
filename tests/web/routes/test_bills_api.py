class TestBillRoutes:
    def _create(self, client, **overrides):
        body = {"type": "expense", "name": "Diesel", "total_amount": 100000, "date": "2026-03-01"}
        body.update(overrides)
        response = client.post("/bills", json=body)
        assert response.status_code == 201
        return response.json()

    def test_create_and_get(self, client):
        bill = self._create(client)

        assert bill["uuid"]
        assert bill["status"] == "unpaid"
        assert bill["paid_amount"] == 0

        response = client.get(f"/bills/{bill['uuid']}")
        assert response.status_code == 200
        assert response.json()["name"] == "Diesel"

    def test_negative_total_rejected(self, client):
        response = client.post(
            "/bills", json={"type": "expense", "name": "Diesel", "total_amount": -1, "date": "2026-03-01"}
        )
        assert response.status_code == 400

    def test_installment_lifecycle(self, client):
        bill = self._create(client)
        url = f"/bills/{bill['uuid']}/installments"

        first = client.post(url, json={"amount": 40000, "paid_date": "2026-03-02"})
        assert first.status_code == 201
        assert first.json()["status"] == "partial"

        second = client.post(url, json={"amount": 60000, "paid_date": "2026-03-03", "notes": "final"})
        assert second.json()["status"] == "paid"
        assert second.json()["paid_amount"] == 100000

        rejected = client.post(url, json={"amount": 1, "paid_date": "2026-03-04"})
        assert rejected.status_code == 400
        assert rejected.json()["message"] == "This entry is already fully paid"

        installment_uuid = second.json()["installments"][0]["uuid"]
        deleted = client.delete(f"{url}/{installment_uuid}")
        assert deleted.status_code == 200
        assert deleted.json()["status"] == "partial"
        assert deleted.json()["paid_amount"] == 60000

    def test_invalid_installment_amount(self, client):
        bill = self._create(client)
        response = client.post(f"/bills/{bill['uuid']}/installments", json={"paid_date": "2026-03-02"})
        assert response.status_code == 400
        assert response.json()["errors"]

    def test_update_total_below_paid(self, client):
        bill = self._create(client)
        client.post(f"/bills/{bill['uuid']}/installments", json={"amount": 50000, "paid_date": "2026-03-02"})

        response = client.put(f"/bills/{bill['uuid']}", json={"total_amount": 10000})
        assert response.status_code == 400

        response = client.put(f"/bills/{bill['uuid']}", json={"total_amount": 50000, "name": "Diesel Q1"})
        assert response.status_code == 200
        assert response.json()["status"] == "paid"

    def test_list_filters_and_delete(self, client):
        income = self._create(client, type="income", name="Storage")
        self._create(client)

        response = client.get("/bills", params={"type": "income"})
        assert [b["uuid"] for b in response.json()] == [income["uuid"]]

        assert client.delete(f"/bills/{income['uuid']}").status_code == 200
        assert client.get(f"/bills/{income['uuid']}").status_code == 404
