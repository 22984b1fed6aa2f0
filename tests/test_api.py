"""
Tests for the HTTP endpoints.
"""
import re

from app.domain.pricing.catalog import catalog_provider, get_pricing_catalog
from app.domain.quotes.lifecycle import QuoteStatus
from app.main import app


def submit(client, form_data, selection, path="/api/send-quote"):
    return client.post(path, json={"formData": form_data, "selection": selection})


class TestHealth:
    def test_root_and_health(self, client):
        assert client.get("/").status_code == 200
        assert client.get("/health").json() == {"status": "healthy"}


class TestPricingEndpoints:
    def test_calculate_quote(self, client, selection):
        response = client.post("/api/calculate-quote", json=selection)

        assert response.status_code == 200
        data = response.json()
        assert data["finalPrice"] == "167.70"
        assert data["soilingLevel"] == "Medium"

    def test_calculate_quote_unknown_pair(self, client, selection):
        selection["propertySize"] = "9-bed (castle)"
        response = client.post("/api/calculate-quote", json=selection)

        assert response.status_code == 404
        assert response.json()["detail"] == "No matching pricing data found"

    def test_calculate_quote_bad_soiling_level(self, client, selection):
        selection["soilingLevel"] = "Filthy"
        assert client.post("/api/calculate-quote", json=selection).status_code == 400

    def test_calculate_quote_negative_count(self, client, selection):
        selection["extras"]["carpetRooms"] = -1
        assert client.post("/api/calculate-quote", json=selection).status_code == 400

    def test_calculate_quote_requires_soiling_level(self, client, selection):
        del selection["soilingLevel"]
        assert client.post("/api/calculate-quote", json=selection).status_code == 422

    def test_missing_catalog_file_hides_server_path(self, client, selection, tmp_path, monkeypatch):
        app.dependency_overrides.pop(get_pricing_catalog)
        missing = tmp_path / "gone" / "pricing_data.json"
        monkeypatch.setattr(catalog_provider, "path", str(missing))
        monkeypatch.setattr(catalog_provider, "_catalog", None)

        response = client.post("/api/calculate-quote", json=selection)

        assert response.status_code == 404
        assert response.json()["detail"] == "Pricing data not available"
        assert str(tmp_path) not in response.text

    def test_pricing_options(self, client):
        data = client.get("/api/pricing/options").json()

        assert data["serviceTypes"] == ["Regular Domestic Cleaning", "Deep Cleaning"]
        assert data["propertySizes"]["Regular Domestic Cleaning"] == ["2-bed (flat)"]
        assert data["soilingLevels"] == ["Light", "Medium", "Heavy"]

    def test_pricing_catalog(self, client):
        data = client.get("/api/pricing/catalog").json()

        assert len(data) == 3
        assert data[0]["labourCost"] == "60.00"


class TestSubmission:
    def test_send_quote_stores_pending_and_notifies(self, client, repository, form_data, selection, sent_notifications):
        response = submit(client, form_data, selection)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert re.fullmatch(r"KMI-\d{6}-[0-9A-F]{8}", body["quoteId"])

        stored = repository.find_by_id(body["quoteId"])
        assert stored.status == QuoteStatus.PENDING
        assert stored.customerDetails.email == "jane@example.com"
        assert stored.customerDetails.phone == "+447700900123"
        assert body["quote"]["costDetails"]["finalPrice"] == "167.70"
        assert [r.id for r in sent_notifications] == [body["quoteId"]]

    def test_client_prices_are_ignored(self, client, form_data, selection):
        selection["finalPrice"] = "1.00"
        body = submit(client, form_data, selection).json()
        assert body["quote"]["costDetails"]["finalPrice"] == "167.70"

    def test_store_quote_does_not_notify(self, client, repository, form_data, selection, sent_notifications):
        response = submit(client, form_data, selection, path="/api/store-quote")

        assert response.status_code == 200
        assert len(repository.list_quotes()) == 1
        assert sent_notifications == []

    def test_unknown_pair_stores_nothing(self, client, repository, form_data, selection, sent_notifications):
        selection["serviceType"] = "Window Washing"
        response = submit(client, form_data, selection)

        assert response.status_code == 404
        assert repository.list_quotes() == []
        assert sent_notifications == []

    def test_other_referral_required(self, client, form_data, selection):
        form_data["referralSource"] = "Other"
        assert submit(client, form_data, selection).status_code == 422

        form_data["otherReferral"] = "Leaflet"
        assert submit(client, form_data, selection).status_code == 200

    def test_invalid_phone_rejected(self, client, form_data, selection):
        form_data["phone"] = "12345"
        assert submit(client, form_data, selection).status_code == 422

    def test_storage_failure_is_500(self, client, quote_store, form_data, selection, sent_notifications):
        quote_store.path.parent.mkdir(parents=True)
        quote_store.path.write_text("not json", encoding="utf-8")

        response = submit(client, form_data, selection)

        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to process quote"
        assert sent_notifications == []


class TestTracker:
    def test_list_search_and_sort(self, client, repository, make_record):
        repository.append(make_record(quote_id="KMI-000001-AAAAAAAA", name="Zoe Adams"))
        repository.append(
            make_record(quote_id="KMI-000002-BBBBBBBB", name="Adam Brown", soiling_level="Heavy")
        )
        repository.append(
            make_record(quote_id="KMI-000003-CCCCCCCC", name="Mia Clark", status=QuoteStatus.COMPLETED)
        )

        data = client.get("/api/quotes").json()
        assert data["total"] == 3
        assert [q["id"] for q in data["quotes"]] == [
            "KMI-000001-AAAAAAAA",
            "KMI-000002-BBBBBBBB",
            "KMI-000003-CCCCCCCC",
        ]

        data = client.get("/api/quotes", params={"status": "pending", "search": "adam"}).json()
        assert [q["id"] for q in data["quotes"]] == ["KMI-000001-AAAAAAAA", "KMI-000002-BBBBBBBB"]
        assert data["filtered"] == 2

        data = client.get("/api/quotes", params={"sort": "customerName", "direction": "asc"}).json()
        assert [q["customerDetails"]["name"] for q in data["quotes"]] == [
            "Adam Brown",
            "Mia Clark",
            "Zoe Adams",
        ]

        data = client.get("/api/quotes", params={"sort": "finalPrice"}).json()
        assert data["quotes"][0]["id"] == "KMI-000002-BBBBBBBB"

    def test_bad_sort_field(self, client):
        assert client.get("/api/quotes", params={"sort": "colour"}).status_code == 400

    def test_get_quote(self, client, repository, make_record):
        repository.append(make_record())

        assert client.get("/api/quotes/KMI-123456-0000ABCD").status_code == 200
        response = client.get("/api/quotes/KMI-999999-00000000")
        assert response.status_code == 404
        assert response.json()["detail"] == "Quote not found"


class TestStatusUpdates:
    def test_update_quote_status(self, client, repository, make_record):
        repository.append(make_record())

        response = client.post(
            "/api/update-quote-status", json={"quoteId": "KMI-123456-0000ABCD", "status": "approved"}
        )

        assert response.status_code == 200
        assert response.json()["status"] == "approved"
        assert repository.find_by_id("KMI-123456-0000ABCD").status == QuoteStatus.APPROVED

    def test_patch_status(self, client, repository, make_record):
        repository.append(make_record(status=QuoteStatus.CANCELLED))

        response = client.patch("/api/quotes/KMI-123456-0000ABCD/status", json={"status": "pending"})

        assert response.status_code == 200
        assert response.json()["quote"]["status"] == "pending"

    def test_invalid_status_is_400(self, client, repository, make_record):
        repository.append(make_record())

        response = client.post(
            "/api/update-quote-status", json={"quoteId": "KMI-123456-0000ABCD", "status": "done"}
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid status value"
        assert repository.find_by_id("KMI-123456-0000ABCD").status == QuoteStatus.PENDING

    def test_unknown_quote_is_404(self, client, repository, make_record):
        repository.append(make_record())

        response = client.post(
            "/api/update-quote-status", json={"quoteId": "KMI-000000-00000000", "status": "approved"}
        )
        assert response.status_code == 404


class TestReports:
    def test_report_endpoint(self, client, repository, make_record):
        repository.append(make_record(status=QuoteStatus.COMPLETED))

        response = client.get("/api/reports", params={"timeFrame": "all"})

        assert response.status_code == 200
        summary = response.json()["financialSummary"]
        assert summary["totalRevenue"] == "91.00"
        assert summary["totalCost"] == "70.00"
        assert summary["completedQuotes"] == 1

    def test_bad_time_frame(self, client):
        assert client.get("/api/reports", params={"timeFrame": "decade"}).status_code == 400
