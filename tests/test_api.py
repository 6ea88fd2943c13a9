"""
Integration tests for the HTTP API.
"""

import pytest

NEW_CLIENT = {
    "first_name": "David",
    "last_name": "Miller",
    "dob": "1980-06-30",
    "address": "101 Casino Blvd, Las Vegas",
    "country": "United States",
    "postal_code": "89109",
    "job": "Dealer",
    "industry": "Gambling",
    "pep": False,
}


def create_client(api, **overrides):
    response = api.post("/clients", json={**NEW_CLIENT, **overrides})
    assert response.status_code == 201
    return response.json()


class TestHealthAndAssess:
    def test_health(self, api):
        response = api.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_assess_preview(self, api):
        response = api.post(
            "/assess",
            json={"pep": True, "country": "Russia", "industry": "Oil & Gas", "job": "CEO"},
        )

        assert response.status_code == 200
        assert response.json() == {
            "score": 50,
            "band": "RED",
            "factors": ["Politically Exposed Person (+30)", "High Risk Country: Russia (+20)"],
            "next_review_months": 6,
        }

    def test_assess_with_missing_fields(self, api):
        response = api.post("/assess", json={})

        assert response.json()["score"] == 0
        assert response.json()["band"] == "GREEN"


class TestRiskConfigEndpoints:
    def test_read_defaults(self, api):
        body = api.get("/risk-config").json()

        assert body["weights"]["pep"] == 30
        assert body["thresholds"] == {"medium": 25, "high": 45}
        assert body["review_months"] == {"RED": 6, "YELLOW": 12, "GREEN": 24}

    def test_update_thresholds_changes_scoring(self, api):
        response = api.put("/risk-config", json={"thresholds": {"medium": 10, "high": 20}})
        assert response.status_code == 200

        assessed = api.post("/assess", json={"job": "Waiter"}).json()
        assert assessed["band"] == "YELLOW"

    def test_invalid_thresholds_rejected(self, api):
        response = api.put("/risk-config", json={"thresholds": {"medium": 50, "high": 20}})

        assert response.status_code == 422
        assert response.json()["detail"]["error_code"] == "RISK_CONFIG_INVALID"
        assert api.get("/risk-config").json()["thresholds"] == {"medium": 25, "high": 45}

    @pytest.mark.parametrize(
        "body",
        [
            {"weights": {"pep": 50}},
            {"weights": {"pep": -1, "high_risk_country": 20, "high_risk_industry": 20, "cash_intensive_job": 10}},
            {"thresholds": {"medium": 45, "high": 45}},
            {"weight": {"pep": 50}},
        ],
    )
    def test_rejected_writes_share_one_error_body(self, api, body):
        response = api.put("/risk-config", json=body)

        assert response.status_code == 422
        detail = response.json()["detail"]
        assert detail["error_code"] == "RISK_CONFIG_INVALID"
        assert detail["details"]["errors"]
        assert api.get("/risk-config").json()["weights"]["pep"] == 30

    def test_incomplete_review_months_rejected_with_error_body(self, api):
        response = api.put("/risk-config", json={"review_months": {"RED": 3}})

        assert response.status_code == 422
        assert response.json()["detail"]["error_code"] == "RISK_CONFIG_INVALID"

    def test_country_helpers(self, api):
        added = api.post("/risk-config/high-risk-countries/United States").json()
        assert "United States" in added["high_risk_countries"]

        again = api.post("/risk-config/high-risk-countries/United States").json()
        assert again["high_risk_countries"].count("United States") == 1

        removed = api.delete("/risk-config/high-risk-countries/Iran").json()
        assert "Iran" not in removed["high_risk_countries"]

    def test_industry_and_job_helpers(self, api):
        api.post("/risk-config/high-risk-industries/Pawn Shop")
        api.post("/risk-config/cash-intensive-jobs/Dealer")
        config = api.delete("/risk-config/high-risk-industries/Casino").json()

        assert "Pawn Shop" in config["high_risk_industries"]
        assert "Casino" not in config["high_risk_industries"]
        assert "Dealer" in config["cash_intensive_jobs"]

    def test_reset(self, api):
        api.put("/risk-config", json={"high_risk_countries": ["Atlantis"]})

        body = api.post("/risk-config/reset").json()

        assert "Iran" in body["high_risk_countries"]
        assert "Atlantis" not in body["high_risk_countries"]


class TestClientEndpoints:
    def test_create_returns_scored_client_with_status(self, api):
        body = create_client(api)

        assert body["score"] == 20
        assert body["band"] == "GREEN"
        assert body["status"] == "OK"
        assert body["next_review"].startswith("2028-01-15")

    def test_create_after_adding_keyword(self, api):
        api.post("/risk-config/cash-intensive-jobs/Dealer")

        body = create_client(api)

        assert body["score"] == 30
        assert body["band"] == "YELLOW"
        assert body["next_review"].startswith("2027-01-15")

    def test_missing_required_field(self, api):
        payload = {k: v for k, v in NEW_CLIENT.items() if k != "last_name"}

        assert api.post("/clients", json=payload).status_code == 422

    def test_get_and_not_found(self, api):
        created = create_client(api)

        assert api.get(f"/clients/{created['id']}").json()["last_name"] == "Miller"

        missing = api.get("/clients/nope")
        assert missing.status_code == 404
        assert missing.json()["detail"]["error_code"] == "CLIENT_NOT_FOUND"

    def test_list_filters(self, api):
        create_client(api)
        create_client(api, first_name="Boris", last_name="Ivanov", country="Russia", pep=True)

        assert len(api.get("/clients").json()) == 2
        assert len(api.get("/clients", params={"risk_band": "ALL"}).json()) == 2
        red = api.get("/clients", params={"risk_band": "RED"}).json()
        assert [c["first_name"] for c in red] == ["Boris"]
        found = api.get("/clients", params={"search": "mill"}).json()
        assert [c["last_name"] for c in found] == ["Miller"]

    def test_unknown_band_filter(self, api):
        assert api.get("/clients", params={"risk_band": "PURPLE"}).status_code == 400

    def test_update_rescores(self, api):
        created = create_client(api)

        response = api.put(f"/clients/{created['id']}", json={"pep": True})

        assert response.status_code == 200
        assert response.json()["score"] == 50
        assert response.json()["band"] == "RED"

    def test_reassess_after_config_change(self, api):
        created = create_client(api)
        api.post("/risk-config/high-risk-countries/United States")

        body = api.post(f"/clients/{created['id']}/reassess").json()

        assert body["score"] == 40
        assert body["band"] == "YELLOW"

    def test_delete_cascades_documents(self, api, document_store):
        created = create_client(api)
        api.post(
            f"/clients/{created['id']}/documents",
            files={"file": ("id.pdf", b"%PDF-1.4", "application/pdf")},
        )

        assert api.delete(f"/clients/{created['id']}").status_code == 204
        assert api.get(f"/clients/{created['id']}").status_code == 404
        assert document_store.list_for_client(created["id"]) == []


class TestDocumentEndpoints:
    def test_upload_list_download_delete(self, api):
        client_id = create_client(api)["id"]

        uploaded = api.post(
            f"/clients/{client_id}/documents",
            files={"file": ("passport.pdf", b"%PDF-1.4 scan", "application/pdf")},
        )
        assert uploaded.status_code == 201
        document_id = uploaded.json()["id"]

        listed = api.get(f"/clients/{client_id}/documents").json()
        assert [d["name"] for d in listed] == ["passport.pdf"]

        downloaded = api.get(f"/clients/{client_id}/documents/{document_id}/download")
        assert downloaded.status_code == 200
        assert downloaded.content == b"%PDF-1.4 scan"

        assert api.delete(f"/clients/{client_id}/documents/{document_id}").status_code == 204
        assert api.get(f"/clients/{client_id}/documents").json() == []

    def test_rejects_unsupported_type(self, api):
        client_id = create_client(api)["id"]

        response = api.post(
            f"/clients/{client_id}/documents",
            files={"file": ("notes.txt", b"hello", "text/plain")},
        )

        assert response.status_code == 400
        assert response.json()["detail"]["error_code"] == "UNSUPPORTED_DOCUMENT_TYPE"

    def test_upload_for_unknown_client(self, api):
        response = api.post(
            "/clients/nope/documents",
            files={"file": ("passport.pdf", b"%PDF-1.4", "application/pdf")},
        )

        assert response.status_code == 404

    def test_download_from_wrong_client(self, api):
        owner = create_client(api)["id"]
        other = create_client(api, first_name="Eve")["id"]
        document_id = api.post(
            f"/clients/{owner}/documents",
            files={"file": ("passport.pdf", b"%PDF-1.4", "application/pdf")},
        ).json()["id"]

        response = api.get(f"/clients/{other}/documents/{document_id}/download")

        assert response.status_code == 404


class TestDashboard:
    def test_summary(self, api):
        create_client(api)
        create_client(api, first_name="Boris", last_name="Ivanov", country="Russia", pep=True)

        body = api.get("/dashboard/summary").json()

        assert body["total_clients"] == 2
        assert body["high_risk_clients"] == 1
        assert body["band_distribution"] == {"GREEN": 1, "YELLOW": 0, "RED": 1}
        assert body["status_distribution"] == {"OK": 2, "DUE_SOON": 0, "OVERDUE": 0}
        assert body["priority_reviews"] == []
