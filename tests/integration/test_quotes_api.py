"""Integration tests for quote endpoints."""

import pytest


class TestCreateQuote:
    """Tests for POST /v1/quotes."""

    def test_create_quote(self, client, user_headers, sample_quote_request):
        response = client.post("/v1/quotes", json=sample_quote_request, headers=user_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["id"].startswith("quote_")
        assert data["status"] == "draft"
        assert data["client_name"] == "Acme Ltd"
        assert data["template_style"] == "modern"
        assert data["sent_at"] is None
        assert data["created_at"] == data["updated_at"]

    def test_create_unauthenticated(self, client, sample_quote_request):
        response = client.post("/v1/quotes", json=sample_quote_request)
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTH_MISSING_CREDENTIALS"

    def test_create_invalid_key(self, client, invalid_user_headers, sample_quote_request):
        response = client.post(
            "/v1/quotes", json=sample_quote_request, headers=invalid_user_headers
        )
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTH_INVALID_KEY"

    def test_create_missing_client_name(self, client, user_headers):
        response = client.post("/v1/quotes", json={"price": 100}, headers=user_headers)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_create_blank_client_name_writes_nothing(self, client, user_headers):
        response = client.post("/v1/quotes", json={"client_name": "  "}, headers=user_headers)
        assert response.status_code == 400

        profile = client.get("/v1/account/profile", headers=user_headers).json()
        assert profile["quotes_created_count"] == 0

    def test_monthly_quota(self, client, user_headers):
        """Test that the 50th quote succeeds and the 51st is refused."""
        for i in range(50):
            response = client.post(
                "/v1/quotes", json={"client_name": f"Client {i}"}, headers=user_headers
            )
            assert response.status_code == 201

        response = client.post("/v1/quotes", json={"client_name": "One too many"}, headers=user_headers)

        assert response.status_code == 429
        error = response.json()["error"]
        assert error["code"] == "QUOTA_EXCEEDED"
        assert error["details"]["limit"] == 50
        assert error["details"]["used"] == 50
        assert "upgrade_url" in error["details"]
        assert "X-Quota-Reset" in response.headers
        assert response.headers["X-Quota-Limit"] == "50"


class TestListQuotes:
    """Tests for GET /v1/quotes."""

    @pytest.fixture
    def quote_ids(self, client, user_headers):
        ids = []
        for name in ("First", "Second", "Third"):
            response = client.post("/v1/quotes", json={"client_name": name}, headers=user_headers)
            ids.append(response.json()["id"])
        return ids

    def test_list_newest_first(self, client, user_headers, quote_ids):
        response = client.get("/v1/quotes", headers=user_headers)

        assert response.status_code == 200
        assert [q["id"] for q in response.json()] == list(reversed(quote_ids))

    def test_update_moves_to_front(self, client, user_headers, quote_ids):
        client.patch(f"/v1/quotes/{quote_ids[0]}", json={"price": 10}, headers=user_headers)

        response = client.get("/v1/quotes", headers=user_headers)
        assert response.json()[0]["id"] == quote_ids[0]

    def test_list_limit(self, client, user_headers, quote_ids):
        response = client.get("/v1/quotes", params={"limit": 2}, headers=user_headers)
        assert len(response.json()) == 2

    def test_recent_quotes(self, client, user_headers, quote_ids):
        response = client.get("/v1/quotes/recent", params={"limit": 1}, headers=user_headers)

        assert response.status_code == 200
        assert [q["id"] for q in response.json()] == [quote_ids[-1]]

    def test_list_empty_for_other_user(self, client, other_user_headers, quote_ids):
        response = client.get("/v1/quotes", headers=other_user_headers)
        assert response.status_code == 200
        assert response.json() == []


class TestQuoteById:
    """Tests for single-quote endpoints."""

    @pytest.fixture
    def quote_id(self, client, user_headers, sample_quote_request):
        response = client.post("/v1/quotes", json=sample_quote_request, headers=user_headers)
        return response.json()["id"]

    def test_get_quote(self, client, user_headers, quote_id):
        response = client.get(f"/v1/quotes/{quote_id}", headers=user_headers)
        assert response.status_code == 200
        assert response.json()["id"] == quote_id

    def test_get_not_found(self, client, user_headers):
        response = client.get("/v1/quotes/quote_nonexistent", headers=user_headers)
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "QUOTE_NOT_FOUND"

    def test_get_wrong_owner(self, client, other_user_headers, quote_id):
        response = client.get(f"/v1/quotes/{quote_id}", headers=other_user_headers)
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "AUTH_PERMISSION_DENIED"

    def test_patch_fields(self, client, user_headers, quote_id):
        response = client.patch(
            f"/v1/quotes/{quote_id}",
            json={"price": 4200, "client_email": None},
            headers=user_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["price"] == 4200
        assert data["client_email"] is None
        assert data["client_name"] == "Acme Ltd"

    def test_patch_not_found_creates_nothing(self, client, user_headers):
        response = client.patch(
            "/v1/quotes/quote_nonexistent", json={"price": 1}, headers=user_headers
        )
        assert response.status_code == 404
        assert client.get("/v1/quotes", headers=user_headers).json() == []

    def test_patch_wrong_owner(self, client, other_user_headers, quote_id):
        response = client.patch(
            f"/v1/quotes/{quote_id}", json={"price": 1}, headers=other_user_headers
        )
        assert response.status_code == 403

    def test_patch_invalid_field(self, client, user_headers, quote_id):
        response = client.patch(
            f"/v1/quotes/{quote_id}", json={"client_name": ""}, headers=user_headers
        )
        assert response.status_code == 400

    def test_lifecycle(self, client, user_headers, quote_id):
        """Test draft -> pending -> approved keeps the sent timestamp."""
        sent = client.patch(
            f"/v1/quotes/{quote_id}", json={"status": "pending"}, headers=user_headers
        ).json()
        assert sent["status"] == "pending"
        assert sent["sent_at"] is not None

        approved = client.patch(
            f"/v1/quotes/{quote_id}", json={"status": "approved"}, headers=user_headers
        ).json()
        assert approved["status"] == "approved"
        assert approved["sent_at"] == sent["sent_at"]

    def test_illegal_transition(self, client, user_headers, quote_id):
        response = client.patch(
            f"/v1/quotes/{quote_id}", json={"status": "approved"}, headers=user_headers
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_STATUS_TRANSITION"
        quote = client.get(f"/v1/quotes/{quote_id}", headers=user_headers).json()
        assert quote["status"] == "draft"

    def test_send_quote(self, client, user_headers, quote_id):
        response = client.post(f"/v1/quotes/{quote_id}/send", headers=user_headers)

        assert response.status_code == 200
        assert response.json()["status"] == "pending"
        assert response.json()["sent_at"] is not None

    def test_generate_text(self, client, user_headers, quote_id):
        response = client.post(f"/v1/quotes/{quote_id}/generate-text", headers=user_headers)

        assert response.status_code == 200
        assert "Acme Ltd" in response.json()["generated_text"]

    def test_delete_quote(self, client, user_headers, quote_id):
        response = client.delete(f"/v1/quotes/{quote_id}", headers=user_headers)
        assert response.status_code == 204

        response = client.get(f"/v1/quotes/{quote_id}", headers=user_headers)
        assert response.status_code == 404

        profile = client.get("/v1/account/profile", headers=user_headers).json()
        assert profile["quotes_created_count"] == 1

    def test_delete_wrong_owner(self, client, user_headers, other_user_headers, quote_id):
        response = client.delete(f"/v1/quotes/{quote_id}", headers=other_user_headers)
        assert response.status_code == 403
        assert client.get(f"/v1/quotes/{quote_id}", headers=user_headers).status_code == 200

    def test_delete_not_found(self, client, user_headers):
        response = client.delete("/v1/quotes/quote_nonexistent", headers=user_headers)
        assert response.status_code == 404


class TestTextPreview:
    """Tests for POST /v1/quotes/generate-text."""

    def test_preview(self, client, user_headers):
        response = client.post(
            "/v1/quotes/generate-text",
            json={
                "client_name": "Acme",
                "hours": 3,
                "price": 900,
                "description": "Audit",
            },
            headers=user_headers,
        )

        assert response.status_code == 200
        text = response.json()["text"]
        assert "Acme" in text
        assert "professional" in text

    def test_preview_requires_hours(self, client, user_headers):
        response = client.post(
            "/v1/quotes/generate-text",
            json={"client_name": "Acme", "hours": 0, "price": 900, "description": "Audit"},
            headers=user_headers,
        )
        assert response.status_code == 400
