"""Tests for the /api/admin endpoints."""

import csv
import io
import re

import pytest

from nft_vote import create_app
from nft_vote.config import DEFAULT_VOTING_OPTIONS, TestingConfig
from nft_vote.models.user import AUTH_EMAIL, AUTH_WALLET


class SeededConfig(TestingConfig):
    VOTING_OPTIONS = DEFAULT_VOTING_OPTIONS
    ADMIN_WALLETS = ["addr1admin"]


@pytest.fixture
def app():
    return create_app(SeededConfig)


@pytest.fixture
def admin_headers(login):
    _, headers = login("admin@example.com")
    return headers


class TestStats:

    def test_shape(self, client, admin_headers):
        response = client.get("/api/admin/stats", headers=admin_headers)

        assert response.status_code == 200
        body = response.get_json()
        assert set(body) == {
            "timestamp", "totalUsers", "usersByAuthMethod", "totalVotes", "recordedVotes", "votingOptions",
        }
        assert body["timestamp"].endswith("Z")
        assert body["totalUsers"] == 1
        assert body["usersByAuthMethod"] == {AUTH_EMAIL: 1, AUTH_WALLET: 0}
        assert body["totalVotes"] == 105
        assert body["recordedVotes"] == 0

    def test_option_percentages(self, client, admin_headers):
        options = client.get("/api/admin/stats", headers=admin_headers).get_json()["votingOptions"]

        assert [(o["id"], o["votes"], o["percentage"]) for o in options] == [
            ("1", 45, 43),
            ("2", 32, 30),
            ("3", 28, 27),
        ]
        assert options[0]["title"] == "Option A"

    def test_counts_recorded_votes(self, client, admin_headers, login, services):
        user, _ = login("voter@example.com")
        services.ledger.cast_vote(user.id, "2")
        client.post("/api/auth/wallet-connect", json={"walletType": "nami", "walletAddress": "addr1w"})

        body = client.get("/api/admin/stats", headers=admin_headers).get_json()

        assert body["totalUsers"] == 3
        assert body["usersByAuthMethod"] == {AUTH_EMAIL: 2, AUTH_WALLET: 1}
        assert body["totalVotes"] == 106
        assert body["recordedVotes"] == 1
        assert body["votingOptions"][1]["votes"] == 33

    def test_admin_wallet_is_admin(self, client):
        token = client.post(
            "/api/auth/wallet-connect", json={"walletType": "nami", "walletAddress": "addr1admin"}
        ).get_json()["token"]

        response = client.get("/api/admin/stats", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200


class TestExport:

    def test_csv_download(self, client, admin_headers):
        response = client.get("/api/admin/export", headers=admin_headers)

        assert response.status_code == 200
        assert response.mimetype == "text/csv"
        assert re.fullmatch(
            r'attachment; filename="voting-results-\d{4}-\d{2}-\d{2}\.csv"',
            response.headers["Content-Disposition"],
        )

    def test_csv_rows(self, client, admin_headers):
        text = client.get("/api/admin/export", headers=admin_headers).get_data(as_text=True)
        rows = list(csv.reader(io.StringIO(text)))

        assert rows[0] == ["Option ID", "Option Title", "Votes", "Percentage"]
        assert rows[1:4] == [
            ["1", "Option A", "45", "42.86%"],
            ["2", "Option B", "32", "30.47%"],
            ["3", "Option C", "28", "26.67%"],
        ]
        assert rows[5] == ["TOTAL", "Total Votes", "105", "100.00%"]
        assert rows[7][0] == "EXPORT_DATE"
        assert rows[8] == ["EXPORT_BY", "admin@example.com", "", ""]

    def test_option_percentages_sum_to_100(self, client, admin_headers):
        text = client.get("/api/admin/export", headers=admin_headers).get_data(as_text=True)
        rows = list(csv.reader(io.StringIO(text)))[1:4]

        total = sum(round(float(row[3].rstrip("%")) * 100) for row in rows)
        assert total == 10000

    def test_wallet_admin_is_named_by_address(self, client):
        token = client.post(
            "/api/auth/wallet-connect", json={"walletType": "nami", "walletAddress": "addr1admin"}
        ).get_json()["token"]

        text = client.get("/api/admin/export", headers={"Authorization": f"Bearer {token}"}).get_data(as_text=True)

        assert "EXPORT_BY,addr1admin,," in text.splitlines()


def test_default_ballot_is_seeded():
    assert [(o["id"], o["baseline"]) for o in DEFAULT_VOTING_OPTIONS] == [("1", 45), ("2", 32), ("3", 28)]
    assert all(o["baseline"] == 0 for o in TestingConfig.VOTING_OPTIONS)
