"""Tests for utils/export.py."""

from datetime import datetime
from decimal import Decimal

from nft_vote.utils.export import CSV_HEADER, allocate_percentages, results_to_csv

RESULTS = [
    {"id": "1", "title": "Option A", "votes": 45},
    {"id": "2", "title": "Option B", "votes": 32},
    {"id": "3", "title": "Option C", "votes": 28},
]


class TestAllocatePercentages:

    def test_sums_to_exactly_100(self):
        shares = allocate_percentages([45, 32, 28])
        assert sum(shares) == Decimal("100.00")
        assert shares == [Decimal("42.86"), Decimal("30.47"), Decimal("26.67")]

    def test_thirds(self):
        shares = allocate_percentages([1, 1, 1])
        assert sum(shares) == Decimal("100.00")
        assert sorted(shares) == [Decimal("33.33"), Decimal("33.33"), Decimal("33.34")]

    def test_no_votes(self):
        assert allocate_percentages([0, 0]) == [Decimal("0.00"), Decimal("0.00")]

    def test_single_option(self):
        assert allocate_percentages([7]) == [Decimal("100.00")]


class TestResultsToCsv:

    def test_layout(self):
        body = results_to_csv(RESULTS, exported_by="admin@example.com", now=datetime(2024, 3, 1, 9, 30))
        lines = body.splitlines()

        assert lines[0] == ",".join(CSV_HEADER)
        assert lines[1] == "1,Option A,45,42.86%"
        assert lines[2] == "2,Option B,32,30.47%"
        assert lines[3] == "3,Option C,28,26.67%"
        assert lines[4] == ""
        assert lines[5] == "TOTAL,Total Votes,105,100.00%"
        assert lines[6] == ""
        assert lines[7] == "EXPORT_DATE,2024-03-01T09:30:00Z,,"
        assert lines[8] == "EXPORT_BY,admin@example.com,,"

    def test_titles_are_quoted(self):
        rows = [{"id": "1", "title": "Yes, please", "votes": 1}]
        body = results_to_csv(rows, exported_by="x", now=datetime(2024, 1, 1))
        assert '1,"Yes, please",1,100.00%' in body.splitlines()

    def test_empty_ballot_box(self):
        rows = [{**row, "votes": 0} for row in RESULTS]
        lines = results_to_csv(rows, exported_by="x").splitlines()

        assert lines[1].endswith(",0,0.00%")
        assert lines[5] == "TOTAL,Total Votes,0,0.00%"
