"""Voting results as a CSV report."""

import csv
import io
from datetime import datetime
from decimal import Decimal, ROUND_DOWN

CSV_HEADER = ["Option ID", "Option Title", "Votes", "Percentage"]


def allocate_percentages(votes: list[int], places: int = 2) -> list[Decimal]:
    """
    Percentages of ``votes`` rounded to ``places`` decimals so that they add
    up to exactly 100 (largest remainder). All zeros when nobody voted.
    """
    total = sum(votes)
    step = Decimal(1).scaleb(-places)
    if total <= 0:
        return [Decimal(0).quantize(step) for _ in votes]

    exact = [Decimal(v) * 100 / Decimal(total) for v in votes]
    floored = [p.quantize(step, rounding=ROUND_DOWN) for p in exact]
    missing = int(((Decimal(100) - sum(floored)) / step).to_integral_value())

    by_remainder = sorted(range(len(votes)), key=lambda i: exact[i] - floored[i], reverse=True)
    for i in by_remainder[:missing]:
        floored[i] += step
    return floored


def results_to_csv(results: list[dict], exported_by: str, now: datetime | None = None) -> str:
    now = now or datetime.utcnow()
    votes = [int(row["votes"]) for row in results]
    total = sum(votes)

    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for row, pct in zip(results, allocate_percentages(votes)):
        writer.writerow([row["id"], row["title"], row["votes"], f"{pct}%"])

    writer.writerow([])
    writer.writerow(["TOTAL", "Total Votes", total, "100.00%" if total else "0.00%"])

    writer.writerow([])
    writer.writerow(["EXPORT_DATE", now.isoformat() + "Z", "", ""])
    writer.writerow(["EXPORT_BY", exported_by, "", ""])
    return buf.getvalue()
