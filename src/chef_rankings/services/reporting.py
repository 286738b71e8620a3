"""Report generation services for chef rankings."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any, Literal

from tabulate import tabulate

from chef_rankings.core.errors import ValidationError
from chef_rankings.scoring import AccoladeRecord, ScoredChef
from chef_rankings.services.storage import ExportStore, RankingStore

ExportFormat = Literal["csv", "json", "md"]
EXPORT_FILENAME = "chef-rankings"


def describe_accolade(accolade: AccoladeRecord | None) -> str:
    """Format an accolade as ``TYPE (detail)``."""
    if accolade is None:
        return ""
    if accolade.detail:
        return f"{accolade.type} ({accolade.detail})"
    return accolade.type


def summarize_recalculation(ranked: Sequence[ScoredChef], top: int = 3) -> str:
    """One-line summary of a recalculation batch."""
    leaders = ", ".join(f"{r.rank}. {r.name} ({r.total_score:.1f})" for r in ranked[:top])
    return f"Scored {len(ranked)} chefs. Top {min(top, len(ranked))}: {leaders}"


async def build_export_rows(store: RankingStore) -> list[dict[str, Any]]:
    """Collect one export row per active chef in rank order."""
    rows = []
    for chef in await store.chefs.list_active_chefs_by_rank():
        records = await store.get_chef_with_records(chef.id)
        rows.append(
            {
                "rank": chef.rank,
                "name": chef.name,
                "restaurant": chef.current_restaurant or "",
                "city": chef.city or "",
                "country": chef.country or "",
                "score": chef.total_score,
                "top_accolade": describe_accolade(
                    records.accolades[0] if records.accolades else None
                ),
            }
        )
    return rows


def render_leaderboard(rows: Sequence[dict[str, Any]], title: str = "Chef Rankings") -> str:
    """Render export rows as a Markdown leaderboard."""
    table = [
        (
            row["rank"] if row["rank"] is not None else "-",
            row["name"],
            row["restaurant"],
            row["country"],
            f"{row['score']:.1f}",
            row["top_accolade"],
        )
        for row in rows
    ]
    headers = ("Rank", "Chef", "Restaurant", "Country", "Score", "Top Accolade")
    return "\n".join([f"# {title}", "", tabulate(table, headers=headers, tablefmt="github")])


async def export_rankings(
    store: RankingStore, exports: ExportStore, fmt: ExportFormat = "csv"
) -> Path:
    """Write the current ranking in the requested format.

    Returns:
        Path of the written file.
    """
    rows = await build_export_rows(store)
    if fmt == "csv":
        return await exports.save_csv(f"{EXPORT_FILENAME}.csv", rows)
    if fmt == "json":
        return await exports.save_json(f"{EXPORT_FILENAME}.json", rows)
    if fmt == "md":
        return await exports.save_text(f"{EXPORT_FILENAME}.md", render_leaderboard(rows))
    raise ValidationError("format", "Expected one of: csv, json, md")
