"""Manual chef data import."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pydantic
import structlog
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from chef_rankings.core.errors import ValidationError
from chef_rankings.core.slug import SlugGenerator
from chef_rankings.models import Accolade, CareerEntry, Chef, PeerStanding, PublicSignal
from chef_rankings.scoring import AccoladeType
from chef_rankings.services.storage import RankingStore

logger = structlog.get_logger()


class _ImportModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AccoladeData(_ImportModel):
    type: AccoladeType
    detail: str | None = None
    year: int | None = None
    source_url: str | None = None


class CareerData(_ImportModel):
    role: str
    restaurant: str
    city: str | None = None
    start_year: int | None = None
    end_year: int | None = None
    is_current: bool = False


class PublicSignalData(_ImportModel):
    platform: str
    metric: str | None = None
    value: float | None = None


class PeerStandingData(_ImportModel):
    type: str
    detail: str | None = None
    related_chef: str | None = None


class ManualChefData(_ImportModel):
    """One chef as written in an import file (camelCase keys)."""

    name: str = Field(..., min_length=1)
    city: str | None = None
    country: str | None = None
    current_restaurant: str | None = None
    cuisine_specialties: list[str] = Field(default_factory=list)
    years_experience: int | None = Field(default=None, ge=0)
    bio: str | None = None
    accolades: list[AccoladeData] = Field(default_factory=list)
    career: list[CareerData] = Field(default_factory=list)
    public_signals: list[PublicSignalData] = Field(default_factory=list)
    peer_standings: list[PeerStandingData] = Field(default_factory=list)


@dataclass
class ImportResult:
    imported: int = 0
    skipped: int = 0
    total: int = 0
    skipped_names: list[str] = field(default_factory=list)


def parse_import_payload(payload: Any) -> list[ManualChefData]:
    """Validate an import payload: a list of chefs or ``{"chefs": [...]}``.

    Raises:
        ValidationError: If the payload is not a list or a chef is malformed.
    """
    if isinstance(payload, dict):
        payload = payload.get("chefs")
    if not isinstance(payload, list):
        raise ValidationError("chefs", "Expected an array of chefs")
    try:
        return [ManualChefData.model_validate(item) for item in payload]
    except pydantic.ValidationError as e:
        raise ValidationError("chefs", str(e)) from e


def load_import_file(path: str | Path) -> list[ManualChefData]:
    """Read and validate a JSON import file."""
    file_path = Path(path)
    if not file_path.exists():
        msg = f"Import file not found: {file_path}"
        raise FileNotFoundError(msg)
    with file_path.open(encoding="utf-8") as f:
        try:
            payload = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError("chefs", f"Invalid JSON: {e}") from e
    return parse_import_payload(payload)


class ChefImportService:
    """Creates chefs and their records from manual data.

    Chefs whose slug already exists are skipped. Scores are not touched;
    callers run a recalculation afterwards.
    """

    def __init__(self, store: RankingStore, slugs: SlugGenerator | None = None) -> None:
        self.store = store
        self.slugs = slugs or SlugGenerator()

    async def import_chefs(self, chefs: list[ManualChefData]) -> ImportResult:
        result = ImportResult(total=len(chefs))
        for data in chefs:
            slug = self.slugs.slugify(data.name)
            if not slug or await self.store.chefs.find_chef_by_slug(slug) is not None:
                logger.info("import_skip_existing", name=data.name, slug=slug)
                result.skipped += 1
                result.skipped_names.append(data.name)
                continue

            await self._create(data, slug)
            result.imported += 1

        logger.info("import_complete", imported=result.imported, skipped=result.skipped)
        return result

    async def _create(self, data: ManualChefData, slug: str) -> Chef:
        chef = await self.store.chefs.create_chef(
            Chef(
                name=data.name,
                slug=slug,
                city=data.city,
                country=data.country,
                current_restaurant=data.current_restaurant,
                cuisine_specialties=(
                    json.dumps(data.cuisine_specialties) if data.cuisine_specialties else None
                ),
                years_experience=data.years_experience,
                bio=data.bio,
            )
        )
        for a in data.accolades:
            await self.store.chefs.add_accolade(
                Accolade(
                    chef_id=chef.id,
                    type=a.type.value,
                    detail=a.detail,
                    year=a.year,
                    source_url=a.source_url,
                )
            )
        for c in data.career:
            await self.store.chefs.add_career_entry(
                CareerEntry(
                    chef_id=chef.id,
                    role=c.role,
                    restaurant=c.restaurant,
                    city=c.city,
                    start_year=c.start_year,
                    end_year=c.end_year,
                    is_current=c.is_current,
                )
            )
        for s in data.public_signals:
            await self.store.chefs.upsert_public_signal(
                PublicSignal(chef_id=chef.id, platform=s.platform, metric=s.metric, value=s.value)
            )
        for p in data.peer_standings:
            await self.store.chefs.add_peer_standing(
                PeerStanding(
                    chef_id=chef.id, type=p.type, detail=p.detail, related_chef=p.related_chef
                )
            )
        return chef
