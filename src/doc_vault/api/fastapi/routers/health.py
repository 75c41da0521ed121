from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter

from doc_vault.documents.schemas import HealthEnvelope, to_utc_iso

router = APIRouter()


@router.get("/health", response_model=HealthEnvelope)
async def health() -> HealthEnvelope:
    return HealthEnvelope(timestamp=to_utc_iso(datetime.now(timezone.utc)))
