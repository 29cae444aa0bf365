from __future__ import annotations

from fastapi import APIRouter

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    """Liveness probe.

    Does not touch the rate-limit directory, the CSV record or the mail
    server; it only confirms the process is serving requests.
    """

    return {"status": "ok"}
