from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from rbo.api.dependencies import BackOfficeServices, get_services

router = APIRouter()


@router.get("/health/live")
def live() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/health/ready")
def ready(
    response: Response,
    services: BackOfficeServices = Depends(get_services),
) -> dict[str, object]:
    checks = {
        services.catalog_store.namespace: services.catalog_store.ping(),
        services.order_store.namespace: services.order_store.ping(),
    }
    if all(checks.values()):
        return {"status": "ok"}

    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return {"status": "unavailable", "checks": checks}
