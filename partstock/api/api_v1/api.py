"""API router aggregation"""
from fastapi import APIRouter

from partstock.api.api_v1.endpoints import (
    inventory, inbound, imports, alerts, edit_history, dashboard
)

api_router = APIRouter()

# Inventory
api_router.include_router(inventory.router, prefix="/inventory", tags=["Inventory"])
api_router.include_router(inbound.router, prefix="/inbound", tags=["Inbound registration"])
api_router.include_router(imports.router, prefix="/import", tags=["Bulk import"])

# Monitoring
api_router.include_router(alerts.router, prefix="/alerts", tags=["Alerts"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
api_router.include_router(edit_history.router, prefix="/edit-history", tags=["Edit history"])
