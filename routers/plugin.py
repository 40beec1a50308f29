"""routers/plugin.py - Hosting routes: one POST per connector operation, body {token, payload, projection}."""

from typing import Optional

from fastapi import APIRouter, Depends

from schemas.payloads import OperationRequest
from services.plugin import Plugin

router = APIRouter()

_PLUGIN: Optional[Plugin] = None


def get_plugin() -> Plugin:
    """Shared instance built from env config on first use."""
    global _PLUGIN
    if _PLUGIN is None:
        _PLUGIN = Plugin()
    return _PLUGIN


def _args(body: OperationRequest) -> dict:
    return {"token": body.token, "payload": body.payload, "projection": body.projection}


@router.get("/token-template")
def token_template(plugin: Plugin = Depends(get_plugin)):
    # compiled patterns are not JSON; send the source
    return {
        name: {**field, "regExp": field["regExp"].pattern}
        for name, field in plugin.token_template().items()
    }


@router.post("/validate-token")
def validate_token(body: OperationRequest, plugin: Plugin = Depends(get_plugin)):
    return {"valid": plugin.validate_token(token=body.token)}


@router.post("/products/search")
def search_products(body: OperationRequest, plugin: Plugin = Depends(get_plugin)):
    return plugin.search_products(**_args(body))


@router.post("/availability/search")
def search_availability(body: OperationRequest, plugin: Plugin = Depends(get_plugin)):
    return plugin.search_availability(**_args(body))


@router.post("/availability/calendar")
def availability_calendar(body: OperationRequest, plugin: Plugin = Depends(get_plugin)):
    return plugin.availability_calendar(**_args(body))


@router.post("/bookings")
def create_booking(body: OperationRequest, plugin: Plugin = Depends(get_plugin)):
    return plugin.create_booking(**_args(body))


@router.post("/bookings/cancel")
def cancel_booking(body: OperationRequest, plugin: Plugin = Depends(get_plugin)):
    return plugin.cancel_booking(**_args(body))


@router.post("/bookings/search")
def search_booking(body: OperationRequest, plugin: Plugin = Depends(get_plugin)):
    return plugin.search_booking(**_args(body))


@router.post("/quotes/search")
def search_quote(body: OperationRequest, plugin: Plugin = Depends(get_plugin)):
    return plugin.search_quote(**_args(body))
