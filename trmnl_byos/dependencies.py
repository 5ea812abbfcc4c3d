"""
Request dependencies for the shared service objects built in `create_app`.
"""

from fastapi import Request

from trmnl_byos.device_service import DeviceService
from trmnl_byos.image_store import ImageStore
from trmnl_byos.telemetry import TelemetrySink


def get_image_store(request: Request) -> ImageStore:
    return request.app.state.image_store


def get_device_service(request: Request) -> DeviceService:
    return request.app.state.device_service


def get_telemetry_sink(request: Request) -> TelemetrySink:
    return request.app.state.telemetry
