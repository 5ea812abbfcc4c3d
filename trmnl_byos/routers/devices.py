"""
Device routes - firmware API polled by TRMNL terminals
"""

from fastapi import APIRouter, Depends, Request, Response

from trmnl_byos.dependencies import get_device_service, get_telemetry_sink
from trmnl_byos.device_service import DeviceService
from trmnl_byos.models import DisplayResponse, SetupResponse
from trmnl_byos.telemetry import TelemetrySink, parse_log_batch

router = APIRouter(prefix="/api", tags=["Devices"])


@router.get("/setup", response_model=SetupResponse)
async def setup_device(
    request: Request,
    service: DeviceService = Depends(get_device_service),
) -> SetupResponse:
    """
    First contact of a device.

    Headers: ID (device id, usually the MAC address), optional MODEL,
    FIRMWARE and REFRESH_RATE.
    """
    return service.setup(request.headers.get("ID"), request.headers)


@router.get("/display", response_model=DisplayResponse)
async def get_display(
    request: Request,
    service: DeviceService = Depends(get_device_service),
) -> DisplayResponse:
    """
    Display poll.

    Returns absolute URLs for the screen image and firmware, built from the
    scheme, host and port the device used to reach this server.
    """
    return service.display(
        request.headers.get("ID"),
        request.headers.get("REFRESH_RATE"),
        str(request.base_url),
    )


@router.post("/log", status_code=204)
async def submit_logs(
    request: Request,
    sink: TelemetrySink = Depends(get_telemetry_sink),
) -> Response:
    """
    Receive a batch of device log entries.

    Entries are written to the application log; the response is always
    204 No Content. Entries that do not match LogRequest are dropped and
    counted instead of failing the batch.
    """
    entries, dropped = parse_log_batch(await request.body())
    sink.record(request.headers.get("ID"), entries, dropped)
    return Response(status_code=204)
