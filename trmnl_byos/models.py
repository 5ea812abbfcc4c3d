"""
TRMNL BYOS - pydantic models for screen state and the device-facing API
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# Screen state
class ScreenRecord(BaseModel):
    """Display state of one device, keyed by its lower-cased screen id."""

    model_config = ConfigDict(frozen=True)

    id: str
    display_name: str
    description: Optional[str] = None
    last_updated: Optional[datetime] = Field(
        default=None, description="Time of the last upload; None if never"
    )
    image_path: Optional[str] = Field(
        default=None, description="Relative path of the stored image"
    )


# Firmware API Models
class SetupResponse(BaseModel):
    api_key: str
    friendly_id: str
    image_url: str
    message: str


class DisplayResponse(BaseModel):
    filename: str
    firmware_url: str
    firmware_version: str
    image_url: str
    image_url_timeout: int
    refresh_rate: int
    reset_firmware: bool
    special_function: str
    update_firmware: bool


class LogEntry(BaseModel):
    """
    One telemetry entry as sent by the device firmware.

    Every field is optional; firmware builds differ in what they report.
    """

    id: Optional[int] = None
    message: Optional[str] = None
    wifi_status: Optional[str] = None
    created_at: Optional[int] = Field(default=None, description="Unix seconds")
    sleep_duration: Optional[int] = None
    refresh_rate: Optional[int] = None
    free_heap_size: Optional[int] = None
    max_alloc_size: Optional[int] = None
    source_path: Optional[str] = None
    wake_reason: Optional[str] = None
    firmware_version: Optional[str] = None
    retry: Optional[int] = None
    battery_voltage: Optional[float] = None
    source_line: Optional[int] = None
    special_function: Optional[str] = None
    wifi_signal: Optional[int] = None


class LogRequest(BaseModel):
    logs: List[LogEntry] = Field(default_factory=list)


# Screen management Models
class ImageUploadResponse(BaseModel):
    id: str
    path: str


class HealthResponse(BaseModel):
    status: str
    service: str
