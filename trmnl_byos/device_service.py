"""
Device Service - builds the responses for the firmware setup and display polls.
"""

import posixpath
from typing import Mapping, Optional

from trmnl_byos.models import DisplayResponse, SetupResponse
from trmnl_byos.store import ScreenRegistry, normalize_screen_id

UNKNOWN_DEVICE_ID = "unknown"
DEFAULT_REFRESH_RATE = 100
WELCOME_MESSAGE = "Welcome to TRMNL BYOS"

# Placeholders for device management that is not implemented
FIRMWARE_VERSION = "1.0.0"
IMAGE_URL_TIMEOUT = 0
SPECIAL_FUNCTION = "none"


def parse_refresh_rate(
    value: Optional[str], default: int = DEFAULT_REFRESH_RATE
) -> int:
    """
    Parse a REFRESH_RATE header value.

    Returns `default` when the header is missing or not an integer. The
    parsed value is not range-checked.
    """
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


class DeviceService:
    """Answers setup and display requests from the screen registry."""

    def __init__(
        self,
        registry: ScreenRegistry,
        firmware_path: str = "/firmware/latest.bin",
        default_refresh_rate: int = DEFAULT_REFRESH_RATE,
    ):
        self.registry = registry
        self.firmware_path = firmware_path
        self.default_refresh_rate = default_refresh_rate

    def setup(
        self, device_id: Optional[str], headers: Mapping[str, str]
    ) -> SetupResponse:
        """
        Handle a device's first contact.

        Registers the screen (recording model and firmware as its
        description) and returns the device id as its API key.

        The image_url always names the .jpg file, even if a PNG is stored;
        the display poll reports the real path.
        """
        device_id = device_id or UNKNOWN_DEVICE_ID
        screen_id = normalize_screen_id(device_id)

        model = headers.get("MODEL") or "byod"
        firmware = headers.get("FIRMWARE") or "unknown"
        self.registry.get_or_create(
            screen_id, description=f"Model {model}, Firmware {firmware}"
        )

        return SetupResponse(
            api_key=device_id,
            friendly_id=screen_id.upper(),
            image_url=f"/screens/{screen_id}.jpg",
            message=WELCOME_MESSAGE,
        )

    def display(
        self,
        device_id: Optional[str],
        refresh_rate_header: Optional[str],
        base_url: str,
    ) -> DisplayResponse:
        """
        Handle a display poll.

        Args:
            device_id: Value of the ID header.
            refresh_rate_header: Value of the REFRESH_RATE header.
            base_url: Scheme, host and port of the incoming request; image
                and firmware URLs are made absolute against it.
        """
        screen_id = normalize_screen_id(device_id or UNKNOWN_DEVICE_ID)
        screen = self.registry.get_or_create(screen_id)

        image_path = screen.image_path or f"/screens/{screen_id}.jpg"
        origin = base_url.rstrip("/")

        return DisplayResponse(
            filename=posixpath.basename(image_path),
            firmware_url=f"{origin}{self.firmware_path}",
            firmware_version=FIRMWARE_VERSION,
            image_url=f"{origin}{image_path}",
            image_url_timeout=IMAGE_URL_TIMEOUT,
            refresh_rate=parse_refresh_rate(
                refresh_rate_header, self.default_refresh_rate
            ),
            reset_firmware=False,
            special_function=SPECIAL_FUNCTION,
            update_firmware=False,
        )
