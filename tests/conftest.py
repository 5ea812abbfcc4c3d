"""
Shared fixtures
"""

import pytest
from fastapi.testclient import TestClient

from trmnl_byos.config import Settings
from trmnl_byos.image_store import ImageStore
from trmnl_byos.main import create_app
from trmnl_byos.store import ScreenRegistry

TEST_DEVICE_ID = "AA:BB:CC:DD:EE:FF"

# Minimal valid JPEG (1x1 pixel)
JPEG_1X1 = bytes.fromhex(
    "ffd8ffe000104a46494600010100000100010000ffdb004300080606070605080707"
    "070909080a0c140d0c0b0b0c1912130f141d1a1f1e1d1a1c1c20242e2720222c231c"
    "1c2837292c30313434341f27393d38323c2e333432ffc0000b080001000101011100"
    "ffc4001f0000010501010101010100000000000000000102030405060708090a0bff"
    "c400b5100002010303020403050504040000017d0102030004110512213141061351"
    "6107227114328191a1082342b1c11552d1f02433627282090a161718191a25262728"
    "292a3435363738393a434445464748494a535455565758595a636465666768696a73"
    "7475767778797a838485868788898a92939495969798999aa2a3a4a5a6a7a8a9aab2"
    "b3b4b5b6b7b8b9bac2c3c4c5c6c7c8c9cad2d3d4d5d6d7d8d9dae1e2e3e4e5e6e7e8"
    "e9eaf1f2f3f4f5f6f7f8f9faffda0008010100003f00fbd0ffd9"
)

# PNG signature and IHDR chunk; the store never inspects the bytes
PNG_HEADER = bytes.fromhex(
    "89504e470d0a1a0a0000000d494844520000000100000001080600000057"
)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(data_root=str(tmp_path / "data"), log_level="WARNING")


@pytest.fixture
def client(settings):
    """A client for a fresh app with its own registry and data root."""
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def registry() -> ScreenRegistry:
    return ScreenRegistry()


@pytest.fixture
def image_store(tmp_path, registry) -> ImageStore:
    store = ImageStore(str(tmp_path / "images"), registry)
    store.ensure_data_root()
    return store
