"""Root conftest: shared test configuration and multipart body builder."""

import os

import pytest

# Keep test runs quiet and independent of a developer's .env overrides
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("LOG_FORMAT", "text")

BOUNDARY = "intakeTestBoundary"


def build_multipart(parts, boundary: str = BOUNDARY) -> bytes:
    """Encode (field_name, filename, data) tuples as a multipart/form-data body.

    field_name=None omits the name parameter; filename=None omits filename.
    """
    out = b""
    for field_name, filename, data in parts:
        disposition = "form-data"
        if field_name is not None:
            disposition += f'; name="{field_name}"'
        if filename is not None:
            disposition += f'; filename="{filename}"'
        out += f"--{boundary}\r\n".encode()
        out += f"Content-Disposition: {disposition}\r\n".encode()
        if filename is not None:
            out += b"Content-Type: application/octet-stream\r\n"
        out += b"\r\n" + data + b"\r\n"
    out += f"--{boundary}--\r\n".encode()
    return out


@pytest.fixture
def multipart_body():
    return build_multipart


@pytest.fixture
def multipart_content_type():
    return f"multipart/form-data; boundary={BOUNDARY}"


@pytest.fixture
def boundary() -> bytes:
    return BOUNDARY.encode()
