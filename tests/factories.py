"""
Builders for backend payloads shared by the test modules.
"""

from typing import Any, Dict, Optional

import httpx

from core.domain.models import ProductOwner, SdkInfo

FINGER_URL = "http://finger-sdk:9099/biosdk-service"
FACE_URL = "http://face-sdk:9099/biosdk-service"
DEFAULT_URL = "http://default-sdk:9099/biosdk-service"


def envelope(
    response: Any = None,
    errors: Optional[list] = None,
) -> Dict[str, Any]:
    """Build a backend response envelope."""
    body: Dict[str, Any] = {
        "version": "1.0",
        "responsetime": "2024-01-01T00:00:00.000Z",
        "response": response,
    }
    if errors is not None:
        body["errors"] = errors
    return body


def status_envelope(
    inner: Any,
    status_code: Optional[int] = 200,
    status_message: Optional[str] = "OK",
) -> Dict[str, Any]:
    """Envelope whose `response` carries statusCode/statusMessage/response."""
    response: Dict[str, Any] = {"response": inner}
    if status_code is not None:
        response["statusCode"] = status_code
    if status_message is not None:
        response["statusMessage"] = status_message
    return envelope(response)


def sdk_info_json(
    api_version: str = "0.9",
    sdk_version: str = "1.0",
    organization: str = "MOSIP",
    modalities: Optional[list] = None,
    other_info: Optional[dict] = None,
    methods: Optional[dict] = None,
) -> Dict[str, Any]:
    return {
        "apiVersion": api_version,
        "sdkVersion": sdk_version,
        "productOwner": {"organization": organization, "type": "vendor"},
        "otherInfo": other_info or {},
        "supportedMethods": methods or {},
        "supportedModalities": modalities or [],
    }


def make_sdk_info(
    api_version: str = "0.9",
    organization: str = "MOSIP",
    modalities: Optional[list] = None,
    other_info: Optional[dict] = None,
    methods: Optional[dict] = None,
) -> SdkInfo:
    return SdkInfo(
        api_version=api_version,
        sdk_version="1.0",
        product_owner=ProductOwner(organization=organization, type="vendor"),
        other_info=other_info or {},
        supported_methods=methods or {},
        supported_modalities=modalities or [],
    )


def ok(body: Dict[str, Any]) -> httpx.Response:
    return httpx.Response(200, json=body)


