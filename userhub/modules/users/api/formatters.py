"""
Formatters

Content negotiation for the user API: request bodies are decoded from JSON
or XML according to Content-Type, responses are encoded according to Accept.
"""
import json
import xml.etree.ElementTree as ET
from http import HTTPStatus
from typing import Any, Dict, Optional
from fastapi import Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from userhub.modules.users.domain.exceptions import BadRequestError, FieldErrors

JSON_MEDIA_TYPE = "application/json"
XML_MEDIA_TYPE = "application/xml"
PROBLEM_MEDIA_TYPE = "application/problem+json"
XML_MEDIA_TYPES = ("application/xml", "text/xml")


def _media_ranges(accept: str):
    """Yield (media_type, q) pairs from an Accept header."""
    for part in accept.split(","):
        pieces = [p.strip() for p in part.split(";")]
        if not pieces[0]:
            continue
        q = 1.0
        for param in pieces[1:]:
            if param.startswith("q="):
                try:
                    q = float(param[2:])
                except ValueError:
                    q = 0.0
        yield pieces[0].lower(), q


def wants_xml(request: Request) -> bool:
    """True when the client ranks an XML media type above JSON."""
    accept = request.headers.get("accept", "")
    xml_q = 0.0
    json_q = 0.0
    for media_type, q in _media_ranges(accept):
        if media_type in XML_MEDIA_TYPES:
            xml_q = max(xml_q, q)
        elif media_type in (JSON_MEDIA_TYPE, "application/*", "*/*"):
            json_q = max(json_q, q)
    return xml_q > 0 and xml_q > json_q


# =============================================================================
# Request decoding
# =============================================================================

def _xml_to_dict(element: ET.Element) -> Dict[str, Any]:
    return {child.tag: (child.text or "") for child in element}


async def read_body(request: Request) -> Optional[Any]:
    """
    Decode the request body.

    Returns None for an empty body (or a JSON `null`). Raises BadRequestError
    when the body cannot be decoded.
    """
    raw = await request.body()
    if not raw.strip():
        return None

    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    if content_type in XML_MEDIA_TYPES:
        try:
            return _xml_to_dict(ET.fromstring(raw))
        except ET.ParseError as e:
            raise BadRequestError(f"Request body is not well-formed XML: {e}")

    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise BadRequestError(f"Request body is not valid JSON: {e}")


# =============================================================================
# Response encoding
# =============================================================================

def _plain(content: Any) -> Any:
    if isinstance(content, BaseModel):
        return content.model_dump(mode="json", by_alias=True)
    if isinstance(content, list):
        return [_plain(item) for item in content]
    return jsonable_encoder(content)


def _fill(element: ET.Element, value: Any) -> None:
    if isinstance(value, dict):
        for key, item in value.items():
            _fill(ET.SubElement(element, key), item)
    elif value is None:
        element.set("nil", "true")
    else:
        element.text = str(value)


def to_xml(content: Any, root: str) -> bytes:
    """Serialize `content` under `root`. Items of a list under `ArrayOfX` become `X` elements."""
    data = _plain(content)
    element = ET.Element(root)
    if isinstance(data, list):
        item_tag = root[len("ArrayOf"):] if root.startswith("ArrayOf") else "Item"
        for item in data:
            _fill(ET.SubElement(element, item_tag), item)
    elif data is not None:
        _fill(element, data)
    return ET.tostring(element, encoding="utf-8", xml_declaration=True)


def render(
    request: Request,
    content: Any = None,
    status_code: int = 200,
    headers: Optional[Dict[str, str]] = None,
    xml_root: str = "Result",
) -> Response:
    """Encode `content` in the negotiated format."""
    if content is None:
        return Response(status_code=status_code, headers=headers)
    if wants_xml(request):
        return Response(
            content=to_xml(content, xml_root),
            status_code=status_code,
            headers=headers,
            media_type=XML_MEDIA_TYPE,
        )
    return JSONResponse(content=_plain(content), status_code=status_code, headers=headers)


def render_field_errors(request: Request, errors: FieldErrors, status_code: int = 422) -> Response:
    """Field-error map `{field: [messages]}` as the response body."""
    if wants_xml(request):
        element = ET.Element("Errors")
        for field, messages in errors.items():
            for message in messages:
                error = ET.SubElement(element, "Error", {"field": field})
                error.text = message
        return Response(
            content=ET.tostring(element, encoding="utf-8", xml_declaration=True),
            status_code=status_code,
            media_type=XML_MEDIA_TYPE,
        )
    return JSONResponse(content=errors, status_code=status_code)


def render_problem(request: Request, status_code: int, detail: str) -> Response:
    """RFC 7807 style problem body."""
    payload = {
        "type": "about:blank",
        "title": HTTPStatus(status_code).phrase,
        "status": status_code,
        "detail": detail,
        "instance": str(request.url.path),
    }
    if wants_xml(request):
        return render(request, payload, status_code=status_code, xml_root="Problem")
    return JSONResponse(content=payload, status_code=status_code, media_type=PROBLEM_MEDIA_TYPE)
