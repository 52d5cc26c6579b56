"""
XML Endpoints
=============
POST /xml/read      — XPath read, returns every value
POST /xml/read-int  — XPath read of the first value as an integer
POST /xml/poke      — rewrite one node in a file (disabled by default)

Safety:
    - /xml/poke requires ENABLE_XML_WRITE_ENDPOINT=true, otherwise 404
    - Strict read failures map to 422, missing nodes / files to 404
"""
import logging
from typing import Dict, List

from fastapi import APIRouter, HTTPException
from lxml import etree
from pydantic import BaseModel, field_validator

from buildkit.core.config import ENABLE_XML_WRITE_ENDPOINT
from buildkit.xmlkit.errors import NodeNotFound, UnsupportedResultType, XmlPatchError, XmlReadError
from buildkit.xmlkit.patch import xml_poke_ns
from buildkit.xmlkit.query import xml_read, xml_read_int

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/xml", tags=["XML"])

# ---------------------------------------------------------------------------
# Environment gate
# ---------------------------------------------------------------------------
_WRITE_ENABLED = ENABLE_XML_WRITE_ENDPOINT


# ---------------------------------------------------------------------------
# Request / Response schemas
# ---------------------------------------------------------------------------
class XmlReadRequest(BaseModel):
    path: str
    xpath: str
    prefix: str = ""
    namespace: str = ""
    fail_on_error: bool = True

    @field_validator("xpath")
    @classmethod
    def validate_xpath(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("xpath must not be empty")
        return v.strip()


class XmlReadResponse(BaseModel):
    xpath: str
    values: List[str]


class XmlReadIntResponse(BaseModel):
    xpath: str
    success: bool
    value: int


class XmlPokeRequest(BaseModel):
    path: str
    xpath: str
    value: str
    namespaces: Dict[str, str] = {}

    @field_validator("xpath")
    @classmethod
    def validate_xpath(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("xpath must not be empty")
        return v.strip()


class XmlPokeResponse(BaseModel):
    path: str
    xpath: str
    status: str


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------
@router.post("/read", response_model=XmlReadResponse)
def read_xml(request: XmlReadRequest):
    try:
        values = xml_read(
            request.fail_on_error, request.path, request.namespace, request.prefix, request.xpath
        )
        return XmlReadResponse(xpath=request.xpath, values=list(values))
    except (XmlReadError, UnsupportedResultType) as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/read-int", response_model=XmlReadIntResponse)
def read_xml_int(request: XmlReadRequest):
    try:
        success, value = xml_read_int(
            request.fail_on_error, request.path, request.namespace, request.prefix, request.xpath
        )
    except (XmlReadError, UnsupportedResultType) as e:
        raise HTTPException(status_code=422, detail=str(e))
    return XmlReadIntResponse(xpath=request.xpath, success=success, value=value)


@router.post("/poke", response_model=XmlPokeResponse)
def poke_xml(request: XmlPokeRequest):
    """
    Rewrite the single node selected by ``xpath`` and save the file in place.

    Disabled unless ENABLE_XML_WRITE_ENDPOINT=true.
    """
    if not _WRITE_ENABLED:
        raise HTTPException(status_code=404, detail="Not found")

    try:
        xml_poke_ns(request.path, request.namespaces or None, request.xpath, request.value)
    except (NodeNotFound, FileNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (XmlPatchError, etree.LxmlError) as e:
        raise HTTPException(status_code=422, detail=str(e))

    logger.info("Poke via API: %s in %s", request.xpath, request.path)
    return XmlPokeResponse(path=request.path, xpath=request.xpath, status="updated")
