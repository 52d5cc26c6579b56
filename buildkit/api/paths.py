"""
Path Endpoints
==============
POST /paths/normalize  — canonical comparison form of a path
POST /paths/subfolder  — is ``candidate`` equal to or below ``ancestor``
POST /paths/in-folder  — does ``file`` live in ``directory`` or below it
"""
from fastapi import APIRouter
from pydantic import BaseModel

from buildkit.filesystem.paths import is_in_folder, is_subfolder_of, normalize_file_name

router = APIRouter(prefix="/paths", tags=["Paths"])


class NormalizeRequest(BaseModel):
    path: str


class NormalizeResponse(BaseModel):
    path: str
    normalized: str


class SubfolderRequest(BaseModel):
    candidate: str
    ancestor: str


class InFolderRequest(BaseModel):
    directory: str
    file: str


class RelationResponse(BaseModel):
    result: bool


@router.post("/normalize", response_model=NormalizeResponse)
def normalize(request: NormalizeRequest):
    return NormalizeResponse(path=request.path, normalized=normalize_file_name(request.path))


@router.post("/subfolder", response_model=RelationResponse)
def subfolder(request: SubfolderRequest):
    return RelationResponse(result=is_subfolder_of(request.candidate, request.ancestor))


@router.post("/in-folder", response_model=RelationResponse)
def in_folder(request: InFolderRequest):
    return RelationResponse(result=is_in_folder(request.directory, request.file))
