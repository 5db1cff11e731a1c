"""
ROM and save file endpoints. Every route is behind access_required(), which
supplies the caller's storage partition as `store`; object keys are built
from that value only.
"""
from __future__ import annotations

import logging
import os

from flask import Blueprint, request, jsonify, abort, current_app, send_file

from models import blobs
from models.blob_storage import ROM_PREFIX, SAVE_PREFIX, object_key
from models.schemas.files import UploadResultSchema
from utils.decorators import access_required

logger = logging.getLogger(__name__)

bp = Blueprint("files", __name__)

upload_result_schema = UploadResultSchema()

ROM_MIMETYPE = "application/x-gba-rom"
SAVE_MIMETYPE = "application/octet-stream"
FORBIDDEN_NAME_CHARS = ("/", "\\", "\x00")


def clean_filename(raw: str | None, missing_message: str) -> str:
    """
    Names are stored exactly as sent. Only names that could address anything
    other than a single object in the caller's partition are refused.
    Leading dots are reserved for in-progress uploads.
    """
    if not raw:
        abort(400, description=missing_message)
    if any(ch in raw for ch in FORBIDDEN_NAME_CHARS) or raw.startswith("."):
        abort(400, description="Invalid file name")
    return raw


def list_objects(kind: str, store: str):
    return jsonify(blobs.list(object_key(kind, store)))


def download_object(kind: str, store: str, param: str, mimetype: str, label: str):
    filename = clean_filename(request.args.get(param), f"Missing {param} parameter")
    path = blobs.get(object_key(kind, store, filename))
    if path is None:
        abort(404, description=f"{label} not found")
    return send_file(path, mimetype=mimetype, as_attachment=True, download_name=filename)


def upload_object(kind: str, store: str, field: str):
    upload = request.files.get(field)
    if upload is None:
        abort(400, description=f"Missing {field} file")
    filename = clean_filename(upload.filename, f"Missing {field} file")
    if kind == ROM_PREFIX:
        allowed = current_app.config["ROM_EXTENSIONS"]
        ext = os.path.splitext(filename)[1].lower()
        if ext not in allowed:
            abort(400, description="Invalid file format. Expected " + "/".join(allowed))
    size = blobs.put(object_key(kind, store, filename), upload.stream)
    logger.info("uploaded %s/%s (%d bytes)", kind, filename, size)
    return jsonify(upload_result_schema.dump({"success": True, "filename": filename, "size": size}))


@bp.get("/rom/list")
@access_required()
def list_roms(store: str):
    """
    List the caller's ROMs
    ---
    tags:
      - ROM
    security:
      - Bearer: []
    responses:
      200:
        description: File names
        schema:
          type: array
          items: { type: string }
      401:
        description: Unauthorized
    """
    return list_objects(ROM_PREFIX, store)


@bp.get("/save/list")
@access_required()
def list_saves(store: str):
    """
    List the caller's save files
    ---
    tags:
      - Save
    security:
      - Bearer: []
    responses:
      200:
        description: File names
        schema:
          type: array
          items: { type: string }
      401:
        description: Unauthorized
    """
    return list_objects(SAVE_PREFIX, store)


@bp.get("/rom/download")
@access_required()
def download_rom(store: str):
    """
    Download a ROM
    ---
    tags:
      - ROM
    security:
      - Bearer: []
    parameters:
      - in: query
        name: rom
        type: string
        required: true
    responses:
      200: { description: ROM contents as an attachment }
      400: { description: Missing rom parameter }
      401: { description: Unauthorized }
      404: { description: ROM not found }
    """
    return download_object(ROM_PREFIX, store, "rom", ROM_MIMETYPE, "ROM")


@bp.get("/save/download")
@access_required()
def download_save(store: str):
    """
    Download a save file
    ---
    tags:
      - Save
    security:
      - Bearer: []
    parameters:
      - in: query
        name: save
        type: string
        required: true
    responses:
      200: { description: Save contents as an attachment }
      400: { description: Missing save parameter }
      401: { description: Unauthorized }
      404: { description: Save not found }
    """
    return download_object(SAVE_PREFIX, store, "save", SAVE_MIMETYPE, "Save")


@bp.post("/rom/upload")
@access_required()
def upload_rom(store: str):
    """
    Upload a ROM (.gba/.gbc/.gb/.zip/.7z)
    ---
    tags:
      - ROM
    security:
      - Bearer: []
    consumes:
      - multipart/form-data
    parameters:
      - in: formData
        name: rom
        type: file
        required: true
    responses:
      200: { description: Stored }
      400: { description: Missing file or invalid format }
      401: { description: Unauthorized }
    """
    return upload_object(ROM_PREFIX, store, "rom")


@bp.post("/save/upload")
@access_required()
def upload_save(store: str):
    """
    Upload a save file
    ---
    tags:
      - Save
    security:
      - Bearer: []
    consumes:
      - multipart/form-data
    parameters:
      - in: formData
        name: save
        type: file
        required: true
    responses:
      200: { description: Stored }
      400: { description: Missing file }
      401: { description: Unauthorized }
    """
    return upload_object(SAVE_PREFIX, store, "save")
