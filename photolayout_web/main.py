"""
Flask app for the photo print layout tool

Server-side layout model behind a single-page UI. The browser forwards DOM
events (uploads, pointer/touch drags, crop widget results) to the JSON API
and redraws from /api/preview.
Access at http://<host>:8080
"""

from flask import Flask, render_template, request, jsonify, send_file, session
from werkzeug.exceptions import HTTPException
import io
import logging
import os

from photolayout import (
    LayoutConstants,
    LayoutError,
    LayoutSession,
    CapacityExceededError,
    ImageDecodeError,
    ImageNotFoundError,
)
from photolayout.crop import CROP_MODES, MODE_FREE, CropBox, crop_aspect_ratio
from photolayout.drag import POINTER_KINDS, ClientRect, PointerEvent
from photolayout.paper import CanvasConfig, paper_table
from photolayout.render import EXPORT_MIME_TYPES, export_filename, validate_format

from .services import ImageService, PreviewService, SessionRegistry
from .utils import safe_float, optional_float, parse_bool, require_str

LOG_LEVEL = os.getenv("PHOTOLAYOUT_LOG_LEVEL", "INFO").upper()
logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO))
logger = logging.getLogger(__name__)

HOST = os.getenv("PHOTOLAYOUT_HOST", "0.0.0.0")
PORT = int(os.getenv("PHOTOLAYOUT_PORT", "8080"))
MAX_UPLOAD_MB = int(os.getenv("PHOTOLAYOUT_MAX_UPLOAD_MB", "64"))
DEFAULT_PAPER = os.getenv("PHOTOLAYOUT_DEFAULT_PAPER", LayoutConstants.DEFAULT_PAPER)
DEFAULT_ORIENTATION = os.getenv("PHOTOLAYOUT_DEFAULT_ORIENTATION", LayoutConstants.DEFAULT_ORIENTATION)

app = Flask(__name__, template_folder="templates", static_folder="static")
app.secret_key = os.getenv("PHOTOLAYOUT_SECRET_KEY", "photolayout-session-key-change-in-production")
app.config["MAX_CONTENT_LENGTH"] = MAX_UPLOAD_MB * 1024 * 1024

registry = SessionRegistry(CanvasConfig(DEFAULT_PAPER, DEFAULT_ORIENTATION))

# Log startup configuration
logger.info(f"=== Photo Layout Startup Configuration ===")
logger.info(f"Default canvas: {DEFAULT_PAPER} {DEFAULT_ORIENTATION}")
logger.info(f"Resolution: {LayoutConstants.RESOLUTION_DPI} DPI")
logger.info(f"Max images per layout: {LayoutConstants.MAX_IMAGES}")
logger.info(f"Max upload size: {MAX_UPLOAD_MB} MB")
logger.info(f"==========================================")


@app.errorhandler(Exception)
def handle_unexpected_error(err):
    """Ensure API endpoints always return JSON, even for unhandled failures."""
    if request.path.startswith("/api/"):
        status = 500
        message = str(err) or "Internal Server Error"
        if isinstance(err, HTTPException):
            status = err.code or 500
            message = err.description or message
        if status >= 500:
            logger.exception("Unhandled API error on %s: %s", request.path, err)
        return jsonify({"success": False, "error": message}), status

    if isinstance(err, HTTPException):
        return err
    logger.exception("Unhandled web error on %s: %s", request.path, err)
    return "Internal Server Error", 500


def _json_payload() -> dict:
    """Return JSON object payload or raise ValueError."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValueError("Invalid JSON payload")
    return data


def _layout_session() -> LayoutSession:
    """LayoutSession for this browser, created on first use."""
    session_id, layout_session = registry.get_or_create(session.get("layout_id"))
    session["layout_id"] = session_id
    return layout_session


def _error_response(err: Exception):
    """Map library errors to JSON status codes."""
    if isinstance(err, ImageNotFoundError):
        status = 404
    elif isinstance(err, ImageDecodeError):
        status = 415
    elif isinstance(err, (CapacityExceededError, ValueError)):
        status = 400
    else:
        status = 500
    return jsonify({"success": False, "error": str(err)}), status


def _state(layout_session: LayoutSession, **extra) -> dict:
    payload = {"success": True}
    payload.update(PreviewService.layout_state(layout_session))
    payload.update(extra)
    return payload


def _parse_pointer(data: dict) -> PointerEvent:
    rect = data.get("rect")
    if not isinstance(rect, dict):
        raise ValueError("rect is required")
    touches = []
    for touch in data.get("touches") or []:
        if not isinstance(touch, dict):
            raise ValueError("touches must be a list of points")
        touches.append((
            safe_float(touch.get("client_x"), "touches.client_x"),
            safe_float(touch.get("client_y"), "touches.client_y"),
        ))
    return PointerEvent(
        kind=require_str(data.get("type"), "type", POINTER_KINDS),
        client_x=safe_float(data.get("client_x"), "client_x", default=0.0),
        client_y=safe_float(data.get("client_y"), "client_y", default=0.0),
        rect=ClientRect(
            left=safe_float(rect.get("left"), "rect.left"),
            top=safe_float(rect.get("top"), "rect.top"),
            width=safe_float(rect.get("width"), "rect.width"),
            height=safe_float(rect.get("height"), "rect.height"),
        ),
        touches=tuple(touches),
    )


def _parse_crop_box(data: dict) -> CropBox:
    box = data.get("box")
    if not isinstance(box, dict):
        raise ValueError("box is required")
    return CropBox(
        x=safe_float(box.get("x"), "box.x"),
        y=safe_float(box.get("y"), "box.y"),
        width=safe_float(box.get("width"), "box.width"),
        height=safe_float(box.get("height"), "box.height"),
    )


@app.route("/")
def index():
    return render_template("index.html", max_images=LayoutConstants.MAX_IMAGES)


@app.route("/api/paper-sizes", methods=["GET"])
def list_paper_sizes():
    """Paper table and orientations"""
    return jsonify({
        "success": True,
        "paper_sizes": paper_table(),
        "orientations": ["landscape", "portrait"],
    })


@app.route("/api/layout", methods=["GET"])
def get_layout():
    layout_session = _layout_session()
    with layout_session.lock:
        return jsonify(_state(layout_session))


@app.route("/api/layout/canvas", methods=["POST"])
def set_canvas():
    """Change paper size and/or orientation (placed images are not moved)"""
    try:
        data = _json_payload()
        layout_session = _layout_session()
        with layout_session.lock:
            layout_session.set_canvas(data.get("paper"), data.get("orientation"))
            return jsonify(_state(layout_session))
    except (LayoutError, ValueError) as e:
        logger.error(f"Set canvas failed: {e}")
        return _error_response(e)


@app.route("/api/images", methods=["POST"])
def upload_images():
    """Ingest a batch of files (multipart field 'images')"""
    files = request.files.getlist("images")
    if not files:
        return jsonify({"success": False, "error": "No images"}), 400

    try:
        uploads = ImageService.uploads_from_request(files)
        layout_session = _layout_session()
        with layout_session.lock:
            added = layout_session.add_files(uploads)
            logger.info(f"Ingested {len(added)} of {len(uploads)} uploads")
            return jsonify(_state(layout_session, added=[image.id for image in added]))
    except (LayoutError, ValueError) as e:
        logger.error(f"Upload failed: {e}")
        return _error_response(e)


@app.route("/api/images/<image_id>", methods=["DELETE"])
def delete_image(image_id):
    try:
        layout_session = _layout_session()
        with layout_session.lock:
            layout_session.remove_image(image_id)
            return jsonify(_state(layout_session))
    except LayoutError as e:
        logger.error(f"Delete failed: {e}")
        return _error_response(e)


@app.route("/api/images/<image_id>/source", methods=["GET"])
def image_source(image_id):
    """Current raster of one image as PNG (crop editor source)"""
    try:
        layout_session = _layout_session()
        with layout_session.lock:
            data = ImageService.image_to_png_bytes(layout_session.edit_source(image_id))
        return send_file(io.BytesIO(data), mimetype="image/png")
    except LayoutError as e:
        return _error_response(e)


@app.route("/api/images/<image_id>/edit", methods=["POST"])
def open_editor(image_id):
    """Open the crop editor on one image"""
    try:
        data = request.get_json(silent=True) or {}
        mode = require_str(data.get("mode", MODE_FREE), "mode", CROP_MODES)
        layout_session = _layout_session()
        with layout_session.lock:
            edit = layout_session.begin_edit(image_id, mode)
            image = layout_session.layout.get(image_id)
            return jsonify({
                "success": True,
                "edit": {"target_id": edit.target_id, "mode": edit.mode},
                "source_url": f"/api/images/{image_id}/source",
                "raster_width": image.raster.width,
                "raster_height": image.raster.height,
            })
    except (LayoutError, ValueError) as e:
        logger.error(f"Open editor failed: {e}")
        return _error_response(e)


@app.route("/api/edit/aspect", methods=["POST"])
def edit_aspect():
    """Aspect ratio lock for the crop widget (null = free)"""
    try:
        data = _json_payload()
        mode = require_str(data.get("mode", MODE_FREE), "mode", CROP_MODES)
        ratio = crop_aspect_ratio(mode, data.get("width_mm"), data.get("height_mm"))
        return jsonify({"success": True, "aspect_ratio": ratio})
    except (LayoutError, ValueError) as e:
        return _error_response(e)


@app.route("/api/edit/apply", methods=["POST"])
def edit_apply():
    """Confirm the crop for the open editor

    Input:
        box: {x, y, width, height} in raster pixels (crop widget getData())
        mode: free | mm
        width_mm, height_mm: target size for mm mode
    """
    try:
        data = _json_payload()
        mode = require_str(data.get("mode", MODE_FREE), "mode", CROP_MODES)
        box = _parse_crop_box(data)
        width_mm = optional_float(data.get("width_mm"), "width_mm")
        height_mm = optional_float(data.get("height_mm"), "height_mm")
        layout_session = _layout_session()
        with layout_session.lock:
            image = layout_session.apply_crop(box, mode, width_mm, height_mm)
            return jsonify(_state(layout_session, applied=image is not None))
    except (LayoutError, ValueError) as e:
        logger.error(f"Crop failed: {e}")
        return _error_response(e)


@app.route("/api/edit/close", methods=["POST"])
def edit_close():
    layout_session = _layout_session()
    with layout_session.lock:
        layout_session.close_edit()
        return jsonify({"success": True})


@app.route("/api/pointer", methods=["POST"])
def pointer():
    """Pointer/touch event for drag-and-snap

    Input:
        type: down | move | up | leave
        client_x, client_y: client coordinates
        rect: {left, top, width, height} of the rendered surface
        touches: optional [{client_x, client_y}], first is primary
    """
    try:
        event = _parse_pointer(_json_payload())
        layout_session = _layout_session()
        with layout_session.lock:
            moved = layout_session.dispatch(event)
            payload = {"success": True, "moved": moved, "dragging": layout_session.dragging}
            if layout_session.drag is not None:
                target = layout_session.layout.find(layout_session.drag.target_id)
                payload["target"] = target.to_dict() if target else None
            return jsonify(payload)
    except (LayoutError, ValueError) as e:
        return _error_response(e)


@app.route("/api/preview", methods=["GET"])
def preview():
    """Rendered surface as PNG; grid=1 adds the mm grid overlay"""
    show_grid = parse_bool(request.args.get("grid"))
    layout_session = _layout_session()
    with layout_session.lock:
        img = PreviewService.render_preview(layout_session, show_grid)
    response = send_file(io.BytesIO(ImageService.image_to_png_bytes(img)), mimetype="image/png")
    response.headers["Cache-Control"] = "no-store"
    return response


@app.route("/api/export/<fmt>", methods=["GET"])
def export_layout(fmt):
    """Download the composed layout as layout_image.<fmt>"""
    try:
        fmt = validate_format(fmt)
        layout_session = _layout_session()
        with layout_session.lock:
            data = layout_session.export(fmt)
        logger.info(f"Exported {fmt} ({len(data)} bytes)")
        return send_file(
            io.BytesIO(data),
            mimetype=EXPORT_MIME_TYPES[fmt],
            as_attachment=True,
            download_name=export_filename(fmt),
        )
    except LayoutError as e:
        return _error_response(e)


def main():
    app.run(host=HOST, port=PORT, threaded=True)


if __name__ == "__main__":
    main()
