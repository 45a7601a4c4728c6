"""
Caption service routes: turn a content description into social media captions.
"""

import logging
from typing import Any, Tuple

from flask import Blueprint, Response, current_app, jsonify, request

from backend.caption_service.config import CaptionSettings
from backend.caption_service.errors import CaptionServiceError, ValidationError
from backend.caption_service.models import CaptionRequest
from backend.caption_service.prompts import build_caption_prompt

logger = logging.getLogger(__name__)

caption_bp = Blueprint("caption", __name__)

# keys under app.extensions, set by the app factory
CLIENT_EXTENSION = "caption_client"
SETTINGS_EXTENSION = "caption_settings"

GENERIC_UPSTREAM_ERROR = "Failed to generate caption."


def get_caption_client() -> Any:
    return current_app.extensions[CLIENT_EXTENSION]


def get_caption_settings() -> CaptionSettings:
    return current_app.extensions[SETTINGS_EXTENSION]


def error_response(message: str, status: int) -> Tuple[Response, int]:
    return jsonify({"success": False, "error": message}), status


@caption_bp.route("/generate-caption", methods=["POST"])
def generate_caption() -> Tuple[Response, int]:
    """
    Generate caption variants for a piece of content.

    Expects JSON:
    - platform (str), language (str), tone (str), description (str)
    - variants (int, optional): defaults to 2 when absent or <= 0

    Returns:
        200: { "success": true, "caption_raw": str } (variants separated by newlines)
        400: Validation error. The upstream API is not contacted.
        500: Configuration or upstream error.
    """
    # decode the body whatever its Content-Type
    data = request.get_json(force=True, silent=True)

    try:
        caption_req = CaptionRequest.from_json(data)
    except ValidationError as e:
        return error_response(str(e), 400)

    prompt = build_caption_prompt(caption_req)

    try:
        caption_text = get_caption_client().generate(prompt)
    except CaptionServiceError as e:
        logger.error(f"Caption generation failed: {e}")
        if get_caption_settings().expose_error_detail:
            return error_response(str(e), 500)
        return error_response(GENERIC_UPSTREAM_ERROR, 500)

    return jsonify({"success": True, "caption_raw": caption_text}), 200
