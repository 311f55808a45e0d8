"""Utilities to build multimodal input payloads for the Responses API."""

from typing import Any, Dict, List


def to_image_data_url(image_b64: str, mime_type: str) -> str:
    """Wrap base64 image text in a data URL suitable for vision input."""
    if not image_b64:
        raise ValueError("Image data must be provided as base64 text.")
    return f"data:{mime_type or 'image/jpeg'};base64,{image_b64}"


def build_inputs(system_prompt: str, user_prompt: str, *, image_url: str) -> List[Dict[str, Any]]:
    """Build the Responses API input array with the image as its own message."""
    return [
        {
            "type": "message",
            "role": "system",
            "content": [{"type": "input_text", "text": system_prompt}],
        },
        {"type": "message", "role": "user", "content": [{"type": "input_text", "text": user_prompt}]},
        {"type": "message", "role": "user", "content": [{"type": "input_image", "image_url": image_url}]},
    ]
