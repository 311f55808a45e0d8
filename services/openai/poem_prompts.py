"""Prompt builders for image inspiration and poem composition."""

from models.poem_types import PoemStyle


def build_system_prompt() -> str:
    """Return the shared system prompt for both generation calls."""
    return (
        "You are a perceptive poet who writes from photographs. "
        "Ground every line in what is visible: light, colour, texture, and mood."
    )


def build_inspiration_prompt() -> str:
    """Return the instruction for a short evocative description of the photo."""
    return (
        "Analyze this photo. Provide a short, evocative summary (2-3 sentences) of the salient visual details, "
        "colors, textures, and the overall mood you perceive. Speak as a poetic observer. "
        'Do not mention "the image" or "the photo" directly if possible, focus on the essence of the scene.'
    )


def build_poem_prompt(style: PoemStyle) -> str:
    """Return the poem instruction constrained to the structure of `style`."""
    return (
        "Based on the visual elements of this photograph, compose a beautiful and unique poem. "
        f'Strictly follow the structure of a "{style.value}". '
        "Ensure the poem captures the colors, textures, and mood of the scene. "
        "Return only the poem text with appropriate line breaks."
    )
