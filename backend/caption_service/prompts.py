"""
Prompt text sent to the chat-completion API.
"""

from backend.caption_service.models import CaptionRequest

MAX_HASHTAGS = 8

# --- SYSTEM PROMPT ---
SYSTEM_PROMPT = (
    "You are an AI assistant specialized in generating high-quality social media captions. "
    "You adapt your writing style based on the user's instructions, such as platform, audience, "
    "tone, language, and content description. "
    "Generate captions that are clear, engaging, and relevant to the context provided. "
    "Avoid adding explanations, disclaimers, or content outside the requested captions."
)

CAPTION_PROMPT_TEMPLATE = """
Write {variants} {platform} captions in {language}.
Content description: {description}
Tone: {tone}.
Separate each caption with a line break.
Add relevant hashtags (maximum {max_hashtags} hashtags).
Do not add any explanation outside the captions."""


def build_caption_prompt(req: CaptionRequest) -> str:
    """
    Render the user-role prompt for a validated request.

    Pure function: the same request always renders the same text.
    """
    return CAPTION_PROMPT_TEMPLATE.format(
        variants=req.variants,
        platform=req.platform,
        language=req.language,
        description=req.description,
        tone=req.tone,
        max_hashtags=MAX_HASHTAGS,
    )
