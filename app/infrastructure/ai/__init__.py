from app.infrastructure.ai.providers import OpenAIProvider, parse_suggestions, strip_html
from app.infrastructure.ai.services import AiService

__all__ = ["OpenAIProvider", "parse_suggestions", "strip_html", "AiService"]
