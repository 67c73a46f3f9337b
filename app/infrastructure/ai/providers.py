"""Подсказки по редактированию свидетельств от языковой модели."""
import json
import logging
import re
from typing import Optional, List, Dict, Any

import openai

from app.core.config import settings
from app.domains.testimonies.entities import Testimony, FrameworkType

logger = logging.getLogger(__name__)

MAX_LINE_SUGGESTIONS = 5

SYSTEM_PROMPT = (
    "You are a helpful assistant that provides editing suggestions for personal faith testimonies. "
    "Provide constructive, encouraging feedback that helps users improve their testimony while "
    "maintaining authenticity. Return your suggestions as a JSON array of objects with \"text\" "
    "and \"explanation\" fields."
)

_TAG_RE = re.compile(r"<[^>]*>")


def strip_html(text: str) -> str:
    """Удаление HTML-тегов из пользовательского ввода"""
    return _TAG_RE.sub("", text or "")


def format_testimony_content(testimony: Testimony) -> str:
    """Текстовое представление свидетельства для промпта"""
    content = testimony.content if isinstance(testimony.content, dict) else {}
    lines = [f"Title: {testimony.title}", ""]

    if testimony.framework_type == FrameworkType.BEFORE_ENCOUNTER_AFTER:
        lines += [
            f"Before: {content.get('before') or ''}", "",
            f"Encounter: {content.get('encounter') or ''}", "",
            f"After: {content.get('after') or ''}",
        ]
    elif testimony.framework_type == FrameworkType.LIFE_TIMELINE:
        lines.append("Life Timeline:")
        for index, milestone in enumerate(content.get("milestones") or [], start=1):
            lines += [
                "",
                f"Milestone {index}:",
                f"Age: {milestone.get('age') or ''}",
                f"Event: {milestone.get('event') or ''}",
                f"Impact: {milestone.get('impact') or ''}",
            ]
    elif testimony.framework_type == FrameworkType.SEASONS_OF_GROWTH:
        lines.append("Seasons of Growth:")
        for index, season in enumerate(content.get("seasons") or [], start=1):
            lines += [
                "",
                f"Season {index}: {season.get('season') or ''}",
                f"Challenges: {season.get('challenges') or ''}",
                f"Growth: {season.get('growth') or ''}",
                f"Lessons: {season.get('lessons') or ''}",
            ]
    elif testimony.framework_type == FrameworkType.FREE_FORM:
        lines.append(content.get("narrative") or "")

    return "\n".join(lines)


def parse_suggestions(text: str) -> List[Dict[str, Any]]:
    """JSON-массив подсказок, иначе до пяти непустых строк ответа"""
    try:
        parsed = json.loads(text)
    except (TypeError, ValueError):
        lines = [line.strip() for line in (text or "").split("\n") if line.strip()]
        return [{"text": line} for line in lines[:MAX_LINE_SUGGESTIONS]]

    if not isinstance(parsed, list):
        return [{"text": text}]

    suggestions = []
    for item in parsed:
        if isinstance(item, dict):
            suggestions.append({
                "text": str(item.get("text") or item),
                "explanation": str(item["explanation"]) if item.get("explanation") is not None else None
            })
        else:
            suggestions.append({"text": str(item)})
    return suggestions


class OpenAIProvider:
    """Провайдер подсказок через OpenAI Chat Completions"""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None, max_tokens: int = 1000):
        api_key = api_key or settings.openai_api_key
        if not api_key:
            raise RuntimeError("OPENAI_API_KEY is not set")

        self.model = model or settings.openai_model
        self.max_tokens = max_tokens
        self._client = openai.AsyncOpenAI(api_key=api_key)

    async def generate_suggestions(self, testimony: Testimony, prompt: str) -> List[Dict[str, Any]]:
        user_prompt = (
            f"Testimony content:\n\n{strip_html(format_testimony_content(testimony))}\n\n"
            f"User request: {strip_html(prompt)}\n\n"
            "Provide specific, actionable suggestions."
        )

        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": user_prompt},
                ],
                max_tokens=self.max_tokens,
            )
        except openai.OpenAIError as e:
            logger.error(f"AI generation error: {e}")
            raise RuntimeError("Failed to generate AI suggestions") from e

        return parse_suggestions(response.choices[0].message.content or "")
