import logging
from typing import Optional

import httpx

from app.core.config import settings

logger = logging.getLogger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"


class ResendMailer:
    """Отправка писем со ссылкой входа через Resend"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        from_email: Optional[str] = None,
        timeout: float = 10.0
    ):
        self.api_key = api_key or settings.resend_api_key
        self.from_email = from_email or settings.resend_from_email
        self.timeout = timeout

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.from_email)

    async def send_magic_link(self, to_email: str, link: str) -> bool:
        """False, если отправка не настроена"""
        if not self.is_configured:
            logger.warning(f"Resend is not configured, magic link for {to_email}: {link}")
            return False

        payload = {
            "from": self.from_email,
            "to": [to_email],
            "subject": "Your sign-in link",
            "text": f"Click the link below to sign in:\n\n{link}\n\nThis link can only be used once.",
        }

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.post(
                    RESEND_API_URL,
                    json=payload,
                    headers={"Authorization": f"Bearer {self.api_key}"}
                )
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                logger.error(f"Resend email failed (HTTP {e.response.status_code}): {e.response.text}")
                raise
            except httpx.HTTPError as e:
                logger.error(f"Resend email failed (network error): {e}")
                raise

        logger.info(f"Magic link sent to {to_email}")
        return True
