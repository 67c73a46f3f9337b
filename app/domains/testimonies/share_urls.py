from typing import Dict, Optional
from urllib.parse import urlencode

SHARE_PLATFORMS = ("twitter", "facebook", "linkedin", "whatsapp", "email")


def build_twitter_share_url(url: str, title: str, excerpt: Optional[str] = None) -> str:
    text = f"{title}\n\n{excerpt}" if excerpt else title
    return "https://twitter.com/intent/tweet?" + urlencode({"text": text, "url": url})


def build_facebook_share_url(url: str, title: str = "", excerpt: Optional[str] = None) -> str:
    # Facebook берет заголовок и описание из OG-тегов страницы
    return "https://www.facebook.com/sharer/sharer.php?" + urlencode({"u": url})


def build_linkedin_share_url(url: str, title: str = "", excerpt: Optional[str] = None) -> str:
    return "https://www.linkedin.com/sharing/share-offsite/?" + urlencode({"url": url})


def build_whatsapp_share_url(url: str, title: str, excerpt: Optional[str] = None) -> str:
    text = f"{title}\n\n{excerpt}\n\n{url}" if excerpt else f"{title}\n\n{url}"
    return "https://wa.me/?" + urlencode({"text": text})


def build_email_share_url(url: str, title: str, excerpt: Optional[str] = None) -> str:
    if excerpt:
        body = f"{excerpt}\n\nRead the full testimony: {url}"
    else:
        body = f"Read this testimony: {url}"
    return "mailto:?" + urlencode({"subject": title, "body": body})


_BUILDERS = {
    "twitter": build_twitter_share_url,
    "facebook": build_facebook_share_url,
    "linkedin": build_linkedin_share_url,
    "whatsapp": build_whatsapp_share_url,
    "email": build_email_share_url,
}


def get_share_url(platform: str, url: str, title: str, excerpt: Optional[str] = None) -> str:
    """Ссылка для конкретной платформы; для неизвестной возвращается сам url"""
    builder = _BUILDERS.get(platform)
    if builder is None:
        return url
    return builder(url, title, excerpt)


def get_all_share_urls(url: str, title: str, excerpt: Optional[str] = None) -> Dict[str, str]:
    return {platform: get_share_url(platform, url, title, excerpt) for platform in SHARE_PLATFORMS}
