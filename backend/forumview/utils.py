import re
from .models import AVATAR_VIEW_MODE_STATIC

MOBILE_PATTERNS = [
    r"android.+mobile",
    r"iphone|ipod|blackberry|iemobile|opera mini|windows phone",
    r"mobile safari|webos|kindle|silk",
]

LOCALE_RE = re.compile(r"^([a-zA-Z]{2,3})(?:[-_]([a-zA-Z]{2}))?$")

def is_mobile(user_agent: str | None) -> bool:
    ua = (user_agent or "").lower()
    for pat in MOBILE_PATTERNS:
        if re.search(pat, ua):
            return True
    return False

def negotiate_locale(accept_language: str | None, default: str) -> str:
    """Pick the first well-formed language range from an Accept-Language header."""
    for part in (accept_language or "").split(","):
        tag = part.split(";")[0].strip()
        m = LOCALE_RE.match(tag)
        if not m:
            continue
        lang, region = m.group(1).lower(), m.group(2)
        return f"{lang}_{region.upper()}" if region else lang
    return default

def avatar_url(url: str | None, view_mode: int, size: int) -> str | None:
    if not url:
        return None
    base = url.split("?")[0]
    if view_mode == AVATAR_VIEW_MODE_STATIC:
        return f"{base}?imageView2/1/w/{size}/h/{size}/format/png"
    return f"{base}?imageView2/1/w/{size}/h/{size}/interlace/0/q/100"
