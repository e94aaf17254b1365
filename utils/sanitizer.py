# utils/sanitizer.py
# Strips markup from user-supplied text before it is stored

import re

_DANGEROUS_PATTERNS = [
    # Whole blocks, content included
    re.compile(r'<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>', re.IGNORECASE),
    re.compile(r'<iframe\b[^<]*(?:(?!</iframe>)<[^<]*)*</iframe>', re.IGNORECASE),
    re.compile(r'<object\b[^<]*(?:(?!</object>)<[^<]*)*</object>', re.IGNORECASE),
    # Single tags
    re.compile(r'<embed\b[^>]*>', re.IGNORECASE),
    re.compile(r'<link\b[^>]*>', re.IGNORECASE),
    # URL schemes up to the next quote
    re.compile(r'javascript:[^"\']*', re.IGNORECASE),
    re.compile(r'data:[^"\']*', re.IGNORECASE),
]

_ESCAPES = str.maketrans({
    '<': '&lt;',
    '>': '&gt;',
    '"': '&quot;',
    "'": '&#x27;',
    '/': '&#x2F;',
})


def sanitize_text(text):
    """
    Neutralize markup in user-supplied text.

    Drops script/iframe/object blocks, embed/link tags and javascript:/data:
    URLs, then HTML-escapes what is left and trims whitespace.
    """
    if not isinstance(text, str):
        return text
    for pattern in _DANGEROUS_PATTERNS:
        text = pattern.sub('', text)
    return text.translate(_ESCAPES).strip()
