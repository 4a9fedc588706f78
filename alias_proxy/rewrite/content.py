TEXTUAL_TOKENS = ("text", "json", "xml")

NOT_MODIFIED = 304


def is_textual(content_type: str) -> bool:
    """Coarse check: any content type mentioning text, json or xml is rewritable."""
    if not content_type:
        return False
    return any(token in content_type for token in TEXTUAL_TOKENS)


def is_rewritable(status_code: int, content_type: str) -> bool:
    # A 304 carries no body whatever its declared type
    return status_code != NOT_MODIFIED and is_textual(content_type)
