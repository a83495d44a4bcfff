LIKE_ESCAPE = "\\"

def contains_pattern(text: str) -> str:
    """``%text%`` for ILIKE with the user's own wildcards escaped.

    Pass ``escape=LIKE_ESCAPE`` to ``ilike`` so ``%`` and ``_`` typed by the
    user match literally.
    """
    escaped = (
        text.strip()
        .replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )
    return f"%{escaped}%"
