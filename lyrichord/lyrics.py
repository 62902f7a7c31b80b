"""Lyrics text helpers: find the word under the text cursor."""

WORD_DELIMITERS = frozenset({" ", "\n", "\t"})


def word_under_cursor(text: str, cursor: int) -> str:
    """
    Return the whitespace-delimited word at a cursor position.

    The cursor is a character offset. A cursor sitting just after a word (on
    the following delimiter, or past the end of the text) selects that word.

    Args:
        text:   Song text.
        cursor: Character offset of the cursor; clamped into the text.

    Returns:
        The word, or an empty string when there is none.

    Examples:
        word_under_cursor("Dmaj7 is great", 2) -> "Dmaj7"
        word_under_cursor("play G", 6)         -> "G"
    """
    if not text:
        return ""

    idx = min(max(cursor, 0), len(text) - 1)

    start = idx
    while start > 0 and text[start - 1] not in WORD_DELIMITERS:
        start -= 1

    end = idx
    while end < len(text) and text[end] not in WORD_DELIMITERS:
        end += 1

    return text[start:end]
