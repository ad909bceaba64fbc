# ==underline==
from __future__ import annotations

from markdown_it import MarkdownIt
from markdown_it.rules_inline.state_inline import Delimiter, StateInline

MARKER = "="


def underline_plugin(md: MarkdownIt) -> None:
    """Parse ``==text==`` into ``mark_open``/``mark_close`` tokens rendered as ``<u>``."""
    md.inline.ruler.before("emphasis", "underline", tokenize)
    md.inline.ruler2.before("emphasis", "underline", post_process)


def tokenize(state: StateInline, silent: bool) -> bool:
    """Push each ``==`` pair as a text token and record it as a delimiter."""
    start = state.pos
    if silent or state.src[start] != MARKER:
        return False

    scanned = state.scanDelims(start, True)
    length = scanned.length
    if length < 2:
        return False

    if length % 2:
        token = state.push("text", "", 0)
        token.content = MARKER
        length -= 1

    for _ in range(0, length, 2):
        token = state.push("text", "", 0)
        token.content = MARKER * 2
        state.delimiters.append(
            Delimiter(
                marker=ord(MARKER),
                length=0,
                token=len(state.tokens) - 1,
                end=-1,
                open=scanned.can_open,
                close=scanned.can_close,
            )
        )

    state.pos += scanned.length
    return True


def post_process(state: StateInline) -> None:
    _replace_delimiters(state, state.delimiters)
    for meta in state.tokens_meta:
        if meta and "delimiters" in meta:
            _replace_delimiters(state, meta["delimiters"])


def _replace_delimiters(state: StateInline, delimiters: list[Delimiter]) -> None:
    lone_markers: list[int] = []
    for start_delim in delimiters:
        if start_delim.marker != ord(MARKER) or start_delim.end == -1:
            continue
        end_delim = delimiters[start_delim.end]

        token = state.tokens[start_delim.token]
        token.type = "mark_open"
        token.tag = "u"
        token.nesting = 1
        token.markup = MARKER * 2
        token.content = ""

        token = state.tokens[end_delim.token]
        token.type = "mark_close"
        token.tag = "u"
        token.nesting = -1
        token.markup = MARKER * 2
        token.content = ""

        previous = state.tokens[end_delim.token - 1]
        if previous.type == "text" and previous.content == MARKER:
            lone_markers.append(end_delim.token - 1)

    # An odd run like `=====` leaves one `=` in front; move it past the closers.
    while lone_markers:
        i = lone_markers.pop()
        j = i + 1
        while j < len(state.tokens) and state.tokens[j].type == "mark_close":
            j += 1
        j -= 1
        if i != j:
            state.tokens[i], state.tokens[j] = state.tokens[j], state.tokens[i]
