"""Pure mode system for key dispatch.

All keyboard input routes through Navigator.handle_key based on current
mode. Textual BINDINGS are not used; on_key forwards every key.
"""

from enum import Enum

from hnclient.core.items import FEEDS


class InputMode(Enum):
    NONE = "none"
    LOCAL_SEARCH = "local-search"
    GLOBAL_SEARCH = "global-search"


# Keys outside this table that are printable are typed into the search buffer
# in the entry modes; in NONE they are ignored.
ENTRY_KEYS: dict[str, str] = {
    "enter": "commit_entry",
    "escape": "cancel_entry",
    "backspace": "erase_char",
    "space": "type_space",
}


def _feed_keys() -> dict[str, str]:
    return {str(idx + 1): f"switch_feed:{feed}" for idx, feed in enumerate(FEEDS)}


# [LAW:one-source-of-truth] Key→action mapping for NONE mode.
# Actions with an argument are written "name:arg".
NORMAL_KEYMAP: dict[str, str] = {
    # Navigation
    "j": "cursor_down",
    "down": "cursor_down",
    "k": "cursor_up",
    "up": "cursor_up",
    "g": "go_top",
    "G": "go_bottom",
    "end": "go_bottom",
    "home": "go_top_now",

    # Panes
    "c": "open_comments",
    "a": "open_article",
    "q": "back",
    "escape": "back",
    "ctrl+c": "quit",

    # Threads
    "h": "collapse",
    "left": "collapse",
    "l": "expand",
    "right": "expand",

    # Feeds / paging
    "r": "refresh",
    "space": "load_more",
    **_feed_keys(),

    # Search
    "/": "start_local_search",
    "?": "start_global_search",
    "n": "next_match",
    "N": "prev_match",

    # Browser
    "enter": "open_link",
    "K": "open_discussion",
}


FOOTER_KEYS: dict[InputMode, list[tuple[str, str]]] = {
    InputMode.NONE: [
        ("j/k", "move"),
        ("gg/G", "top/bottom"),
        ("enter", "open link"),
        ("K", "open HN page"),
        ("c", "comments"),
        ("a", "article"),
        ("h/l", "fold"),
        ("/", "local"),
        ("?", "global"),
        (f"1-{len(FEEDS)}", "feeds"),
        ("q", "back/quit"),
    ],
    InputMode.LOCAL_SEARCH: [
        ("enter", "find"),
        ("esc", "cancel"),
    ],
    InputMode.GLOBAL_SEARCH: [
        ("enter", "search HN"),
        ("esc", "cancel"),
    ],
}


PROMPTS: dict[InputMode, str] = {
    InputMode.NONE: "",
    InputMode.LOCAL_SEARCH: "/",
    InputMode.GLOBAL_SEARCH: "search: ",
}


def key_token(key: str, character: str | None) -> str:
    """Normalize a Textual key event to the token used by the keymaps.

    Printable characters win over key names ("/" rather than "slash");
    space and non-printables keep their key name.
    """
    if character and len(character) == 1 and character.isprintable() and character != " ":
        return character
    return key
