"""Tracks what the user typed versus what was last searched successfully."""


class QueryCursor:
    """Current input text plus the last query whose results were applied.

    `query_text` is the desired query: the search engine discards any response
    issued for a different text.
    """

    def __init__(self, initial_text: str = "") -> None:
        self.query_text: str = initial_text
        self.last_completed_query_text: str = ""

    def update(self, text: str) -> None:
        self.query_text = text

    def mark_completed(self, text: str) -> None:
        self.last_completed_query_text = text

    @property
    def input_changed(self) -> bool:
        """True when the input is non-empty and differs from the last searched text."""
        return bool(self.query_text) and self.query_text != self.last_completed_query_text

    def reset(self) -> None:
        self.query_text = ""
        self.last_completed_query_text = ""
