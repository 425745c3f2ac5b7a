"""Header construction for outgoing requests."""

from collections.abc import Mapping

JSON_CONTENT_TYPE = "application/json"


class HeaderBuilder:
    """Build request headers with JSON defaults."""

    def __init__(self, defaults: Mapping[str, str] | None = None):
        self.defaults = dict(defaults or {})

    def build_json_headers(self, headers: Mapping[str, str] | None = None) -> dict[str, str]:
        """Merge defaults and caller headers, adding Content-Type if absent."""
        merged: dict[str, str] = {}
        for source in (self.defaults, headers or {}):
            for key, value in source.items():
                # Later sources win regardless of header casing
                for existing in [k for k in merged if k.lower() == key.lower()]:
                    del merged[existing]
                merged[key] = str(value)
        if not any(key.lower() == "content-type" for key in merged):
            merged = {"Content-Type": JSON_CONTENT_TYPE, **merged}
        return merged
