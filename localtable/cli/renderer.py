"""
LocalTable Result Renderer
==========================
Formats rows returned by a Table as aligned text.

Modes:
  table      ASCII grid, columns sized from a sample of rows
  vertical   one "field: value" block per row
  raw        pipe-separated values, no padding

Values render JSON-style: null, true/false, nested objects as compact JSON.
"""

import json
import sys
from typing import Any, Dict, Iterable, List, Optional, TextIO

MODES = ("table", "vertical", "raw")


class Renderer:

    def __init__(self, output: Optional[TextIO] = None):
        self.output = output or sys.stdout
        self.mode: str = "table"
        self.display_limit: Optional[int] = None  # None = no limit
        self.max_col_width: int = 50

    def set_mode(self, mode: str) -> None:
        if mode not in MODES:
            raise ValueError(f"Unknown output mode {mode!r}. Valid modes: {list(MODES)}")
        self.mode = mode

    # ─── Public API ─────────────────────────────────────────────────

    def render_rows(self, rows: Iterable[Dict[str, Any]]) -> int:
        """Render rows in the current mode. Returns number of rows rendered."""
        rows = list(rows)
        if self.display_limit is not None:
            shown = rows[:self.display_limit]
        else:
            shown = rows
        headers = self._collect_headers(shown)

        if self.mode == "raw":
            self._render_raw(shown, headers)
        elif self.mode == "vertical":
            self._render_vertical(shown, headers)
        else:
            self._render_table(shown, headers)

        if len(shown) < len(rows):
            self._print(f"... (display limit {self.display_limit} reached)")

        self._print(f"\n{len(rows)} row(s) returned")
        return len(shown)

    def render_value(self, value: Any) -> None:
        self._print(self._format_value(value))

    def render_message(self, message: str) -> None:
        if message:
            self._print(message)

    def render_error(self, error: BaseException) -> None:
        """Render an error with a classification prefix."""
        prefix = self._classify_error(type(error).__name__)
        self._print(f"{prefix}: {error}")
        details = getattr(error, "errors", None)
        if details:
            for detail in details:
                self._print(f"  - {detail}")

    # ─── Table Mode ─────────────────────────────────────────────────

    def _render_table(self, rows: List[Dict[str, Any]], headers: List[str]) -> None:
        if not headers:
            return
        widths = self._calculate_widths(headers, rows)

        self._print_separator(widths, headers)
        self._print_row(widths, headers, {h: h for h in headers})
        self._print_separator(widths, headers)

        for row in rows:
            self._print_row(widths, headers, row)

        if rows:
            self._print_separator(widths, headers)

    def _calculate_widths(self, headers: List[str], rows: List[Dict[str, Any]]) -> Dict[str, int]:
        widths = {h: min(len(h), self.max_col_width) for h in headers}
        for row in rows[:100]:
            for h in headers:
                text = self._format_value(row.get(h))
                widths[h] = max(widths[h], min(len(text), self.max_col_width))
        return widths

    def _print_separator(self, widths: Dict[str, int], headers: List[str]) -> None:
        self._print("+" + "".join("-" * (widths[h] + 2) + "+" for h in headers))

    def _print_row(self, widths: Dict[str, int], headers: List[str], row: Dict[str, Any]) -> None:
        parts = ["|"]
        for h in headers:
            raw = row.get(h)
            text = self._format_value(raw)
            if len(text) > self.max_col_width:
                text = text[:self.max_col_width - 3] + "..."
            w = widths[h]
            # Right-align numbers, left-align everything else
            if isinstance(raw, (int, float)) and not isinstance(raw, bool):
                parts.append(f" {text:>{w}} |")
            else:
                parts.append(f" {text:<{w}} |")
        self._print("".join(parts))

    # ─── Vertical / Raw Modes ───────────────────────────────────────

    def _render_vertical(self, rows: List[Dict[str, Any]], headers: List[str]) -> None:
        key_width = max((len(h) for h in headers), default=0)
        for count, row in enumerate(rows, start=1):
            self._print(f"*** Row {count} ***")
            for h in headers:
                self._print(f"  {h:>{key_width}}: {self._format_value(row.get(h))}")

    def _render_raw(self, rows: List[Dict[str, Any]], headers: List[str]) -> None:
        if headers:
            self._print("|".join(headers))
        for row in rows:
            self._print("|".join(self._format_value(row.get(h)) for h in headers))

    # ─── Helpers ────────────────────────────────────────────────────

    def _collect_headers(self, rows: List[Dict[str, Any]]) -> List[str]:
        """Union of row keys in first-seen order, with the id column first."""
        headers: List[str] = []
        for row in rows:
            for key in row:
                if key not in headers:
                    headers.append(key)
        if "id" in headers:
            headers.remove("id")
            headers.insert(0, "id")
        return headers

    def _format_value(self, value: Any) -> str:
        if value is None:
            return "null"
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, float):
            if value.is_integer():
                return str(int(value))
            return f"{value:.6g}"
        if isinstance(value, (dict, list)):
            return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
        return str(value)

    def _classify_error(self, error_type: str) -> str:
        """Map error class name to user-friendly prefix."""
        mapping = {
            "NotFound": "NotFound",
            "AlreadyExists": "AlreadyExists",
            "ValidationError": "ValidationError",
            "InvalidLookup": "QueryError",
            "SerializationError": "StorageError",
            "UsageError": "UsageError",
            "JSONDecodeError": "UsageError",
            "OSError": "StorageError",
            "ValueError": "Error",
            "TypeError": "Error",
            "KeyboardInterrupt": "Interrupted",
        }
        return mapping.get(error_type, f"Error[{error_type}]")

    def _print(self, text: str) -> None:
        print(text, file=self.output)
