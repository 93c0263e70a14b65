"""Rendering of field schema records into a side-by-side diff.

Both records are dumped to YAML, which reads better line by line than
JSON, and the two texts are compared with :class:`difflib.SequenceMatcher`.
The resulting table mirrors a classic two-pane diff: a marker and a
content column for the installed side, then the same for the defined side.
"""

import difflib
import re

import yaml

from schema_diff.config import DiffConfig
from schema_diff.schema.models import (
    DiffOp,
    DiffRow,
    DiffTable,
    FieldDiffPage,
    FieldSchemaRecord,
    TableCell,
)
from schema_diff.utils.logging import get_logger

logger = get_logger(__name__)

DIFF_LIBRARY = "system/diff"

# Words, runs of whitespace, and single punctuation characters
_TOKEN_PATTERN = re.compile(r"\w+|\s+|[^\w\s]")


class DifferenceRenderer:
    """Turn a pair of field schema records into a display-ready diff.

    Args:
        config: Diff display settings (labels, context lines)
    """

    def __init__(self, config: DiffConfig | None = None):
        self.config = config or DiffConfig()

    def serialize(self, record: FieldSchemaRecord) -> str:
        """Dump a record to YAML in its fixed attribute order.

        Args:
            record: Field schema record

        Returns:
            YAML text; identical records always give identical text
        """
        return yaml.safe_dump(
            record.to_dict(),
            sort_keys=False,
            default_flow_style=False,
            allow_unicode=True,
            width=4096,
        )

    def diff_lines(self, before_text: str, after_text: str) -> list[DiffRow]:
        """Compute a line diff of two texts.

        Replaced blocks are paired line by line into CHANGED rows; the
        surplus of the longer side becomes REMOVED or ADDED rows.

        Args:
            before_text: Installed side text
            after_text: Defined side text

        Returns:
            DiffRows in the original line order of both texts
        """
        before_lines = before_text.split("\n")
        after_lines = after_text.split("\n")
        matcher = difflib.SequenceMatcher(None, before_lines, after_lines, autojunk=False)

        rows: list[DiffRow] = []
        for tag, i1, i2, j1, j2 in matcher.get_opcodes():
            if tag == "equal":
                rows.extend(
                    DiffRow(DiffOp.UNCHANGED, before, after)
                    for before, after in zip(before_lines[i1:i2], after_lines[j1:j2], strict=True)
                )
            elif tag == "delete":
                rows.extend(DiffRow(DiffOp.REMOVED, before=line) for line in before_lines[i1:i2])
            elif tag == "insert":
                rows.extend(DiffRow(DiffOp.ADDED, after=line) for line in after_lines[j1:j2])
            else:
                paired = min(i2 - i1, j2 - j1)
                rows.extend(
                    DiffRow(DiffOp.CHANGED, before_lines[i1 + k], after_lines[j1 + k])
                    for k in range(paired)
                )
                rows.extend(
                    DiffRow(DiffOp.REMOVED, before=line) for line in before_lines[i1 + paired : i2]
                )
                rows.extend(
                    DiffRow(DiffOp.ADDED, after=line) for line in after_lines[j1 + paired : j2]
                )

        return rows

    def format(self, rows: list[DiffRow], before_text: str, after_text: str) -> DiffTable:
        """Lay diff rows out as a side-by-side table.

        Unchanged lines far from any change are left out according to the
        configured context lines. The last row always carries both full
        texts.

        Args:
            rows: Line diff from :meth:`diff_lines`
            before_text: Installed side text
            after_text: Defined side text

        Returns:
            DiffTable
        """
        header = [
            TableCell(self.config.installed_label, colspan=2),
            TableCell(self.config.defined_label, colspan=2),
        ]
        table = DiffTable(header=header)

        visible = self._visible_rows(rows)
        for index, row in enumerate(rows):
            if index in visible:
                table.rows.append(self._format_row(row))

        table.rows.append(
            [
                TableCell(before_text, classes=["diff-source"], colspan=2),
                TableCell(after_text, classes=["diff-source"], colspan=2),
            ]
        )

        return table

    def build_field_difference(
        self, before: FieldSchemaRecord, after: FieldSchemaRecord
    ) -> FieldDiffPage:
        """Render the difference between the installed and defined records.

        Args:
            before: Installed field schema record
            after: Defined field schema record

        Returns:
            FieldDiffPage ready for display
        """
        before_text = self.serialize(before)
        after_text = self.serialize(after)
        rows = self.diff_lines(before_text, after_text)
        table = self.format(rows, before_text, after_text)

        logger.debug(
            "field_difference_rendered",
            rows=len(rows),
            changed_rows=sum(1 for row in rows if row.op is not DiffOp.UNCHANGED),
            table_rows=len(table.rows),
        )

        return FieldDiffPage(
            title=self.config.title,
            table=table,
            before_text=before_text,
            after_text=after_text,
            attached=[DIFF_LIBRARY],
            rows=rows,
        )

    def _visible_rows(self, rows: list[DiffRow]) -> set[int]:
        leading = self.config.leading_context_lines
        trailing = self.config.trailing_context_lines
        if leading is None and trailing is None:
            return set(range(len(rows)))

        # None on one side shows every line up to the start or end on that side
        visible = set()
        for index, row in enumerate(rows):
            if row.op is DiffOp.UNCHANGED:
                continue
            start = 0 if leading is None else max(index - leading, 0)
            end = len(rows) if trailing is None else min(index + trailing + 1, len(rows))
            visible.update(range(start, end))
        return visible

    def _format_row(self, row: DiffRow) -> list[TableCell]:
        if row.op is DiffOp.UNCHANGED:
            return [
                TableCell(),
                TableCell(row.before or "", classes=["diff-context"]),
                TableCell(),
                TableCell(row.after or "", classes=["diff-context"]),
            ]
        if row.op is DiffOp.REMOVED:
            return [*self._deleted_cells(row.before or ""), TableCell(), TableCell()]
        if row.op is DiffOp.ADDED:
            return [TableCell(), TableCell(), *self._added_cells(row.after or "")]

        before_spans, after_spans = word_level_changes(row.before or "", row.after or "")
        return [
            *self._deleted_cells(row.before or "", before_spans),
            *self._added_cells(row.after or "", after_spans),
        ]

    @staticmethod
    def _deleted_cells(
        line: str, highlights: list[tuple[int, int]] | None = None
    ) -> list[TableCell]:
        return [
            TableCell("-", classes=["diff-marker"]),
            TableCell(
                line, classes=["diff-context", "diff-deletedline"], highlights=highlights or []
            ),
        ]

    @staticmethod
    def _added_cells(line: str, highlights: list[tuple[int, int]] | None = None) -> list[TableCell]:
        return [
            TableCell("+", classes=["diff-marker"]),
            TableCell(
                line, classes=["diff-context", "diff-addedline"], highlights=highlights or []
            ),
        ]


def word_level_changes(
    before: str, after: str
) -> tuple[list[tuple[int, int]], list[tuple[int, int]]]:
    """Find the character spans that differ between two versions of a line.

    Args:
        before: Old line
        after: New line

    Returns:
        (spans in before, spans in after), each a list of (start, end)
    """
    before_tokens = _tokenize(before)
    after_tokens = _tokenize(after)
    matcher = difflib.SequenceMatcher(
        None,
        [token for token, _ in before_tokens],
        [token for token, _ in after_tokens],
        autojunk=False,
    )

    before_spans: list[tuple[int, int]] = []
    after_spans: list[tuple[int, int]] = []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            continue
        if i2 > i1:
            _add_span(before_spans, before_tokens, i1, i2)
        if j2 > j1:
            _add_span(after_spans, after_tokens, j1, j2)

    return before_spans, after_spans


def _tokenize(line: str) -> list[tuple[str, int]]:
    return [(match.group(), match.start()) for match in _TOKEN_PATTERN.finditer(line)]


def _add_span(
    spans: list[tuple[int, int]], tokens: list[tuple[str, int]], first: int, last: int
) -> None:
    start = tokens[first][1]
    end = tokens[last - 1][1] + len(tokens[last - 1][0])
    if spans and spans[-1][1] == start:
        spans[-1] = (spans[-1][0], end)
    else:
        spans.append((start, end))
