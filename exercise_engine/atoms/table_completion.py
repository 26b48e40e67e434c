"""
Table completion evaluator.

Some cells of a table are editable; each editable cell is one unit keyed
"<row>-<col>". Answers are compared trimmed and case-insensitively.

Working answer: {"<row>-<col>": value}.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

from . import ExerciseType, register
from .base import (
    Evaluation,
    ExerciseContentBase,
    UnitStatus,
    as_mapping,
    build_content,
    coerce_mapping,
    normalize_text,
)


class TableCell(BaseModel):
    """A fixed or editable table cell."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    value: str = ""
    editable: bool = False
    correct_answer: str | None = None


class TableRow(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    cells: tuple[TableCell, ...] = ()


class TableCompletionContent(ExerciseContentBase):
    """Answer key for a table completion exercise."""

    kind: Literal["table_completion"] = "table_completion"
    headers: tuple[str, ...] = ()
    rows: tuple[TableRow, ...] = ()

    @property
    def expected(self) -> dict[str, str]:
        """Expected value per editable cell key."""
        cells = {}
        for r, row in enumerate(self.rows):
            for c, cell in enumerate(row.cells):
                if cell.editable:
                    cells[f"{r}-{c}"] = cell.correct_answer if cell.correct_answer is not None else cell.value
        return cells


def _cell(raw: Any) -> Any:
    if isinstance(raw, str):
        return {"value": raw}
    if isinstance(raw, dict) and "correctAnswer" in raw:
        raw = dict(raw)
        raw.setdefault("correct_answer", raw.pop("correctAnswer"))
    return raw


def _row(raw: Any) -> Any:
    if isinstance(raw, list):
        raw = {"cells": raw}
    if isinstance(raw, dict) and isinstance(raw.get("cells"), list):
        raw = dict(raw)
        raw["cells"] = [_cell(c) for c in raw["cells"]]
    return raw


@register(ExerciseType.TABLE_COMPLETION)
class TableCompletionEvaluator:
    """Evaluator for table completion exercises."""

    partial_credit = True

    def parse(self, raw: Any) -> TableCompletionContent:
        data = dict(as_mapping(raw))
        if isinstance(data.get("rows"), list):
            data["rows"] = [_row(r) for r in data["rows"]]
        return build_content(TableCompletionContent, data, "table_completion")

    def empty_answer(self, content: TableCompletionContent) -> dict[str, str]:
        return {}

    def normalize_answer(self, content: TableCompletionContent, raw: Any) -> dict[str, str]:
        return coerce_mapping(raw)

    def evaluate(self, content: TableCompletionContent, answer: Any) -> Evaluation:
        expected = content.expected
        if not expected:
            return Evaluation.empty(self.partial_credit)

        filled = self.normalize_answer(content, answer)
        units = []
        for key, value in expected.items():
            given = filled.get(key)
            if given is None:
                status = UnitStatus.EMPTY
            elif normalize_text(given) == normalize_text(value):
                status = UnitStatus.CORRECT
            else:
                status = UnitStatus.WRONG
            units.append((key, status))

        return Evaluation.from_units(units, self.partial_credit)

    def clear_wrong(self, content: TableCompletionContent, answer: Any, evaluation: Evaluation) -> dict[str, str]:
        filled = self.normalize_answer(content, answer)
        wrong = set(evaluation.wrong_units)
        return {key: value for key, value in filled.items() if key not in wrong}

    def is_complete(self, content: TableCompletionContent, answer: Any) -> bool:
        filled = self.normalize_answer(content, answer)
        expected = content.expected
        return bool(expected) and all(key in filled for key in expected)
