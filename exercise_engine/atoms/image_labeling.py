"""
Image labeling evaluator.

Labels are dragged onto drop zones placed over an image. Each drop zone is one
unit; answers are compared by label id.

Working answer: {zone_id: label_id}.
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
    build_items,
    coerce_mapping,
)


class ImageLabel(BaseModel):
    """A draggable label."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    text: str = ""


class DropZone(BaseModel):
    """A target area on the image and the label that belongs there."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    correct_label_id: str
    x: float = 0.0
    y: float = 0.0


class ImageLabelingContent(ExerciseContentBase):
    """Answer key for an image labeling exercise."""

    kind: Literal["image_labeling"] = "image_labeling"
    image_url: str = ""
    labels: tuple[ImageLabel, ...] = ()
    drop_zones: tuple[DropZone, ...] = ()


def _zone(raw: Any) -> Any:
    if not isinstance(raw, dict):
        return raw
    zone = dict(raw)
    if "correctLabelId" in zone:
        zone.setdefault("correct_label_id", zone.pop("correctLabelId"))
    return zone


@register(ExerciseType.IMAGE_LABELING)
class ImageLabelingEvaluator:
    """Evaluator for image labeling exercises."""

    partial_credit = True

    def parse(self, raw: Any) -> ImageLabelingContent:
        data = dict(as_mapping(raw))
        if "imageUrl" in data:
            data.setdefault("image_url", data.pop("imageUrl"))
        zones = data.pop("dropZones", None) or data.get("drop_zones")
        if isinstance(zones, list):
            data["drop_zones"] = build_items(DropZone, (_zone(z) for z in zones), "image_labeling")
        labels = data.get("labels")
        if isinstance(labels, list):
            data["labels"] = build_items(ImageLabel, labels, "image_labeling")
        return build_content(ImageLabelingContent, data, "image_labeling")

    def empty_answer(self, content: ImageLabelingContent) -> dict[str, str]:
        return {}

    def normalize_answer(self, content: ImageLabelingContent, raw: Any) -> dict[str, str]:
        return coerce_mapping(raw)

    def evaluate(self, content: ImageLabelingContent, answer: Any) -> Evaluation:
        if not content.drop_zones:
            return Evaluation.empty(self.partial_credit)

        placements = self.normalize_answer(content, answer)
        units = []
        for zone in content.drop_zones:
            placed = placements.get(zone.id)
            if placed is None:
                status = UnitStatus.EMPTY
            elif placed == zone.correct_label_id:
                status = UnitStatus.CORRECT
            else:
                status = UnitStatus.WRONG
            units.append((zone.id, status))

        return Evaluation.from_units(units, self.partial_credit)

    def clear_wrong(self, content: ImageLabelingContent, answer: Any, evaluation: Evaluation) -> dict[str, str]:
        placements = self.normalize_answer(content, answer)
        wrong = set(evaluation.wrong_units)
        return {zone: label for zone, label in placements.items() if zone not in wrong}

    def is_complete(self, content: ImageLabelingContent, answer: Any) -> bool:
        placements = self.normalize_answer(content, answer)
        return bool(content.drop_zones) and all(z.id in placements for z in content.drop_zones)
