"""
Tagged union over every answer-key variant.

Stored content that already carries its `kind` tag can be validated straight
into the right model with `ExerciseContentAdapter`.
"""

from typing import Annotated, Union

from pydantic import Field, TypeAdapter

from .categorization import CategorizationContent
from .cloze import ClozeContent
from .highlight import HighlightContent
from .image_labeling import ImageLabelingContent
from .matching import MatchingContent
from .memory_game import MemoryGameContent
from .ordering import OrderingContent
from .rating_scale import RatingScaleContent
from .sentence_builder import SentenceBuilderContent
from .table_completion import TableCompletionContent
from .text_selection import TextSelectionContent

ExerciseContent = Annotated[
    Union[
        ClozeContent,
        CategorizationContent,
        OrderingContent,
        MatchingContent,
        MemoryGameContent,
        ImageLabelingContent,
        TextSelectionContent,
        SentenceBuilderContent,
        TableCompletionContent,
        RatingScaleContent,
        HighlightContent,
    ],
    Field(discriminator="kind"),
]

ExerciseContentAdapter: TypeAdapter[ExerciseContent] = TypeAdapter(ExerciseContent)
