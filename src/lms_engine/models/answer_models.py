"""
Typed answer values.

Questions store their correct answers and students submit answers as loosely
typed JSON (an index, a string, a list or a mapping). Before comparison both
sides are coerced into one of the variants below, chosen by the question type.
Every variant is a frozen model, so two answers are equal only when they are
the same variant holding the same normalized value.
"""

import typing

import pydantic


class _AnswerBase(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(frozen=True)


class IndexAnswer(_AnswerBase):
    kind: typing.Literal["index"] = "index"
    index: int


class ChoiceSetAnswer(_AnswerBase):
    kind: typing.Literal["choice-set"] = "choice-set"
    choices: frozenset[str]


class TextAnswer(_AnswerBase):
    kind: typing.Literal["text"] = "text"
    text: str


class OrderedAnswer(_AnswerBase):
    kind: typing.Literal["ordered"] = "ordered"
    items: tuple[str, ...]


class CategoryMapAnswer(_AnswerBase):
    kind: typing.Literal["category-map"] = "category-map"
    # item -> category
    assignments: dict[str, str]


class RegionAnswer(_AnswerBase):
    kind: typing.Literal["region"] = "region"
    region: str


class RegionSetAnswer(_AnswerBase):
    kind: typing.Literal["region-set"] = "region-set"
    regions: frozenset[str]


class RegionSequenceAnswer(_AnswerBase):
    kind: typing.Literal["region-sequence"] = "region-sequence"
    regions: tuple[str, ...]


AnswerValue = typing.Annotated[
    typing.Union[
        IndexAnswer,
        ChoiceSetAnswer,
        TextAnswer,
        OrderedAnswer,
        CategoryMapAnswer,
        RegionAnswer,
        RegionSetAnswer,
        RegionSequenceAnswer,
    ],
    pydantic.Field(discriminator="kind"),
]


class ScoringOptions(pydantic.BaseModel):
    """
    Comparison policy for free-text (fill-in-the-blank) answers.
    Both flags default to False, i.e. exact string equality.
    """

    model_config = pydantic.ConfigDict(frozen=True)

    fillblank_ignore_case: bool = False
    # Strip leading/trailing whitespace and collapse inner runs to one space
    fillblank_trim_whitespace: bool = False
