"""
Coercion of raw (stored or submitted) answers into typed answer variants.

Each question type has exactly one coercer. A coercer returns None when the raw
value does not have a usable shape for that type; the scorer treats such an
answer as wrong.
"""

import logging
import typing

from lms_engine.models.answer_models import (
    AnswerValue,
    CategoryMapAnswer,
    ChoiceSetAnswer,
    IndexAnswer,
    OrderedAnswer,
    RegionAnswer,
    RegionSequenceAnswer,
    RegionSetAnswer,
    ScoringOptions,
    TextAnswer,
)
from lms_engine.models.quiz_models import QuestionModel

_LOGGER = logging.getLogger(__name__)
_LOGGER.setLevel(logging.INFO)

Coercer = typing.Callable[[QuestionModel, typing.Any, ScoringOptions], typing.Optional[AnswerValue]]


def _as_token(value: typing.Any) -> typing.Optional[str]:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, str):
        return value.strip()
    return None


def _split_text(value: str) -> list[str]:
    # Authoring forms separate list entries by newlines, or by commas on a single line
    separator = "\n" if "\n" in value else ","
    return [part.strip() for part in value.split(separator) if part.strip()]


def _as_token_list(value: typing.Any) -> typing.Optional[list[str]]:
    if isinstance(value, str):
        return _split_text(value)
    if isinstance(value, (list, tuple)):
        tokens = [_as_token(item) for item in value]
        if any(token is None for token in tokens):
            return None
        return [typing.cast(str, token) for token in tokens]
    single = _as_token(value)
    return [single] if single else None


def _option_token(question: QuestionModel, token: str) -> str:
    """Maps an option's text to its index so choices can be submitted either way."""
    if token.lstrip("-").isdigit():
        return str(int(token))
    if question.options and token in question.options:
        return str(question.options.index(token))
    return token


def _coerce_index(question: QuestionModel, raw: typing.Any, options: ScoringOptions) -> typing.Optional[AnswerValue]:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return IndexAnswer(index=raw)
    token = _as_token(raw)
    if not token:
        return None
    token = _option_token(question, token)
    try:
        return IndexAnswer(index=int(token))
    except ValueError:
        return None


def _coerce_choice_set(
    question: QuestionModel, raw: typing.Any, options: ScoringOptions
) -> typing.Optional[AnswerValue]:
    tokens = _as_token_list(raw)
    if tokens is None:
        return None
    return ChoiceSetAnswer(choices=frozenset(_option_token(question, token) for token in tokens if token))


def _coerce_true_false(
    question: QuestionModel, raw: typing.Any, options: ScoringOptions
) -> typing.Optional[AnswerValue]:
    if isinstance(raw, bool):
        return TextAnswer(text="true" if raw else "false")
    if isinstance(raw, str):
        return TextAnswer(text=raw)
    return None


def _coerce_fill_blank(
    question: QuestionModel, raw: typing.Any, options: ScoringOptions
) -> typing.Optional[AnswerValue]:
    if not isinstance(raw, str):
        return None
    text = raw
    if options.fillblank_trim_whitespace:
        text = " ".join(text.split())
    if options.fillblank_ignore_case:
        text = text.casefold()
    return TextAnswer(text=text)


def _coerce_ordered(question: QuestionModel, raw: typing.Any, options: ScoringOptions) -> typing.Optional[AnswerValue]:
    """Items are compared verbatim, so every item must already be a string."""
    if isinstance(raw, str):
        # Answers authored as text hold one item per line
        raw = raw.split("\n")
    if not isinstance(raw, (list, tuple)) or not all(isinstance(item, str) for item in raw):
        return None
    return OrderedAnswer(items=tuple(raw))


def _coerce_category_map(
    question: QuestionModel, raw: typing.Any, options: ScoringOptions
) -> typing.Optional[AnswerValue]:
    pairs: list[tuple[typing.Any, typing.Any]] = []
    if isinstance(raw, dict):
        for key, value in raw.items():
            if isinstance(value, (list, tuple)):
                # category -> [items]
                pairs.extend((item, key) for item in value)
            else:
                # item -> category
                pairs.append((key, value))
    else:
        entries = _split_text(raw) if isinstance(raw, str) else raw
        if not isinstance(entries, (list, tuple)):
            return None
        for entry in entries:
            if isinstance(entry, str) and ":" in entry:
                item, category = entry.split(":", 1)
                pairs.append((item, category))
            elif isinstance(entry, (list, tuple)) and len(entry) == 2:
                pairs.append((entry[0], entry[1]))
            else:
                return None

    assignments: dict[str, str] = {}
    for item, category in pairs:
        item_token = _as_token(item)
        category_token = _as_token(category)
        if not item_token or category_token is None:
            return None
        if item_token in assignments and assignments[item_token] != category_token:
            # One item placed in two categories can never be fully correct
            return None
        assignments[item_token] = category_token
    return CategoryMapAnswer(assignments=assignments)


def _resolve_region(question: QuestionModel, value: typing.Any) -> typing.Optional[str]:
    """A region is referenced by id, or by a point {"x": .., "y": ..} inside one of the question's hotspots."""
    if isinstance(value, dict):
        try:
            point_x = float(value["x"])
            point_y = float(value["y"])
        except (KeyError, TypeError, ValueError):
            return None
        for region in question.hotspots or []:
            if region.contains(point_x, point_y):
                return region.id
        return None
    token = _as_token(value)
    return token or None


def _resolve_regions(question: QuestionModel, raw: typing.Any) -> typing.Optional[list[str]]:
    values = _split_text(raw) if isinstance(raw, str) else raw
    if isinstance(values, dict):
        values = [values]
    if not isinstance(values, (list, tuple)):
        return None
    regions = [_resolve_region(question, value) for value in values]
    if any(region is None for region in regions):
        return None
    return [typing.cast(str, region) for region in regions]


def _coerce_region(question: QuestionModel, raw: typing.Any, options: ScoringOptions) -> typing.Optional[AnswerValue]:
    if isinstance(raw, (list, tuple)):
        if len(raw) != 1:
            return None
        raw = raw[0]
    region = _resolve_region(question, raw)
    return RegionAnswer(region=region) if region else None


def _coerce_region_set(
    question: QuestionModel, raw: typing.Any, options: ScoringOptions
) -> typing.Optional[AnswerValue]:
    regions = _resolve_regions(question, raw)
    return RegionSetAnswer(regions=frozenset(regions)) if regions is not None else None


def _coerce_region_sequence(
    question: QuestionModel, raw: typing.Any, options: ScoringOptions
) -> typing.Optional[AnswerValue]:
    regions = _resolve_regions(question, raw)
    return RegionSequenceAnswer(regions=tuple(regions)) if regions is not None else None


COERCERS: dict[str, Coercer] = {
    "single": _coerce_index,
    "multiple": _coerce_choice_set,
    "truefalse": _coerce_true_false,
    "fillblank": _coerce_fill_blank,
    "sequence": _coerce_ordered,
    "dragdrop": _coerce_ordered,
    "dragdrop-categories": _coerce_category_map,
    "hotspot": _coerce_region,
    "hotspot-multiple": _coerce_region_set,
    "hotspot-sequence": _coerce_region_sequence,
}


def coerce_answer(
    question: QuestionModel,
    raw: typing.Any,
    options: typing.Optional[ScoringOptions] = None,
) -> typing.Optional[AnswerValue]:
    if raw is None:
        return None
    coercer = COERCERS.get(question.type)
    if coercer is None:
        _LOGGER.error(f"No answer coercer for question type {question.type} (question {question.id})")
        return None
    return coercer(question, raw, options or ScoringOptions())
