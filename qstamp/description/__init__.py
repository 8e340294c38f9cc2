from .parser import (
    NumberedItem,
    build_question,
    filter_sequence,
    find_numbered_items,
    parse_description,
    split_paragraphs,
)

__all__ = [
    "NumberedItem",
    "build_question",
    "filter_sequence",
    "find_numbered_items",
    "parse_description",
    "split_paragraphs",
]
