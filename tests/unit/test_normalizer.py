from __future__ import annotations

from vocab_import.models.row_data import RawRow
from vocab_import.services.normalizer import FIELD_ALIASES, normalize


def test_english_headers():
    raw = RawRow(1, {"word": "apple", "meaning": "苹果", "partOfSpeech": "n.", "example": "An apple a day."})
    assert normalize(raw) == {
        "word": "apple",
        "meaning": "苹果",
        "part_of_speech": "n.",
        "example_en": "An apple a day.",
    }


def test_chinese_alias_equivalence():
    english = RawRow(1, {"word": "apple", "meaning": "苹果", "level": "CET4"})
    chinese = RawRow(1, {"单词": "apple", "释义": "苹果", "等级": "CET4"})
    assert normalize(chinese) == normalize(english)


def test_english_label_wins_over_alias():
    raw = RawRow(1, {"单词": "苹果词", "word": "apple", "meaning": "苹果"})
    assert normalize(raw)["word"] == "apple"


def test_empty_english_value_falls_back_to_alias():
    raw = RawRow(1, {"word": "  ", "单词": "apple", "meaning": "苹果"})
    assert normalize(raw)["word"] == "apple"


def test_labels_are_trimmed_and_case_insensitive():
    raw = RawRow(1, {" Word ": "apple", "MEANING": "苹果", "PartOfSpeech": "n."})
    assert normalize(raw) == {"word": "apple", "meaning": "苹果", "part_of_speech": "n."}


def test_values_trimmed_and_empty_omitted():
    raw = RawRow(1, {"word": "  apple ", "meaning": "", "phonetic": None})
    assert normalize(raw) == {"word": "apple"}


def test_no_coercion_of_non_strings():
    raw = RawRow(1, {"word": "apple", "meaning": "苹果", "level": 4})
    assert normalize(raw)["level"] == 4


def test_unknown_columns_dropped():
    raw = RawRow(1, {"word": "apple", "meaning": "苹果", "tags": "fruit", "备注": "x"})
    assert set(normalize(raw)) == {"word", "meaning"}


def test_example_translation_aliases():
    raw = RawRow(1, {"例句": "I like apples.", "例句翻译": "我喜欢苹果。"})
    assert normalize(raw) == {"example_en": "I like apples.", "example_cn": "我喜欢苹果。"}


def test_alias_table_covers_canonical_fields():
    assert set(FIELD_ALIASES) == {
        "word", "meaning", "phonetic", "part_of_speech", "level", "example_en", "example_cn",
    }
