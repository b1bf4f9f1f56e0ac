#!/usr/bin/env python3
"""Word list generation for import throughput checks.

Writes a synthetic vocabulary file (.xlsx, .csv or .json, chosen by the
output suffix) with English or Chinese headers. A share of rows can be made
duplicates (case-flipped) or invalid (blank word) to exercise the pipeline's
dedupe / validation paths.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

LEVELS = ["专升本", "CET4", "CET6", "IELTS"]
PARTS_OF_SPEECH = ["n.", "v.", "adj.", "adv."]

ENGLISH_HEADERS = ["word", "meaning", "phonetic", "partOfSpeech", "level", "example", "example_cn"]
CHINESE_HEADERS = ["单词", "释义", "音标", "词性", "等级", "例句", "例句翻译"]


def generate_words(
    rows: int, duplicate_ratio: float = 0.0, invalid_ratio: float = 0.0, seed: int = 42
) -> list[list[Any]]:
    """Generate word rows in ENGLISH_HEADERS column order."""
    rng = np.random.default_rng(seed)
    data: list[list[Any]] = []
    for i in range(rows):
        word = f"word{i:06d}"
        roll = rng.random()
        if data and roll < duplicate_ratio:
            word = str(data[int(rng.integers(0, len(data)))][0] or word).upper()
        elif roll < duplicate_ratio + invalid_ratio:
            word = ""
        has_example = rng.random() < 0.5
        data.append([
            word,
            f"释义{i}",
            f"/w{i}/",
            PARTS_OF_SPEECH[i % len(PARTS_OF_SPEECH)],
            LEVELS[int(rng.integers(0, len(LEVELS)))],
            f"This is example {i}." if has_example else "",
            f"这是例句{i}。" if has_example else "",
        ])
    return data


def write_dataset(output: Path, data: list[list[Any]], chinese_headers: bool = False) -> None:
    headers = CHINESE_HEADERS if chinese_headers else ENGLISH_HEADERS
    df = pd.DataFrame(data, columns=headers)
    output.parent.mkdir(parents=True, exist_ok=True)
    suffix = output.suffix.lower()
    if suffix == ".xlsx":
        df.to_excel(output, sheet_name="Words", index=False, engine="openpyxl")
    elif suffix == ".csv":
        df.to_csv(output, index=False, encoding="utf-8")
    elif suffix == ".json":
        df.to_json(output, orient="records", force_ascii=False)
    else:
        raise ValueError(f"unsupported output type: {suffix}")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate synthetic vocabulary files for import testing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 3000 words, the typical bulk upload size
  %(prog)s words.xlsx --rows 3000

  # Chinese headers with 10%% duplicates and 5%% invalid rows
  %(prog)s words.json --rows 5000 --chinese --duplicates 0.1 --invalid 0.05
        """,
    )
    parser.add_argument("output", type=Path, help="Output file (.xlsx, .csv or .json)")
    parser.add_argument("--rows", type=int, default=3000, help="Number of word rows (default: 3000)")
    parser.add_argument("--duplicates", type=float, default=0.0, help="Share of duplicate rows (0-1)")
    parser.add_argument("--invalid", type=float, default=0.0, help="Share of rows with a blank word (0-1)")
    parser.add_argument("--chinese", action="store_true", help="Use Chinese column headers")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1
    if not 0 <= args.duplicates + args.invalid <= 1:
        print("Error: --duplicates + --invalid must be within 0..1", file=sys.stderr)
        return 1

    try:
        data = generate_words(args.rows, args.duplicates, args.invalid, args.seed)
        write_dataset(args.output, data, chinese_headers=args.chinese)
    except Exception as e:
        print(f"Error generating dataset: {e}", file=sys.stderr)
        return 1
    print(f"Created {args.output} rows={args.rows} headers={'zh' if args.chinese else 'en'}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
