"""Tests for the corpus indexing pass."""
from __future__ import annotations

import pytest

from clozeprep.cloze_acquire.config import AcquisitionConfig
from clozeprep.cloze_acquire.core import (
    build_range_index,
    dedup_ranges,
    tier_range_counts,
)
from clozeprep.cloze_acquire.encoding import ByteRange, Snippet
from clozeprep.cloze_acquire.lexicon import build_lexicon
from clozeprep.cloze_acquire.reader import (
    discover_corpus_files,
    parse_corpus_line,
    read_corpus_records,
)
from clozeprep.cloze_acquire.store import RecordReader
from clozeprep.cloze_acquire.tokenizer import classify

from conftest import write_corpus


def read_all(result):
    """handle -> list of snippets, resolved through the store."""
    with RecordReader(result.store_path) as reader:
        return {
            handle: [reader.read(r) for r in ranges]
            for handle, ranges in result.range_index.items()
        }


# ═══════════════════════════════════════════════════════════════════════════════
# READER
# ═══════════════════════════════════════════════════════════════════════════════

def test_parse_corpus_line():
    rec = parse_corpus_line('{"text": "它很可爱。", "score": 1, "id": 7}')
    assert rec.text == "它很可爱。"
    assert rec.score == 1.0


@pytest.mark.parametrize("line", [
    "not json",
    "",
    "[1, 2]",
    '{"text": "x"}',
    '{"score": 0.9}',
    '{"text": 3, "score": 0.9}',
    '{"text": "x", "score": "0.9"}',
    '{"text": "x", "score": NaN}',
    '{"text": "x", "score": Infinity}',
    '{"text": "x", "score": -Infinity}',
])
def test_parse_corpus_line_rejects_malformed(line):
    with pytest.raises(ValueError):
        parse_corpus_line(line)


def test_read_corpus_records_caps_lines(tmp_path):
    path = tmp_path / "part-0000.jsonl"
    path.write_text(
        '{"text": "a", "score": 0.9}\n'
        '{"text": "b", "score": 0.1}\n'
        "this line is never read\n",
        encoding="utf-8",
    )
    assert [r.text for r in read_corpus_records(path, max_records=2)] == ["a", "b"]
    with pytest.raises(ValueError, match=r"part-0000.jsonl:3"):
        list(read_corpus_records(path, max_records=3))


def test_discover_corpus_files(tmp_path):
    for name in ("part-0001.jsonl", "part-0000.jsonl", "notes.txt"):
        (tmp_path / name).write_text("", encoding="utf-8")
    assert [p.name for p in discover_corpus_files(tmp_path)] == [
        "part-0000.jsonl",
        "part-0001.jsonl",
    ]
    with pytest.raises(ValueError):
        discover_corpus_files(tmp_path / "missing")
    with pytest.raises(ValueError):
        discover_corpus_files(tmp_path, pattern="*.csv")


# ═══════════════════════════════════════════════════════════════════════════════
# DEDUP
# ═══════════════════════════════════════════════════════════════════════════════

def test_dedup_ranges_is_idempotent():
    a, b, c = ByteRange(0, 5), ByteRange(5, 9), ByteRange(9, 20)
    ranges = [a, a, b, c, c, c]
    once = dedup_ranges(ranges)
    assert once == [a, b, c]
    assert dedup_ranges(once) == once
    assert dedup_ranges([]) == []


# ═══════════════════════════════════════════════════════════════════════════════
# INDEXING PASS
# ═══════════════════════════════════════════════════════════════════════════════

def test_snippets_carry_neighbors(tmp_path, english_lexicon, split_segmenter, corpus_file):
    corpus = corpus_file([
        {"text": "the cat sleeps。zzz qqq。the cat sleeps quietly", "score": 0.9},
    ])
    result = build_range_index(
        english_lexicon, [corpus], tmp_path / "s.db", segmenter=split_segmenter
    )
    snippets = read_all(result)

    sleeps = english_lexicon.lookup("sleeps", 2)
    quietly = english_lexicon.lookup("quietly", 3)
    assert snippets[sleeps] == [Snippet("the cat sleeps", prefix=None, suffix="zzz qqq")]
    assert snippets[quietly] == [Snippet("the cat sleeps quietly", prefix="zzz qqq", suffix=None)]
    # Lower-tier words in those sentences get no credit
    assert snippets[english_lexicon.lookup("the", 1)] == []
    assert snippets[english_lexicon.lookup("cat", 1)] == []
    assert result.stats.sentences_rejected == 1
    assert result.stats.snippets_written == 2


def test_neighbors_stay_within_one_record(tmp_path, english_lexicon, split_segmenter, corpus_file):
    corpus = corpus_file([
        {"text": "zzz qqq", "score": 0.9},
        {"text": "the cat sleeps", "score": 0.9},
        {"text": "zzz qqq", "score": 0.9},
    ])
    result = build_range_index(
        english_lexicon, [corpus], tmp_path / "s.db", segmenter=split_segmenter
    )
    snippets = read_all(result)
    assert snippets[english_lexicon.lookup("sleeps", 2)] == [Snippet("the cat sleeps")]


@pytest.mark.parametrize("score, kept", [(0.8, True), (0.7999, False), (1.5, True), (-1.0, False)])
def test_score_threshold(tmp_path, english_lexicon, split_segmenter, corpus_file, score, kept):
    corpus = corpus_file([{"text": "the cat sleeps", "score": score}])
    result = build_range_index(
        english_lexicon, [corpus], tmp_path / "s.db", segmenter=split_segmenter
    )
    ranges = result.range_index[english_lexicon.lookup("sleeps", 2)]
    assert len(ranges) == (1 if kept else 0)
    assert result.stats.records_skipped_score == (0 if kept else 1)


@pytest.mark.parametrize("sentence, kept", [("aaaaa bbbb", True), ("aaaa bbbb", False)])
def test_length_threshold(tmp_path, split_segmenter, corpus_file, sentence, kept):
    lexicon = build_lexicon([("aaaaa", 1), ("aaaa", 1), ("bbbb", 1)])
    corpus = corpus_file([{"text": sentence, "score": 0.9}])
    result = build_range_index(lexicon, [corpus], tmp_path / "s.db", segmenter=split_segmenter)

    assert len(result.range_index[lexicon.lookup("bbbb", 1)]) == (1 if kept else 0)
    assert result.stats.sentences_too_short == (0 if kept else 1)


def test_short_sentence_still_serves_as_context(tmp_path, english_lexicon, split_segmenter, corpus_file):
    corpus = corpus_file([{"text": "the cat。the cat sleeps quietly", "score": 0.9}])
    result = build_range_index(
        english_lexicon, [corpus], tmp_path / "s.db", segmenter=split_segmenter
    )
    snippets = read_all(result)
    assert snippets[english_lexicon.lookup("quietly", 3)] == [
        Snippet("the cat sleeps quietly", prefix="the cat", suffix=None)
    ]


def test_repeated_word_indexed_once(tmp_path, english_lexicon, split_segmenter, corpus_file):
    corpus = corpus_file([{"text": "the cat the cat the cat", "score": 0.9}])
    result = build_range_index(
        english_lexicon, [corpus], tmp_path / "s.db", segmenter=split_segmenter
    )
    the = english_lexicon.lookup("the", 1)
    cat = english_lexicon.lookup("cat", 1)
    assert len(result.range_index[the]) == 1
    assert result.range_index[the] == result.range_index[cat]


def test_text_is_escaped_before_storage(tmp_path, split_segmenter, corpus_file):
    lexicon = build_lexicon([("&lt;b&gt;", 1), ("bold", 1), ("word", 1)])
    corpus = corpus_file([{"text": "<b> bold word", "score": 0.9}])
    result = build_range_index(lexicon, [corpus], tmp_path / "s.db", segmenter=split_segmenter)
    snippets = read_all(result)
    assert snippets[0] == [Snippet("&lt;b&gt; bold word")]


def test_range_integrity(tmp_path, english_lexicon, split_segmenter, corpus_file):
    first = corpus_file([
        {"text": "the cat sleeps quietly。the cat sleeps。zzz", "score": 0.95},
        {"text": "the cat the cat sleeps！the the the cat？", "score": 0.85},
    ])
    second = corpus_file(
        [{"text": "quietly the cat sleeps。the cat sleeps quietly quietly", "score": 0.8}],
        name="part-0001.jsonl",
    )
    result = build_range_index(
        english_lexicon, [first, second], tmp_path / "s.db", segmenter=split_segmenter
    )

    total = 0
    with RecordReader(result.store_path) as reader:
        for handle, ranges in result.range_index.items():
            assert ranges == sorted(set(ranges))
            for r in ranges:
                snippet = reader.read(r)
                credited = classify(snippet.sentence, english_lexicon, split_segmenter)
                assert handle in credited
                assert english_lexicon.entry(handle).tier == max(
                    english_lexicon.entry(h).tier for h in credited
                )
                total += 1
    assert total > 0


def test_tier_range_counts(tmp_path, english_lexicon, split_segmenter, corpus_file):
    corpus = corpus_file([
        {"text": "the cat sleeps。the cat sleeps quietly。the cat the cat", "score": 0.9},
    ])
    result = build_range_index(
        english_lexicon, [corpus], tmp_path / "s.db", segmenter=split_segmenter
    )
    counts = tier_range_counts(english_lexicon, result.range_index)
    # "the cat the cat" credits both tier-1 entries
    assert counts == {1: 2, 2: 1, 3: 1, 4: 0, 5: 0, 6: 0, 7: 0}


def test_max_records_per_source(tmp_path, english_lexicon, split_segmenter, corpus_file):
    corpus = corpus_file([{"text": "the cat sleeps", "score": 0.9}] * 5)
    result = build_range_index(
        english_lexicon,
        [corpus],
        tmp_path / "s.db",
        segmenter=split_segmenter,
        config=AcquisitionConfig(max_records=3),
    )
    assert result.stats.records_read == 3
    assert len(result.range_index[english_lexicon.lookup("sleeps", 2)]) == 3


def test_malformed_record_aborts_run(tmp_path, english_lexicon, split_segmenter):
    path = tmp_path / "part-0000.jsonl"
    path.write_text('{"text": "the cat sleeps", "score": 0.9}\n{broken\n', encoding="utf-8")
    with pytest.raises(ValueError, match="Malformed corpus record"):
        build_range_index(english_lexicon, [path], tmp_path / "s.db", segmenter=split_segmenter)


def test_nan_score_aborts_run(tmp_path, english_lexicon, split_segmenter):
    path = tmp_path / "part-0000.jsonl"
    path.write_text('{"text": "the cat sleeps", "score": NaN}\n', encoding="utf-8")
    with pytest.raises(ValueError, match="Malformed corpus record"):
        build_range_index(english_lexicon, [path], tmp_path / "s.db", segmenter=split_segmenter)


def test_missing_corpus_file_aborts_run(tmp_path, english_lexicon, split_segmenter):
    with pytest.raises(FileNotFoundError):
        build_range_index(
            english_lexicon, [tmp_path / "nope.jsonl"], tmp_path / "s.db", segmenter=split_segmenter
        )


def test_strict_match_end_to_end_with_jieba(tmp_path):
    lexicon = build_lexicon([("猫", 1)])
    corpus = write_corpus(
        tmp_path / "part-0000.jsonl",
        [{"text": "我喜欢猫。它很可爱。", "score": 0.9}],
    )
    result = build_range_index(lexicon, [corpus], tmp_path / "s.db")

    assert result.range_index == {0: []}
    assert result.stats.snippets_written == 0
    assert result.stats.sentences_seen == 2
    assert (tmp_path / "s.db").read_bytes() == b""
