"""Tests for the sanitizer — matching, masking, ordering and the word-source binding."""

import pytest

from sensitive_words import sanitize, SanitizationService, SanitizeResult, SensitiveWord


# ── Degenerate inputs ────────────────────────────────────────────────

def test_empty_message_and_no_words():
    assert sanitize("", []) == SanitizeResult("", "", 0)


def test_none_message_is_empty_result():
    assert sanitize(None, ["SELECT"]) == SanitizeResult("", "", 0)


def test_empty_message_with_words():
    assert sanitize("", ["SELECT"]) == SanitizeResult("", "", 0)


def test_no_words_returns_message_unchanged():
    result = sanitize("SELECT * FROM table", [])
    assert result == SanitizeResult("SELECT * FROM table", "SELECT * FROM table", 0)


def test_none_words_returns_message_unchanged():
    result = sanitize("SELECT * FROM table", None)
    assert result.sanitized == "SELECT * FROM table"
    assert result.replaced == 0


def test_blank_candidates_are_dropped():
    result = sanitize("DROP it", ["", None, "DROP"])
    assert result.sanitized == "**** it"
    assert result.replaced == 1


def test_only_blank_candidates_leave_message_unchanged():
    result = sanitize("DROP it", ["", None])
    assert result == SanitizeResult("DROP it", "DROP it", 0)


def test_mask_only_candidates_are_dropped():
    assert sanitize("a*b", ["*"]) == SanitizeResult("a*b", "a*b", 0)
    assert sanitize("a**b", ["**", "*"]).replaced == 0


# ── Matching ─────────────────────────────────────────────────────────

def test_single_word_replaced():
    result = sanitize("SELECT * FROM table", ["SELECT", "DROP"])
    assert result.original == "SELECT * FROM table"
    assert result.sanitized == "****** * FROM table"
    assert result.replaced == 1


def test_multiple_words_replaced():
    result = sanitize("SELECT * FROM users DROP table", ["SELECT", "FROM", "DROP"])
    assert result.sanitized == "****** * **** users **** table"
    assert result.replaced == 3


def test_case_insensitive():
    result = sanitize("select SELECT SeLeCt", ["SELECT"])
    assert result.original == "select SELECT SeLeCt"
    assert result.sanitized == "****** ****** ******"
    assert result.replaced == 3


def test_lowercase_candidate_matches_uppercase_text():
    result = sanitize("DROP TABLE users", ["drop"])
    assert result.sanitized == "**** TABLE users"


def test_partial_tokens_not_matched():
    result = sanitize("SELECTED SELECTING", ["SELECT"])
    assert result == SanitizeResult("SELECTED SELECTING", "SELECTED SELECTING", 0)


def test_word_inside_identifier_not_matched():
    result = sanitize("user_select select_all", ["SELECT"])
    assert result.replaced == 0


def test_punctuation_is_a_boundary():
    result = sanitize("(SELECT),DROP;", ["SELECT", "DROP"])
    assert result.sanitized == "(******),****;"
    assert result.replaced == 2


def test_unmatched_words():
    result = sanitize("Hello World", ["SELECT", "DROP"])
    assert result == SanitizeResult("Hello World", "Hello World", 0)


def test_regex_metacharacters_are_literal():
    result = sanitize("AXB A.B", ["A.B"])
    assert result.sanitized == "AXB ***"
    assert result.replaced == 1


def test_operator_phrase():
    result = sanitize("WHERE 1=1 OR 1=2", ["1=1"])
    assert result.sanitized == "WHERE *** OR 1=2"


def test_non_ascii_word():
    result = sanitize("un café noir", ["CAFÉ"])
    assert result.sanitized == "un **** noir"
    assert result.replaced == 1


# ── Phrases and ordering ─────────────────────────────────────────────

def test_multi_word_phrase():
    result = sanitize("SELECT * FROM users", ["SELECT * FROM"])
    assert result.sanitized == "************* users"
    assert result.replaced == 1


def test_longer_phrase_wins_over_contained_word():
    result = sanitize("SELECT * FROM users", ["SELECT", "SELECT * FROM"])
    assert result.sanitized == "************* users"
    assert result.replaced == 1


def test_phrase_internal_spacing_is_literal():
    result = sanitize("DROP  TABLE x", ["DROP TABLE"])
    assert result.replaced == 0


def test_contained_word_still_masked_outside_phrase():
    result = sanitize("SELECT * FROM a; SELECT b", ["SELECT * FROM", "SELECT"])
    assert result.sanitized == "************* a; ****** b"
    assert result.replaced == 2


def test_mixed_lengths():
    result = sanitize("A SELECT TRANSACTION", ["A", "SELECT", "TRANSACTION"])
    assert result.sanitized == "* ****** ***********"
    assert result.replaced == 3


def test_equal_length_overlap_uses_input_order():
    assert sanitize("AB CD EF", ["AB CD", "CD EF"]).sanitized == "***** EF"
    assert sanitize("AB CD EF", ["CD EF", "AB CD"]).sanitized == "AB *****"


def test_duplicate_candidates_counted_once():
    result = sanitize("SELECT it", ["SELECT", "SELECT", "select"])
    assert result.sanitized == "****** it"
    assert result.replaced == 1


# ── Properties ───────────────────────────────────────────────────────

@pytest.mark.parametrize("message,words", [
    ("SELECT * FROM users WHERE 1=1", ["SELECT * FROM", "SELECT", "WHERE", "1=1"]),
    ("drop table; DROP TABLE; Drop Table", ["DROP TABLE", "TABLE"]),
    ("nothing to see", ["SELECT"]),
    ("ÉTÉ été", ["ÉTÉ"]),
])
def test_length_preserved(message, words):
    result = sanitize(message, words)
    assert len(result.sanitized) == len(result.original) == len(message)


@pytest.mark.parametrize("message,words", [
    ("SELECT * FROM users", ["SELECT * FROM", "SELECT", "FROM"]),
    ("a A a", ["A"]),
    ("INSERT INTO x VALUES (1)", ["INSERT INTO", "VALUES", "INTO"]),
    ("a*b", ["*"]),
    ("a**b c", ["**", "*", "C"]),
])
def test_sanitized_output_is_fixed_point(message, words):
    once = sanitize(message, words)
    twice = sanitize(once.sanitized, words)
    assert twice.sanitized == once.sanitized
    assert twice.replaced == 0


def test_words_list_not_mutated():
    words = ["A", "SELECT * FROM", "", "SELECT"]
    sanitize("SELECT * FROM A", words)
    assert words == ["A", "SELECT * FROM", "", "SELECT"]


def test_result_is_immutable():
    result = sanitize("SELECT", ["SELECT"])
    with pytest.raises(AttributeError):
        result.replaced = 5


def test_result_to_dict():
    assert sanitize("DROP x", ["DROP"]).to_dict() == {
        "originalMessage": "DROP x",
        "sanitizedMessage": "**** x",
        "wordsReplaced": 1,
    }


# ── SanitizationService ──────────────────────────────────────────────

class _Source:
    def __init__(self, *words):
        self.words = [SensitiveWord.create(w) for w in words]
        self.calls = 0

    def get_active_words(self):
        self.calls += 1
        return self.words


class _BrokenSource:
    def get_active_words(self):
        raise RuntimeError("database unavailable")


def test_service_uses_source_words():
    source = _Source("select", "drop")
    result = SanitizationService(source).sanitize_message("SELECT * FROM table")
    assert result.sanitized == "****** * FROM table"
    assert result.replaced == 1
    assert source.calls == 1


def test_service_empty_message_skips_source():
    source = _Source("select")
    result = SanitizationService(source).sanitize_message(None)
    assert result == SanitizeResult("", "", 0)
    assert source.calls == 0


def test_service_propagates_source_errors():
    with pytest.raises(RuntimeError, match="database unavailable"):
        SanitizationService(_BrokenSource()).sanitize_message("SELECT")
