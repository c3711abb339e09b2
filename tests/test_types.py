"""Tests for the sensitive word record."""

import time
import uuid

import pytest

from sensitive_words import SensitiveWord, ValidationError, OperationStat


def test_create_normalizes():
    word = SensitiveWord.create("  select  ")
    assert word.word == "SELECT"
    assert word.is_active
    assert isinstance(word.id, uuid.UUID)
    assert word.created_at == word.updated_at


def test_create_generates_distinct_ids():
    assert SensitiveWord.create("a").id != SensitiveWord.create("a").id


@pytest.mark.parametrize("text", [None, "", "   "])
def test_create_rejects_blank(text):
    with pytest.raises(ValidationError):
        SensitiveWord.create(text)


@pytest.mark.parametrize("text", ["*", "***", " ** "])
def test_create_rejects_mask_only(text):
    with pytest.raises(ValidationError):
        SensitiveWord.create(text)


def test_create_accepts_word_containing_mask_char():
    assert SensitiveWord.create("a*").word == "A*"


def test_create_rejects_oversized():
    with pytest.raises(ValidationError):
        SensitiveWord.create("x" * 101)
    assert SensitiveWord.create("x" * 100).word == "X" * 100


def test_update_word_refreshes_timestamp():
    word = SensitiveWord.create("select")
    before = word.updated_at
    time.sleep(0.01)
    word.update_word(" drop ")
    assert word.word == "DROP"
    assert word.updated_at > before
    assert word.created_at == before


@pytest.mark.parametrize("text", [None, "", "   "])
def test_update_word_rejects_blank(text):
    word = SensitiveWord.create("select")
    with pytest.raises(ValidationError):
        word.update_word(text)
    assert word.word == "SELECT"


def test_activate_and_deactivate():
    word = SensitiveWord.create("select")
    word.deactivate()
    assert not word.is_active
    before = word.updated_at
    time.sleep(0.01)
    word.activate()
    assert word.is_active
    assert word.updated_at > before


def test_copy_is_independent():
    word = SensitiveWord.create("select")
    clone = word.copy()
    clone.deactivate()
    assert word.is_active


def test_to_dict():
    word = SensitiveWord.create("drop")
    data = word.to_dict()
    assert data["id"] == str(word.id)
    assert data["word"] == "DROP"
    assert data["isActive"] is True
    assert data["createdAt"] == word.created_at.isoformat()


def test_operation_stat_to_dict():
    stat = OperationStat("CREATE", "SensitiveWord", 3)
    data = stat.to_dict()
    assert data["operationType"] == "CREATE"
    assert data["resourceType"] == "SensitiveWord"
    assert data["count"] == 3
