"""Tests for the log sanitizer."""

import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from utils.log_sanitizer import sanitize_for_log, sanitize_log


def test_email_redacted():
    text = "SMTP 550 for ada@example.com: mailbox unavailable"
    assert sanitize_log(text) == "SMTP 550 for [EMAIL]: mailbox unavailable"


def test_bearer_token_redacted():
    assert "abc123" not in sanitize_log("Authorization: Bearer abc123.def")


def test_password_pair_redacted():
    assert "hunter22" not in sanitize_log("login failed password=hunter22")


def test_plain_text_untouched():
    assert sanitize_log("Customer 7 not found for appointment 100") == \
        "Customer 7 not found for appointment 100"


def test_exception_truncated():
    result = sanitize_for_log(RuntimeError("word " * 100), max_length=50)
    assert result.startswith("word word")
    assert result.endswith("[500 chars total]")


def test_none():
    assert sanitize_for_log(None) == "<None>"
