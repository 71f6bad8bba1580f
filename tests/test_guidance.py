# tests/test_guidance.py
import pytest

from sqlrunner.guidance import (
    AUTHENTICATION_TIPS,
    FILE_NOT_FOUND_TIPS,
    INSTANCE_TIPS,
    RULES,
    TIMEOUT_TIPS,
    guidance_for,
    match_rule,
)


@pytest.mark.parametrize("message, expected", [
    ("unable to open database file", FILE_NOT_FOUND_TIPS),
    ("Could not find file 'C:\\x.db'", FILE_NOT_FOUND_TIPS),
    ("[Errno 2] No such file or directory", FILE_NOT_FOUND_TIPS),
    ("Login failed for user 'sa'. (18456)", AUTHENTICATION_TIPS),
    ("Authentication failed", AUTHENTICATION_TIPS),
    ("Cannot open database \"Portal\" requested by the login", AUTHENTICATION_TIPS),
    ("Instance failure.", INSTANCE_TIPS),
    ("The server was not found or was not accessible", INSTANCE_TIPS),
    ("[08001] Named Pipes Provider: Could not open a connection to SQL Server [2]", INSTANCE_TIPS),
    ("Cannot connect to server HOST\\SQL2022", INSTANCE_TIPS),
    ("[HYT00] Login timeout expired", TIMEOUT_TIPS),
    ("Execution Timeout Expired", TIMEOUT_TIPS),
])
def test_known_errors_get_guidance(message, expected):
    assert guidance_for(message) == expected


@pytest.mark.parametrize("message", [
    "near \"SELEC\": syntax error",
    "no such table: users",
    "Table not found",  # mentions "not found" but no server
    "",
    None,
])
def test_other_errors_get_no_guidance(message):
    assert guidance_for(message) is None


def test_matching_ignores_case():
    assert guidance_for("UNABLE TO OPEN DATABASE FILE") == FILE_NOT_FOUND_TIPS


def test_first_matching_rule_wins():
    # Both the file rule and the timeout rule match; file comes first
    rule = match_rule("unable to open database file: timeout")
    assert rule.name == "file_not_found"


def test_rule_names_are_unique():
    names = [rule.name for rule in RULES]
    assert len(names) == len(set(names))
