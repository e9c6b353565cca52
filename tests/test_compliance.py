"""
Unit Tests for PHI Heuristics and Query Classification
"""

import pytest

from medassist.compliance import anonymize_text, classify_query_type, validate_message


class TestAnonymizeText:
    """Test placeholder substitution."""

    def test_ssn_before_phone(self):
        assert anonymize_text("SSN 123-45-6789") == "SSN [SSN]"

    def test_phone(self):
        assert anonymize_text("call 555-123-4567 today") == "call [PHONE] today"

    def test_email(self):
        assert anonymize_text("write to jane.doe@example.com") == "write to [EMAIL]"

    def test_name(self):
        assert anonymize_text("my son John Smith has a cough") == "my son [NAME] has a cough"

    def test_date(self):
        assert anonymize_text("born 01/02/2020") == "born [DATE]"

    def test_mrn(self):
        assert anonymize_text("chart MRN: 12345") == "chart [MRN]"

    def test_long_id(self):
        assert anonymize_text("account 12345678") == "account [ID]"

    def test_plain_text_untouched(self):
        text = "my toddler has a fever of 39 degrees"
        assert anonymize_text(text) == text


class TestValidateMessage:
    """Test PHI warnings."""

    def test_clean_message(self):
        result = validate_message("my son is 3 years old and has a rash")

        assert result.is_valid is True
        assert result.warnings == []

    def test_phone_warning(self):
        result = validate_message("call me at 555-123-4567")

        assert result.is_valid is False
        assert result.warnings == ["Message may contain phone number"]

    def test_multiple_warnings_in_fixed_order(self):
        result = validate_message("Jane Doe, jane@example.com, seen 03/04/2023")

        assert result.warnings == [
            "Message may contain email address",
            "Message may contain personal names",
            "Message may contain specific dates",
        ]


class TestClassifyQueryType:
    """Test first-match classification."""

    @pytest.mark.parametrize(
        "message, expected",
        [
            ("My child has stomach pain", "symptoms"),
            ("Which drug helps asthma?", "medication"),
            ("Is there a cure for eczema?", "treatment"),
            ("What is this condition called?", "diagnosis"),
            ("Should we go to the ER?", "emergency"),
            ("Should my kid get the flu vaccine?", "prevention"),
            ("Tell me about sleep schedules", "general"),
        ],
    )
    def test_categories(self, message, expected):
        assert classify_query_type(message) == expected

    def test_symptoms_win_over_medication(self):
        assert classify_query_type("the pill makes her feel dizzy") == "symptoms"

    def test_er_inside_words_is_not_emergency(self):
        assert classify_query_type("my daughter is older now") == "general"
