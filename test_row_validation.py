import pytest
from pydantic import ValidationError

from row_validation import (
    SheetRow,
    validate_name,
    validate_email,
    validate_phone,
    validate_gender,
    validate_row,
    summarize,
    partition_rows,
    NAME_ERROR,
    EMAIL_ERROR,
    PHONE_ERROR,
    GENDER_ERROR,
)


@pytest.fixture
def valid_row():
    """
    Fixture providing a row that passes every field rule.

    Returns:
        dict: A contact row
    """
    return {
        "Name": "Jane Smith",
        "Email": "jane@example.com",
        "Phone": 1234567890,
        "Gender": "F",
    }


@pytest.fixture
def mixed_rows():
    """
    Fixture providing sheet rows in order, alternating valid and invalid.

    Returns:
        list[SheetRow]: Rows at sheet positions 2 to 6
    """
    rows = [
        {"Name": "John Doe", "Email": "john@example.com", "Phone": "1234567890", "Gender": "M"},
        {"Name": "", "Email": "bad-email", "Phone": "12345", "Gender": "X"},
        {"Name": "Alice Brown", "Email": "alice@example.com", "Phone": 9876543210, "Gender": "f"},
        {"Name": "Bob", "Email": "bob@example.com", "Phone": None, "Gender": "M"},
        {"Name": "Carol", "Email": "carol@example.org", "Phone": "5551234567", "Gender": "m"},
    ]
    return [SheetRow(row_index=index + 2, values=row) for index, row in enumerate(rows)]


class TestValidateName:
    """
    Tests for the validate_name function.
    """

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("John", True),
            ("  John  ", True),
            ("", False),
            ("   ", False),
            ("\t\n", False),
            (None, False),
            (123, False),
        ],
        ids=["plain", "padded", "empty", "spaces", "whitespace", "none", "number"]
    )
    def test_validate_name(self, value, expected):
        """
        Test that only non-blank strings are accepted as names.

        Surrounding whitespace is allowed, but a name made only of whitespace
        is blank. Numbers are rejected even though they are not blank.

        Args:
            value: Cell value to check
            expected: Whether the value is a valid name
        """
        assert validate_name(value) is expected


class TestValidateEmail:
    """
    Tests for the validate_email function.
    """

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("user@example.com", True),
            ("first.last@mail.example.co.uk", True),
            ("userexample.com", False),
            ("", False),
            (None, False),
            ("user@example", False),
            ("user@@example.com", False),
            ("us er@example.com", False),
            ("user@example.com ", False),
            ("@example.com", False),
        ],
        ids=[
            "valid", "subdomains", "no-at", "empty", "none", "no-dot",
            "double-at", "inner-space", "trailing-space", "no-local-part"
        ]
    )
    def test_validate_email(self, value, expected):
        """
        Test that emails must look like local@domain.tld.

        The address needs exactly one "@", at least one "." after it, and no
        whitespace anywhere.

        Args:
            value: Cell value to check
            expected: Whether the value is a valid email
        """
        assert validate_email(value) is expected

    def test_trailing_newline_is_rejected(self):
        """
        Test that a newline after an otherwise valid address is not ignored.

        The whole value has to match, so a trailing line break fails.
        """
        assert validate_email("user@example.com\n") is False


class TestValidatePhone:
    """
    Tests for the validate_phone function.
    """

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("1234567890", True),
            (1234567890, True),
            ("+441234567890", True),
            ("0000000000", True),
            ("12345", False),
            (12345, False),
            ("", False),
            (None, False),
            (0, False),
            ("123-456-7890", False),
            ("12345abcde", False),
            (True, False),
            (float("nan"), False),
            (float("inf"), False),
            ("1_000_000_000", False),
        ],
        ids=[
            "ten-digit-string", "ten-digit-number", "international", "zeros",
            "short-string", "short-number", "empty", "none", "zero",
            "dashes", "letters", "bool", "nan", "inf", "underscores"
        ]
    )
    def test_validate_phone(self, value, expected):
        """
        Test that phones must be present, numeric and at least 10 characters long.

        Args:
            value: Cell value to check
            expected: Whether the value is a valid phone number
        """
        assert validate_phone(value) is expected

    @pytest.mark.parametrize(
        "value",
        ["0x1234567890", "0b1010101010", "0o12345670", "Infinity", "-Infinity", "NaN"],
        ids=["hex", "binary", "octal", "infinity", "negative-infinity", "nan-text"]
    )
    def test_only_plain_decimal_text_is_numeric(self, value):
        """
        Test that text only counts as numeric when it is a plain decimal number.

        Radix-prefixed literals and the words Infinity and NaN are rejected,
        even though some number parsers would accept them.

        Args:
            value: Text that a looser numeric check would let through
        """
        assert validate_phone(value) is False

    def test_length_counts_the_string_form(self):
        """
        Test that the length rule applies to the value as written, not its digit count.

        A nine-digit number is too short, while the same digits written with a
        decimal part reach the minimum length.
        """
        assert validate_phone("123456789") is False
        assert validate_phone("123456789.0") is True


class TestValidateGender:
    """
    Tests for the validate_gender function.
    """

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("m", True),
            ("F", True),
            ("M", True),
            ("f", True),
            ("X", False),
            ("", False),
            (None, False),
            ("Male", False),
            (" M", False),
            (1, False),
        ],
        ids=["lower-m", "upper-f", "upper-m", "lower-f", "other", "empty", "none", "word", "padded", "number"]
    )
    def test_validate_gender(self, value, expected):
        """
        Test that gender must be M or F in either case, with no padding.

        Args:
            value: Cell value to check
            expected: Whether the value is a valid gender code
        """
        assert validate_gender(value) is expected


class TestValidateRow:
    """
    Tests for the validate_row function.
    """

    def test_valid_row_has_no_errors(self, valid_row):
        """
        Test that a row passing every rule produces a clean verdict.

        Args:
            valid_row: Fixture providing a valid contact row
        """
        verdict = validate_row(valid_row, 2)

        assert verdict.is_valid is True
        assert verdict.errors == []
        assert verdict.row == valid_row
        assert verdict.row_index == 2

    @pytest.mark.parametrize("blank_name", ["", "   ", None])
    def test_blank_name_is_always_invalid(self, valid_row, blank_name):
        """
        Test that a blank name makes the row invalid with the name message.

        Args:
            valid_row: Fixture providing a valid contact row
            blank_name: Empty, whitespace-only or missing name
        """
        valid_row["Name"] = blank_name

        verdict = validate_row(valid_row, 5)

        assert verdict.is_valid is False
        assert verdict.errors == [NAME_ERROR]

    def test_every_field_is_checked(self):
        """
        Test that all four field errors are reported together, in field order.

        Validation does not stop at the first failing field.
        """
        row = {"Name": " ", "Email": "nope", "Phone": "12", "Gender": "Q"}

        verdict = validate_row(row, 3)

        assert verdict.is_valid is False
        assert verdict.errors == [NAME_ERROR, EMAIL_ERROR, PHONE_ERROR, GENDER_ERROR]

    def test_missing_columns_count_as_blank(self):
        """
        Test that a row without the schema columns fails those fields instead of raising.
        """
        verdict = validate_row({"Name": "Only Name"}, 2)

        assert verdict.errors == [EMAIL_ERROR, PHONE_ERROR, GENDER_ERROR]

    def test_extra_columns_are_kept_on_the_verdict(self, valid_row):
        """
        Test that columns outside the schema are ignored by the rules but kept on the row.

        Args:
            valid_row: Fixture providing a valid contact row
        """
        valid_row["Notes"] = "VIP"

        verdict = validate_row(valid_row, 2)

        assert verdict.is_valid is True
        assert verdict.row["Notes"] == "VIP"

    def test_verdict_is_immutable(self, valid_row):
        """
        Test that a verdict cannot be changed after it is created.

        Args:
            valid_row: Fixture providing a valid contact row
        """
        verdict = validate_row(valid_row, 2)

        with pytest.raises(ValidationError):
            verdict.is_valid = False


class TestPartitionRows:
    """
    Tests for partition_rows and summarize.
    """

    def test_splits_rows_preserving_order(self, mixed_rows):
        """
        Test that valid and invalid verdicts each keep the order of the sheet.

        Args:
            mixed_rows: Fixture providing alternating valid and invalid rows
        """
        valid, invalid, summary = partition_rows(mixed_rows)

        assert [verdict.row_index for verdict in valid] == [2, 4, 6]
        assert [verdict.row_index for verdict in invalid] == [3, 5]
        assert invalid[1].errors == [PHONE_ERROR]

    def test_summary_counts(self, mixed_rows):
        """
        Test that the summary counts total, valid and invalid rows.

        Args:
            mixed_rows: Fixture providing alternating valid and invalid rows
        """
        _, _, summary = partition_rows(mixed_rows)

        assert summary.total == 5
        assert summary.valid_count == 3
        assert summary.invalid_count == 2

    def test_counts_always_sum_to_total(self, mixed_rows):
        """
        Test that every row gets exactly one verdict, whatever the input size.

        Args:
            mixed_rows: Fixture providing alternating valid and invalid rows
        """
        for end in range(len(mixed_rows) + 1):
            valid, invalid, summary = partition_rows(mixed_rows[:end])

            assert summary.valid_count + summary.invalid_count == summary.total == end
            assert len(valid) + len(invalid) == end

    def test_empty_input(self):
        """
        Test that no rows give empty lists and a zero summary.
        """
        valid, invalid, summary = partition_rows([])

        assert valid == []
        assert invalid == []
        assert summary.total == 0

    def test_summarize_matches_partition(self, mixed_rows):
        """
        Test that summarize gives the same counts as partition_rows.

        Args:
            mixed_rows: Fixture providing alternating valid and invalid rows
        """
        verdicts = [validate_row(row.values, row.row_index) for row in mixed_rows]

        assert summarize(verdicts) == partition_rows(mixed_rows)[2]
