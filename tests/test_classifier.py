from id_card_ocr.classifier import IDENTIFIER_RULES, IdentifierMatch, IdentifierType, classify_identifier


def test_rule_priority_order() -> None:
    assert [kind for kind, _, _ in IDENTIFIER_RULES] == [
        IdentifierType.PAN,
        IdentifierType.AADHAR,
        IdentifierType.VOTER,
    ]


def test_pan_match_is_verbatim() -> None:
    match = classify_identifier("INCOME TAX DEPARTMENT ABCDE1234F GOVT OF INDIA")
    assert match.kind is IdentifierType.PAN
    assert match.raw == "ABCDE1234F"
    assert match.value == "ABCDE1234F"


def test_pan_requires_uppercase() -> None:
    match = classify_identifier("abcde1234f")
    assert match.kind is not IdentifierType.PAN


def test_pan_must_be_whole_word() -> None:
    match = classify_identifier("XABCDE1234F")
    assert match.kind is not IdentifierType.PAN


def test_pan_beats_aadhar_and_voter() -> None:
    match = classify_identifier("1234 5678 9012 KKD1933993 ABCDE1234F")
    assert match.kind is IdentifierType.PAN
    assert match.value == "ABCDE1234F"


def test_aadhar_spaced_is_canonicalized() -> None:
    match = classify_identifier("Your Aadhaar No. 6713 3842 5045 VID")
    assert match.kind is IdentifierType.AADHAR
    assert match.raw == "6713 3842 5045"
    assert match.value == "671338425045"


def test_aadhar_unspaced() -> None:
    match = classify_identifier("UID 671338425045")
    assert match.kind is IdentifierType.AADHAR
    assert match.value == "671338425045"


def test_aadhar_beats_voter() -> None:
    match = classify_identifier("KKD1933993 6713 3842 5045")
    assert match.kind is IdentifierType.AADHAR


def test_ten_digit_run_is_not_aadhar() -> None:
    match = classify_identifier("ID Number: 1234567890")
    assert match.kind is IdentifierType.NONE


def test_voter_is_case_insensitive_and_uppercased() -> None:
    match = classify_identifier("EPIC No kkd 1933993")
    assert match.kind is IdentifierType.VOTER
    assert match.value == "KKD1933993"


def test_voter_without_space() -> None:
    match = classify_identifier("ELECTION COMMISSION OF INDIA KKD1933993")
    assert match.kind is IdentifierType.VOTER
    assert match.value == "KKD1933993"


def test_no_match() -> None:
    match = classify_identifier("nothing to see here")
    assert match == IdentifierMatch.none()
    assert match.value == ""
    assert not match


def test_empty_text() -> None:
    assert classify_identifier("").kind is IdentifierType.NONE


def test_devanagari_digits_are_not_aadhar() -> None:
    match = classify_identifier("Name: Priya १२३४ ५६७८ ९०१२")
    assert match.kind is IdentifierType.NONE
    assert match.value == ""


def test_pan_next_to_devanagari_word() -> None:
    match = classify_identifier("नामABCDE1234F")
    assert match.kind is IdentifierType.PAN
    assert match.value == "ABCDE1234F"


def test_voter_digits_must_be_ascii() -> None:
    assert classify_identifier("KKD १९३३९९३").kind is IdentifierType.NONE
