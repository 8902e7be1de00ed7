from proofdesk.core.applier import apply_all, apply_single, count_occurrences
from proofdesk.core.highlight import render
from proofdesk.core.models import AnalysisResult, Category, Correction


def result_with(*corrections, improved="fixed text"):
    return AnalysisResult(improved, "summary", corrections)


def test_apply_single_khmer_scenario(khmer_correction):
    result = result_with(khmer_correction, improved="សូមជួយអ្នកខ្ញុំ")
    buffer, new_result = apply_single("សូមជួយខ្ញុំ", khmer_correction, result)
    assert buffer == "សូមជួយអ្នកខ្ញុំ"
    assert new_result.corrections == ()
    assert new_result.is_fully_correct is True
    assert result.corrections == (khmer_correction,)  # original result untouched


def test_apply_single_replaces_every_occurrence_and_clears_highlight():
    fix = Correction("teh", "the", "typo", Category.SPELLING)
    other = Correction("recieve", "receive", "typo", Category.SPELLING)
    result = result_with(fix, other)
    buffer = "teh cat and teh dog recieve"
    assert count_occurrences(buffer, "teh") == 2

    new_buffer, new_result = apply_single(buffer, fix, result)

    assert new_buffer == "the cat and the dog recieve"
    assert count_occurrences(new_buffer, "teh") == 0
    assert new_result.corrections == (other,)
    assert new_result.is_fully_correct is False
    assert render(new_buffer, new_result.corrections).highlighted == ["recieve"]


def test_apply_single_removes_all_duplicates_by_identity():
    first = Correction("colour", "color", "US spelling", Category.SPELLING)
    duplicate = Correction("colour", "color", "repeated", Category.STYLE)
    different = Correction("colour", "hue", "word choice", Category.STYLE)
    result = result_with(first, duplicate, different)

    _, new_result = apply_single("colour", first, result)

    assert new_result.corrections == (different,)


def test_applying_twice_is_a_no_op(khmer_correction):
    result = result_with(khmer_correction)
    buffer, result = apply_single("សូមជួយខ្ញុំ", khmer_correction, result)
    again, result_again = apply_single(buffer, khmer_correction, result)
    assert again == buffer == "សូមជួយអ្នកខ្ញុំ"
    assert result_again.corrections == ()


def test_stale_correction_is_acknowledged_silently():
    stale = Correction("gone", "went", "", Category.GRAMMAR)
    result = result_with(stale)
    buffer, new_result = apply_single("the user rewrote everything", stale, result)
    assert buffer == "the user rewrote everything"
    assert new_result.is_fully_correct


def test_vacuous_correction_is_removed_without_touching_buffer():
    vacuous = Correction("  ", "x", "", Category.STYLE)
    result = result_with(vacuous)
    buffer, new_result = apply_single("a  b", vacuous, result)
    assert buffer == "a  b"
    assert new_result.corrections == ()


def test_replacement_is_inserted_verbatim():
    fix = Correction("a.b", r"\1 \g<0> $&", "", Category.STYLE)
    buffer, _ = apply_single("a.b axb", fix, result_with(fix))
    assert buffer == r"\1 \g<0> $& axb"


def test_apply_single_without_active_result():
    fix = Correction("a", "b", "", Category.SPELLING)
    buffer, new_result = apply_single("aaa", fix, None)
    assert buffer == "bbb"
    assert new_result is None


def test_apply_all_replaces_buffer():
    fix = Correction("teh", "the", "", Category.SPELLING)
    assert apply_all("teh end", result_with(fix, improved="the end.")) == "the end."


def test_apply_all_is_not_offered_for_correct_text():
    assert apply_all("fine", result_with(improved="something else")) == "fine"
    assert apply_all("fine", None) == "fine"


def test_is_fully_correct_tracks_remaining_corrections():
    a = Correction("a", "A", "", Category.SPELLING)
    b = Correction("b", "B", "", Category.SPELLING)
    buffer, result = "a b", result_with(a, b)
    for fix in (a, b):
        assert result.is_fully_correct == (len(result.corrections) == 0)
        buffer, result = apply_single(buffer, fix, result)
    assert buffer == "A B"
    assert result.is_fully_correct and len(result.corrections) == 0
