
import httpx
import pytest

from proofdesk.core.errors import (
    AnalysisInProgressError, EmptyInputError, InvalidCredentialError,
    MissingCredentialError, OracleFailureError,
)
from proofdesk.core.session import Status, edit_invalidates


@pytest.fixture()
def khmer_reply(oracle_json, khmer_correction):
    return oracle_json([khmer_correction], improved="សូមជួយអ្នកខ្ញុំ", summary="មានកំហុសមួយ")


def test_check_then_apply_single(make_session, khmer_reply, khmer_correction):
    session, _ = make_session(khmer_reply, buffer="សូមជួយខ្ញុំ")
    result = session.check()

    assert session.status is Status.SUCCESS
    assert session.result is result
    assert session.render().highlighted == ["ជួយ"]
    assert session.can_apply_all
    assert len(session.history) == 1

    session.apply_single(khmer_correction)
    assert session.buffer == "សូមជួយអ្នកខ្ញុំ"
    assert session.result.is_fully_correct
    assert session.render().highlighted == []
    assert not session.can_apply_all

    # a second apply is a no-op
    session.apply_single(khmer_correction)
    assert session.buffer == "សូមជួយអ្នកខ្ញុំ"


def test_apply_all(make_session, khmer_reply):
    session, _ = make_session(khmer_reply, buffer="សូមជួយខ្ញុំ")
    session.check()
    session.apply_all()
    assert session.buffer == "សូមជួយអ្នកខ្ញុំ"
    assert session.result is None
    assert session.render().has_markup is False


def test_blank_buffer_fails_fast(make_session):
    session, client = make_session(buffer="   ")
    assert not session.can_check
    with pytest.raises(EmptyInputError):
        session.check()
    assert client.calls == []
    assert len(session.history) == 0
    assert session.status is Status.ERROR
    assert isinstance(session.error, EmptyInputError)


def test_missing_credentials_need_setup(make_session):
    session, client = make_session(buffer="text", credentials=False)
    assert session.needs_setup
    with pytest.raises(MissingCredentialError):
        session.check()
    assert session.status is Status.ERROR
    assert session.needs_setup
    assert client.calls == []


def test_rejected_key_needs_setup(make_session):
    session, _ = make_session(RuntimeError("Requested entity was not found"), buffer="text")
    with pytest.raises(InvalidCredentialError):
        session.check()
    assert session.needs_setup
    assert isinstance(session.error, InvalidCredentialError)


def test_oracle_failure_leaves_state_untouched(make_session, khmer_reply, khmer_correction):
    session, client = make_session(khmer_reply, buffer="សូមជួយខ្ញុំ")
    session.check()
    before = (session.buffer, session.result)

    client._responses[:] = [httpx.ConnectError("down")]
    with pytest.raises(OracleFailureError):
        session.check()

    assert (session.buffer, session.result) == before
    assert session.status is Status.ERROR
    assert not session.needs_setup
    assert session.error.retryable
    assert not session.analyzing
    assert len(session.history) == 1


def test_no_concurrent_analysis(make_session, oracle_json):
    holder = {}

    def reentrant_reply(**_kwargs):
        assert holder["session"].analyzing
        assert not holder["session"].can_check
        with pytest.raises(AnalysisInProgressError):
            holder["session"].check()
        return oracle_json()

    session, _ = make_session(reentrant_reply, buffer="text")
    holder["session"] = session
    session.check()
    assert not session.analyzing


def test_result_discarded_when_buffer_changed_during_analysis(make_session, khmer_correction, oracle_json):
    holder = {}

    def reply_after_edit(**_kwargs):
        # user keeps typing while the request is outstanding
        holder["session"].edit("សូមជួយខ្ញុំ ហើយបន្ថែមអត្ថបទថ្មីទៀត")
        return oracle_json([khmer_correction])

    session, _ = make_session(reply_after_edit, buffer="សូមជួយខ្ញុំ")
    holder["session"] = session
    assert session.check() is None
    assert session.result is None
    assert session.buffer == "សូមជួយខ្ញុំ ហើយបន្ថែមអត្ថបទថ្មីទៀត"
    # the submitted text was still analyzed successfully
    assert session.history.entries[0].source_text == "សូមជួយខ្ញុំ"


def test_small_edits_adding_up_during_analysis_drop_the_old_result(make_session, khmer_reply, oracle_json):
    holder = {}

    def reply_after_edits(**_kwargs):
        session = holder["session"]
        base = session.buffer
        for extra in ("abcd", "abcdefgh", "abcdefghijkl"):
            session.edit(base + extra)
            # each step alone stays under the threshold
            assert session.result is not None
        return oracle_json()

    session, _ = make_session(khmer_reply, reply_after_edits, buffer="សូមជួយខ្ញុំ")
    holder["session"] = session
    session.check()
    assert session.result is not None

    assert session.check() is None
    assert session.result is None
    assert session.buffer == "សូមជួយខ្ញុំabcdefghijkl"


def test_small_edit_keeps_corrections(make_session, khmer_reply):
    session, _ = make_session(khmer_reply, buffer="សូមជួយខ្ញុំ")
    session.check()
    session.edit("សូមជួយខ្ញុំ។")
    assert session.result is not None
    session.edit("")
    assert session.result is None


def test_strict_policy_invalidates_on_any_edit(make_session, khmer_reply):
    session, _ = make_session(khmer_reply, buffer="សូមជួយខ្ញុំ", stale_threshold=None)
    session.check()
    session.edit("សូមជួយខ្ញុំ។")
    assert session.result is None


@pytest.mark.parametrize("before, after, threshold, expected", [
    ("abc", "abc", None, False),
    ("abc", "abd", None, True),
    ("abc", "abd", 5, False),
    ("abc", "abcdefghi", 5, True),
    ("abcdefghi", "abc", 5, True),
    ("abc", "abcde", 2, False),
])
def test_edit_invalidates(before, after, threshold, expected):
    assert edit_invalidates(before, after, threshold) is expected


def test_select_history_rehydrates(make_session, khmer_reply, khmer_correction):
    session, _ = make_session(khmer_reply, buffer="សូមជួយខ្ញុំ")
    session.check()
    entry = session.history.entries[0]
    session.clear()
    assert session.buffer == "" and session.result is None

    session.select_history(entry)
    assert session.buffer == "សូមជួយខ្ញុំ"
    assert session.result.corrections == (khmer_correction,)
    assert len(session.history) == 1


def test_history_survives_a_new_session(make_session, khmer_reply, settings):
    session, _ = make_session(khmer_reply, buffer="សូមជួយខ្ញុំ")
    session.check()
    fresh, _ = make_session(khmer_reply)
    assert [e.source_text for e in fresh.history] == ["សូមជួយខ្ញុំ"]


def test_stats(make_session):
    session, _ = make_session(buffer="  hello  wide\nworld ")
    assert session.stats() == {"chars": 20, "words": 3}
    session.edit("")
    assert session.stats() == {"chars": 0, "words": 0}
