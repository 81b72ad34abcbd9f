import pytest

from gpa_tracker.errors import TranscriptFormatError, ValidationError
from gpa_tracker.session import (
    ENTRIES,
    LAST_IMPORT,
    REVISION,
    SAVED,
    TRANSCRIPT,
    add_entry,
    apply_edit,
    apply_entry_edit,
    enter_simulator,
    enter_tracker,
    entry_key,
    forget_upload,
    import_upload,
    init_tracker_state,
    reset_tracker,
    sync_store,
    uploader_key,
    widget_key,
)
from gpa_tracker.simulator import remove_entry, set_entry_credits
from gpa_tracker.storage import MemoryTranscriptStore
from gpa_tracker.transcript import (
    Course,
    Semester,
    add_course,
    add_semester,
    remove_semester,
    set_course_grade,
)
from gpa_tracker.transcript_io import dumps_transcript

CACHED = (Semester("Semester 1", (Course("Calculus", 3, "A"),)),)


class CountingStore(MemoryTranscriptStore):
    def __init__(self, transcript=None):
        super().__init__(transcript)
        self.saves = 0
        self.loads = 0

    def load(self):
        self.loads += 1
        return super().load()

    def save(self, transcript):
        self.saves += 1
        super().save(transcript)


def test_init_loads_cache_once():
    store = CountingStore(CACHED)
    state = {}
    init_tracker_state(state, store)
    init_tracker_state(state, store)
    assert state[TRANSCRIPT] == CACHED
    assert store.loads == 1


def test_init_without_cache_starts_empty():
    state = {}
    init_tracker_state(state, CountingStore())
    assert state[TRANSCRIPT] == ()


def test_apply_edit_replaces_the_transcript():
    state = {TRANSCRIPT: CACHED}
    assert apply_edit(state, add_course, 0) is None
    assert len(state[TRANSCRIPT][0].courses) == 2
    assert CACHED[0].courses == (Course("Calculus", 3, "A"),)


def test_rejected_edit_leaves_state_and_returns_message():
    state = {TRANSCRIPT: CACHED}
    message = apply_edit(state, set_course_grade, 0, 0, "E")
    assert "Unknown grade" in message
    assert state[TRANSCRIPT] is CACHED


def test_structural_edit_changes_widget_keys():
    state = {TRANSCRIPT: add_semester(CACHED), REVISION: 0}
    key = widget_key(state, "name", 1, 0)
    apply_edit(state, remove_semester, 0, structural=True)
    assert widget_key(state, "name", 1, 0) != key
    assert state[REVISION] == 1


def test_import_applies_the_same_upload_once():
    state = {TRANSCRIPT: ()}
    payload = dumps_transcript(CACHED).encode("utf-8")
    assert import_upload(state, "transcript.json", payload) is True
    assert state[TRANSCRIPT] == CACHED
    state[TRANSCRIPT] = add_semester(state[TRANSCRIPT])
    assert import_upload(state, "transcript.json", payload) is False
    assert len(state[TRANSCRIPT]) == 2


def test_malformed_import_leaves_transcript_unchanged():
    state = {TRANSCRIPT: CACHED}
    with pytest.raises(TranscriptFormatError):
        import_upload(state, "transcript.json", b'{"name": "not a list"}')
    assert state[TRANSCRIPT] is CACHED
    assert LAST_IMPORT not in state


def test_sync_store_writes_only_changed_non_empty_transcripts():
    store = CountingStore()
    state = {}
    init_tracker_state(state, store)
    assert sync_store(state, store) is False

    apply_edit(state, add_semester)
    assert sync_store(state, store) is True
    assert sync_store(state, store) is False
    assert store.saves == 1
    assert store.load() == state[SAVED]


def test_emptied_transcript_is_not_saved():
    store = CountingStore(CACHED)
    state = {}
    init_tracker_state(state, store)
    apply_edit(state, remove_semester, 0)
    assert sync_store(state, store) is False
    assert store.load() == CACHED


def test_reset_clears_store_and_state():
    store = CountingStore(CACHED)
    state = {}
    init_tracker_state(state, store)
    key = uploader_key(state)
    reset_tracker(state, store)
    assert state[TRANSCRIPT] == ()
    assert store.load() is None
    assert uploader_key(state) != key


def test_reset_sticks_while_the_file_is_still_uploaded():
    store = CountingStore()
    state = {}
    init_tracker_state(state, store)
    payload = dumps_transcript(CACHED).encode("utf-8")
    assert import_upload(state, "t.json", payload) is True
    sync_store(state, store)

    reset_tracker(state, store)
    # the rerun right after the reset still sees the old file
    assert import_upload(state, "t.json", payload) is False
    assert state[TRANSCRIPT] == ()
    assert sync_store(state, store) is False
    assert store.load() is None


def test_same_file_uploaded_again_after_clearing_is_applied():
    state = {TRANSCRIPT: ()}
    payload = dumps_transcript(CACHED).encode("utf-8")
    assert import_upload(state, "t.json", payload) is True
    apply_edit(state, remove_semester, 0)
    assert state[TRANSCRIPT] == ()

    forget_upload(state)
    assert import_upload(state, "t.json", payload) is True
    assert state[TRANSCRIPT] == CACHED


def test_simulator_starts_empty_on_each_visit():
    state = {}
    assert enter_simulator(state) is True
    add_entry(state, "Chemistry", 3, "C", "A")

    # reruns inside the simulator keep the entries
    assert enter_simulator(state) is False
    assert len(state[ENTRIES]) == 1

    key = entry_key(state, "name", 0)
    enter_tracker(state)
    assert enter_simulator(state) is True
    assert state[ENTRIES] == ()
    assert entry_key(state, "name", 0) != key


def test_simulator_state():
    state = {}
    enter_simulator(state)
    assert state[ENTRIES] == ()

    add_entry(state, "Chemistry", 3, "C", "A")
    with pytest.raises(ValidationError):
        add_entry(state, "Physics", 3, None, "A")
    assert len(state[ENTRIES]) == 1

    assert apply_entry_edit(state, set_entry_credits, 0, 0) is not None
    assert state[ENTRIES][0].credits == 3

    key = entry_key(state, "name", 0)
    assert apply_entry_edit(state, remove_entry, 0, structural=True) is None
    assert state[ENTRIES] == ()
    assert entry_key(state, "name", 0) != key
