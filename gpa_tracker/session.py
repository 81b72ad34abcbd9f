"""
Presentation state kept in ``st.session_state``.

Functions here take any mutable mapping so they can run without Streamlit.
Widgets are keyed with the current revision; structural changes (import,
removals, reset) bump it so stale widget values are not carried over to a
different row.
"""

import hashlib
import logging
from typing import Callable, MutableMapping, Optional, Union

from gpa_tracker.errors import ValidationError
from gpa_tracker.simulator import Entries, append_entry, make_entry
from gpa_tracker.storage import TranscriptStore
from gpa_tracker.transcript import Transcript
from gpa_tracker.transcript_io import parse_upload

logger = logging.getLogger(__name__)

TRANSCRIPT = "transcript"
SAVED = "saved_transcript"
REVISION = "revision"
LAST_IMPORT = "last_import_hash"
UPLOADER = "uploader_id"
ENTRIES = "sim_entries"
SIM_REVISION = "sim_revision"
ACTIVE_VIEW = "active_view"
TRACKER_VIEW = "tracker"
SIMULATOR_VIEW = "simulator"


def init_tracker_state(state: MutableMapping, store: TranscriptStore) -> None:
    """Load the cached transcript once per session."""
    if TRANSCRIPT in state:
        return
    transcript = store.load() or ()
    state[TRANSCRIPT] = transcript
    state[SAVED] = transcript
    state[REVISION] = 0


def widget_key(state: MutableMapping, *parts) -> str:
    return "_".join(str(p) for p in parts + (f"r{state.get(REVISION, 0)}",))


def uploader_key(state: MutableMapping) -> str:
    """Key for the import widget; a new key gives an empty uploader."""
    return f"uploader_{state.get(UPLOADER, 0)}"


def bump_revision(state: MutableMapping) -> None:
    state[REVISION] = state.get(REVISION, 0) + 1


def apply_edit(state: MutableMapping, operation: Callable[..., Transcript], *args, structural: bool = False) -> Optional[str]:
    """Replace the transcript with ``operation(transcript, *args)``.

    Returns the validation message when the edit is rejected, in which case
    the transcript is left as it was.
    """
    try:
        state[TRANSCRIPT] = operation(state[TRANSCRIPT], *args)
    except ValidationError as e:
        return str(e)
    if structural:
        bump_revision(state)
    return None


def import_upload(state: MutableMapping, filename: str, payload: Union[bytes, str]) -> bool:
    """Replace the transcript with an uploaded file.

    The same upload is applied only once while it stays in the uploader,
    since the uploader keeps its file across reruns. Call ``forget_upload``
    once the uploader is empty so dropping the file again re-applies it.
    Raises ``TranscriptFormatError`` on a malformed file.
    """
    data = payload.encode("utf-8") if isinstance(payload, str) else payload
    fingerprint = hashlib.sha256(data).hexdigest()
    if state.get(LAST_IMPORT) == fingerprint:
        return False
    state[TRANSCRIPT] = parse_upload(filename, data)
    state[LAST_IMPORT] = fingerprint
    bump_revision(state)
    return True


def forget_upload(state: MutableMapping) -> None:
    state.pop(LAST_IMPORT, None)


def sync_store(state: MutableMapping, store: TranscriptStore) -> bool:
    """Write the transcript to the store if it changed and is not empty."""
    transcript = state[TRANSCRIPT]
    if not transcript or transcript == state.get(SAVED):
        return False
    store.save(transcript)
    state[SAVED] = transcript
    return True


def reset_tracker(state: MutableMapping, store: TranscriptStore) -> None:
    store.clear()
    state[TRANSCRIPT] = ()
    state[SAVED] = ()
    # the uploader still holds the imported file; re-key it so it comes back empty
    state[UPLOADER] = state.get(UPLOADER, 0) + 1
    bump_revision(state)
    logger.info("Transcript reset")


# --- simulator ---

def enter_tracker(state: MutableMapping) -> None:
    state[ACTIVE_VIEW] = TRACKER_VIEW


def enter_simulator(state: MutableMapping) -> bool:
    """Start the simulator empty whenever it is navigated to.

    Reruns within the simulator keep their entries. Returns True on entry.
    """
    if state.get(ACTIVE_VIEW) == SIMULATOR_VIEW and ENTRIES in state:
        return False
    state[ACTIVE_VIEW] = SIMULATOR_VIEW
    state[ENTRIES] = ()
    state[SIM_REVISION] = state.get(SIM_REVISION, 0) + 1
    return True


def add_entry(state: MutableMapping, name, credits, old_grade, new_grade) -> None:
    """Validate the add-course form and append it; raises ``ValidationError``."""
    entry = make_entry(name, credits, old_grade, new_grade)
    state[ENTRIES] = append_entry(state[ENTRIES], entry)


def apply_entry_edit(state: MutableMapping, operation: Callable[..., Entries], *args, structural: bool = False) -> Optional[str]:
    try:
        state[ENTRIES] = operation(state[ENTRIES], *args)
    except ValidationError as e:
        return str(e)
    if structural:
        state[SIM_REVISION] = state.get(SIM_REVISION, 0) + 1
    return None


def entry_key(state: MutableMapping, *parts) -> str:
    return "_".join(str(p) for p in parts + (f"r{state.get(SIM_REVISION, 0)}",))
