import streamlit as st

from gpa_tracker.charts import trajectory_chart
from gpa_tracker.config import configure_logging, load_settings, make_store
from gpa_tracker.engine import compute_cgpa, compute_sgpa, history_frame, summary_frame, total_credits
from gpa_tracker.errors import ConfigError, StorageError, TranscriptFormatError
from gpa_tracker.grades import GRADE_SYMBOLS
from gpa_tracker.session import (
    TRANSCRIPT,
    apply_edit,
    enter_tracker,
    forget_upload,
    import_upload,
    init_tracker_state,
    reset_tracker,
    sync_store,
    uploader_key,
    widget_key,
)
from gpa_tracker.transcript import (
    add_course,
    add_semester,
    course_count,
    remove_course,
    remove_semester,
    rename_semester,
    set_course_credits,
    set_course_grade,
    set_course_name,
)
from gpa_tracker.transcript_io import EXPORT_FILE_NAME, dumps_transcript

NOTICE = "notice"

# --- 1. SETUP ---
st.set_page_config(page_title="GPA Calculator", layout="wide")

try:
    settings = load_settings()
except ConfigError as e:
    st.error(f"Configuration error: {e}")
    st.stop()

configure_logging(settings.log_level)
store = make_store(settings)
init_tracker_state(st.session_state, store)
enter_tracker(st.session_state)


# --- 2. CALLBACKS ---
def edit(operation, *args, structural=False):
    message = apply_edit(st.session_state, operation, *args, structural=structural)
    if message:
        st.session_state[NOTICE] = message


def edit_from_widget(operation, key, *args):
    edit(operation, *args, st.session_state[key])


def on_reset():
    reset_tracker(st.session_state, store)


# --- 3. SIDEBAR ---
with st.sidebar:
    st.header("Transcript")

    uploaded_file = st.file_uploader(
        "Import Transcript", type=["json", "yml", "yaml"], key=uploader_key(st.session_state),
        help="A JSON or YAML file exported from this app",
    )
    if uploaded_file is None:
        forget_upload(st.session_state)
    else:
        try:
            if import_upload(st.session_state, uploaded_file.name, uploaded_file.getvalue()):
                st.success(f"Imported {uploaded_file.name}")
        except TranscriptFormatError as e:
            st.error(f"Error parsing file. Please make sure it's a valid JSON or YAML transcript.\n\n{e}")

    st.download_button(
        "📥 Export Transcript",
        data=dumps_transcript(st.session_state[TRANSCRIPT]),
        file_name=EXPORT_FILE_NAME,
        mime="application/json",
        use_container_width=True,
    )
    st.button("Reset", on_click=on_reset, use_container_width=True)

    st.divider()
    st.page_link("pages/1_GPA_Improvement.py", label="GPA Improvement Calculator", icon="📈")


# --- 4. TRANSCRIPT ---
st.title("🎓 GPA Calculator")
st.markdown("Calculate your **SGPA** and **CGPA** with ease.")

if st.session_state.get(NOTICE):
    st.warning(st.session_state.pop(NOTICE))

transcript = st.session_state[TRANSCRIPT]

panels = st.columns(2)
for si, semester in enumerate(transcript):
    with panels[si % 2].container(border=True):
        name_key = widget_key(st.session_state, "semester", si)
        st.text_input(
            "Semester", value=semester.name, key=name_key, label_visibility="collapsed",
            on_change=edit_from_widget, args=(rename_semester, name_key, si),
        )

        for ci, course in enumerate(semester.courses):
            c1, c2, c3, c4 = st.columns([3, 1.2, 1.2, 0.6], vertical_alignment="bottom")
            key = widget_key(st.session_state, "name", si, ci)
            c1.text_input(
                "Subject", value=course.name, key=key, label_visibility="visible" if ci == 0 else "collapsed",
                on_change=edit_from_widget, args=(set_course_name, key, si, ci),
            )
            key = widget_key(st.session_state, "credits", si, ci)
            c2.number_input(
                "Credits", min_value=1, max_value=max(settings.max_credits, course.credits), step=1,
                value=course.credits, key=key, label_visibility="visible" if ci == 0 else "collapsed",
                on_change=edit_from_widget, args=(set_course_credits, key, si, ci),
            )
            key = widget_key(st.session_state, "grade", si, ci)
            c3.selectbox(
                "Grade", GRADE_SYMBOLS, index=GRADE_SYMBOLS.index(course.grade), key=key,
                label_visibility="visible" if ci == 0 else "collapsed",
                on_change=edit_from_widget, args=(set_course_grade, key, si, ci),
            )
            c4.button(
                "🗑", key=widget_key(st.session_state, "remove", si, ci), help="Remove course",
                on_click=edit, args=(remove_course, si, ci), kwargs={"structural": True},
            )

        m1, m2, b1, b2 = st.columns([1, 1, 1, 1], vertical_alignment="bottom")
        m1.metric("SGPA", f"{compute_sgpa(semester):.2f}")
        m2.metric("CGPA", f"{compute_cgpa(transcript[:si + 1]):.2f}")
        b1.button(
            "➕ Add Course", key=widget_key(st.session_state, "add", si),
            on_click=edit, args=(add_course, si, settings.default_credits, settings.default_grade),
        )
        b2.button(
            "Remove Semester", key=widget_key(st.session_state, "drop", si),
            on_click=edit, args=(remove_semester, si), kwargs={"structural": True},
        )

st.button("➕ Add Semester", key="add_semester", on_click=edit, args=(add_semester,))


# --- 5. SUMMARY ---
if transcript:
    st.divider()

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric(label="Cumulative GPA", value=f"{compute_cgpa(transcript):.2f}")
    with col2:
        st.metric(label="Total Credits", value=f"{total_credits(transcript)}")
    with col3:
        st.metric(label="Semesters", value=f"{len(transcript)}")
    with col4:
        st.metric(label="Courses", value=f"{course_count(transcript)}")

    sem_df = summary_frame(transcript)

    st.subheader("📈 GPA Trajectory")
    st.altair_chart(trajectory_chart(sem_df), use_container_width=True)

    col_left, col_right = st.columns([1, 2])
    with col_left:
        st.subheader("Semestral Summary")
        st.dataframe(sem_df.style.format({"SGPA": "{:.2f}", "CGPA": "{:.2f}"}), hide_index=True)
    with col_right:
        st.subheader("Full Grade History")
        st.dataframe(history_frame(transcript), hide_index=True, use_container_width=True)


# --- 6. PERSISTENCE ---
try:
    sync_store(st.session_state, store)
except StorageError as e:
    st.warning(f"Could not save your transcript locally: {e}")
