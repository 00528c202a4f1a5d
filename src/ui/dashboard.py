"""Scanner dashboard: scanning, manual entry, entry list and export."""
import hashlib
import json
import logging
from typing import List, Optional, Sequence, Tuple

import pandas as pd
import streamlit as st

from src.models.attendee import AttendeeRecord
from src.services.entry_store import EntryStore, get_entry_store
from src.services.export_service import export_filename, export_to_excel
from src.services.query_service import filter_records, sort_by_college, summarize_by_college
from src.services.registration_service import (
    clear_entries,
    register_manual,
    register_scan,
    remove_entry,
)
from src.services.scanner_service import MSG_DEVICE_UNAVAILABLE, ScannerController
from src.ui.html_utils import html_block
from src.utils.exceptions import DeviceUnavailableError, NothingToExportError

logger = logging.getLogger(__name__)

SCANNER_KEY = "dashboard_scanner"
LAST_FRAME_KEY = "dashboard_last_frame"
CONFIRM_KEY = "dashboard_confirm_action"
SEARCH_KEY = "dashboard_search"

TABLE_COLUMNS = {
    "name": "Name",
    "college": "College",
    "email": "Email",
    "phone": "Phone",
    "id": "ID",
}

SAMPLE_PAYLOAD = {
    "id": "NOESIS123456",
    "name": "Test User",
    "college": "Test College",
    "email": "test@example.com",
    "phone": "9999999999",
}


def _notify(message: str) -> None:
    """Fire-and-forget toast."""
    st.toast(message)


def _get_scanner() -> ScannerController:
    """Per-session scanner controller."""
    if SCANNER_KEY not in st.session_state:
        st.session_state[SCANNER_KEY] = ScannerController()
    return st.session_state[SCANNER_KEY]


def _frame_digest(image_bytes: bytes) -> str:
    return hashlib.sha1(image_bytes).hexdigest()


def _header_html(total: int) -> str:
    """Dashboard heading with the entry count."""
    return html_block(
        """
        <div class="dashboard-heading">
            <h1 class="dashboard-heading__title">NOESIS 2025 — Scanner Dashboard</h1>
            <p class="dashboard-heading__desc">
                Scan QR codes to register attendance. Data stored locally; export to Excel when needed.
            </p>
            <p class="dashboard-heading__total">Total: <strong>{total}</strong></p>
        </div>
        """,
        total=total,
    )


def _entries_frame(records: Sequence[AttendeeRecord]) -> pd.DataFrame:
    """Table of records with display column names, in record order."""
    rows = [record.to_dict() for record in records]
    df = pd.DataFrame(rows, columns=list(TABLE_COLUMNS.keys()), dtype=str)
    return df[list(TABLE_COLUMNS.keys())].rename(columns=TABLE_COLUMNS)


def _export_rows(records: Sequence[AttendeeRecord]) -> Tuple[Tuple[str, ...], ...]:
    """Hashable snapshot of the records, used as the workbook cache key."""
    return tuple(tuple(record.to_dict().values()) for record in records)


@st.cache_data(show_spinner=False, max_entries=4)
def _build_workbook(rows: Tuple[Tuple[str, ...], ...]) -> bytes:
    """Workbook bytes, rebuilt only when the entries change."""
    return export_to_excel([AttendeeRecord(*row) for row in rows])


def _log_export(count: int, file_name: str) -> None:
    logger.info("Exported %d entries to %s", count, file_name)


def _inject_dashboard_styles():
    """Inject dashboard CSS."""
    st.markdown(
        html_block(
            """
            <style>
            .dashboard-heading {
                margin-bottom: 14px;
            }
            .dashboard-heading__title {
                font-size: 28px;
                font-weight: 800;
                color: #d8b4fe;
                margin: 0;
            }
            .dashboard-heading__desc {
                margin-top: 4px;
                color: #cbd5f5;
                font-size: 13px;
            }
            .dashboard-heading__total {
                color: #cbd5f5;
                font-size: 14px;
            }
            </style>
            """
        ),
        unsafe_allow_html=True,
    )


def _handle_decoded(payloads: List[str], store: EntryStore) -> None:
    """Each decoded payload is one registration attempt."""
    for payload in payloads:
        _, message = register_scan(payload, store=store)
        _notify(message)


def _render_scanner(store: EntryStore) -> None:
    """Start/stop control and camera capture."""
    scanner = _get_scanner()

    st.subheader("Scanner")
    st.caption("Scanner will decode JSON embedded in the QR. Example: {name, college, email, phone, id}")

    start_col, sample_col = st.columns(2, gap="small")
    with start_col:
        label = "Stop Scanning" if scanner.is_scanning else "Start Scanning"
        if st.button(label, key="dashboard_scan_toggle", use_container_width=True,
                     type="secondary" if scanner.is_scanning else "primary"):
            if scanner.is_scanning:
                scanner.stop()
            else:
                scanner.start()
            st.rerun()

    with sample_col:
        with st.popover("Test JSON", use_container_width=True):
            st.code(json.dumps(SAMPLE_PAYLOAD), language="json")

    if not scanner.is_scanning:
        return

    frame = st.camera_input("Point the camera at a QR code", key="dashboard_camera")
    if frame is None:
        return

    image_bytes = frame.getvalue()
    digest = _frame_digest(image_bytes)
    # Reruns keep returning the last captured frame
    if st.session_state.get(LAST_FRAME_KEY) == digest:
        return
    st.session_state[LAST_FRAME_KEY] = digest

    try:
        payloads = scanner.process_frame(image_bytes)
    except DeviceUnavailableError as e:
        logger.warning("Scanner stopped: %s", e)
        _notify(MSG_DEVICE_UNAVAILABLE)
        return

    if not payloads:
        _notify("No QR code found in frame")
        return

    _handle_decoded(payloads, store)


def _render_manual_form(store: EntryStore) -> None:
    """Manual add form."""
    st.subheader("Manual Add")
    with st.form("dashboard_manual_form", clear_on_submit=True):
        name = st.text_input("Name")
        college = st.text_input("College")
        email = st.text_input("Email")
        phone = st.text_input("Phone")
        submitted = st.form_submit_button("Add", type="primary")

    if submitted:
        success, message = register_manual(name, college=college, email=email, phone=phone, store=store)
        _notify(message)
        if success:
            st.rerun()


def _request_confirmation(action: str, record_id: Optional[str] = None) -> None:
    st.session_state[CONFIRM_KEY] = {"action": action, "record_id": record_id}


def _render_confirmation(store: EntryStore) -> None:
    """Two-step confirmation for delete and clear."""
    pending = st.session_state.get(CONFIRM_KEY)
    if not pending:
        return

    if pending["action"] == "clear":
        st.error("⚠️ Clear all entries? This cannot be undone.")
    else:
        st.warning(f"Delete entry {pending['record_id']}?")

    confirm_col, cancel_col = st.columns(2, gap="small")
    with confirm_col:
        if st.button("✅ Confirm", type="primary", use_container_width=True, key="dashboard_confirm_yes"):
            if pending["action"] == "clear":
                _, message = clear_entries(store=store)
            else:
                _, message = remove_entry(pending["record_id"], store=store)
            _notify(message)
            st.session_state.pop(CONFIRM_KEY, None)
            st.rerun()

    with cancel_col:
        if st.button("❌ Cancel", use_container_width=True, key="dashboard_confirm_no"):
            st.session_state.pop(CONFIRM_KEY, None)
            st.rerun()


def _render_actions(store: EntryStore) -> None:
    """Sort, export and clear controls."""
    sort_col, export_col, clear_col = st.columns(3, gap="small")

    with sort_col:
        if st.button("Sort by College", use_container_width=True, key="dashboard_sort"):
            ascending = sort_by_college(store)
            _notify("Sorted by college (A→Z)" if ascending else "Sorted by college (Z→A)")

    with export_col:
        rows = _export_rows(store.records)
        try:
            content = _build_workbook(rows)
        except NothingToExportError:
            if st.button("Export Excel", use_container_width=True, key="dashboard_export_empty"):
                _notify("Nothing to export")
        else:
            file_name = export_filename()
            st.download_button(
                "Export Excel",
                data=content,
                file_name=file_name,
                mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
                use_container_width=True,
                key="dashboard_export",
                on_click=_log_export,
                args=(len(rows), file_name),
            )

    with clear_col:
        if st.button("Clear All", use_container_width=True, key="dashboard_clear"):
            _request_confirmation("clear")
            st.rerun()


def _render_entries(store: EntryStore) -> None:
    """Searchable entry list with per-row delete."""
    st.subheader("Entries")
    query = st.text_input(
        "Search",
        key=SEARCH_KEY,
        placeholder="Search by name/college/email/phone",
        label_visibility="collapsed",
    )

    filtered = filter_records(store.records, query)
    if not filtered:
        st.info("No entries")
        return

    st.dataframe(_entries_frame(filtered), hide_index=True, use_container_width=True)

    with st.expander("Delete an entry"):
        options = {f"{record.display_label()} ({record.id})": record.id for record in filtered}
        choice = st.selectbox("Entry", list(options.keys()), key="dashboard_delete_choice")
        if st.button("Delete", key="dashboard_delete"):
            _request_confirmation("delete", options[choice])
            st.rerun()

    with st.expander("Colleges"):
        st.table(pd.Series(summarize_by_college(store.records), name="Entries"))


def render_dashboard():
    """Render the scanner dashboard page."""
    store = get_entry_store()

    _inject_dashboard_styles()
    st.markdown(_header_html(len(store)), unsafe_allow_html=True)

    _render_actions(store)
    _render_confirmation(store)

    left_col, right_col = st.columns([1, 2], gap="large")
    with left_col:
        _render_scanner(store)
        st.divider()
        _render_manual_form(store)

    with right_col:
        _render_entries(store)

    st.caption("Physics Student Association • St. Joseph’s University")
