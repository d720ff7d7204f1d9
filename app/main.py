"""
Streamlit Frontend for Bill Tracker

A single page: the bill form at the top, search and status filter,
the bill list with per-bill actions, and the count / unpaid total.

DESIGN PRINCIPLES:
1. The page only renders what BillTrackerApp.view() returns
2. Every action goes through the orchestrator (which saves)
3. User-typed text is escaped before it is embedded in HTML
4. Reminders are shown once per browser session, as a toast
"""

import asyncio
from datetime import date
from typing import Optional

import streamlit as st

from bill_tracker.config import get_settings
from bill_tracker.core import classify, days_until
from bill_tracker.errors import NotFoundError, ValidationError
from bill_tracker.log import configure_logging
from bill_tracker.models.bill import Bill, Recurrence, StatusFilter
from bill_tracker.notifications import NotificationDeliveryInterface
from bill_tracker.orchestrator import (
    LOAD_FAILED_MESSAGE,
    SAVE_FAILED_MESSAGE,
    BillTrackerApp,
    create_app,
)
from bill_tracker.presentation import (
    escape_html,
    format_count,
    format_due_label,
    format_money,
)


# Page configuration
st.set_page_config(
    page_title="Bill Tracker",
    page_icon="🧾",
    layout="centered",
)

st.markdown("""
<style>
    .bill-title { display: flex; justify-content: space-between; font-size: 1.1em; }
    .bill-title.overdue { color: #dc3545; }
    .bill-title.due-soon { color: #e0a800; }
    .bill-title.paid { color: #28a745; text-decoration: line-through; }
    .bill-meta { color: #6c757d; font-size: 0.9em; }
    .badge { border-radius: 8px; padding: 1px 8px; margin-left: 6px; background: #e9ecef; }
    .badge.paid { background: #d4edda; }
    .notes { font-style: italic; margin: 4px 0 0 0; }
</style>
""", unsafe_allow_html=True)


STATUS_LABELS = {
    StatusFilter.ALL: "All",
    StatusFilter.DUE: "Due soon",
    StatusFilter.OVERDUE: "Overdue",
    StatusFilter.PAID: "Paid",
    StatusFilter.UNPAID: "Unpaid",
}


class StreamlitNotificationDelivery(NotificationDeliveryInterface):
    """Shows reminders as a Streamlit toast."""

    def __init__(self, enabled: bool = True):
        self._enabled = enabled

    async def check_permission(self) -> bool:
        return self._enabled

    async def request_permission(self) -> bool:
        return self._enabled

    async def send(self, title: str, body: str) -> None:
        st.toast(f"**{title}**\n\n{body}", icon="⏰")


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_app() -> BillTrackerApp:
    """Create the application once and load saved bills."""
    settings = get_settings()
    configure_logging(settings.app.log_level)
    app = create_app(
        settings,
        notifier=StreamlitNotificationDelivery(settings.notifications.enabled),
    )
    loaded, _ = run_async(app.load())
    if not loaded:
        st.session_state.load_failed = True
    return app


def main():
    """Main application entry point."""
    app = get_app()

    if "editing_id" not in st.session_state:
        st.session_state.editing_id = None
    if "form_version" not in st.session_state:
        st.session_state.form_version = 0
    if "pending_delete" not in st.session_state:
        st.session_state.pending_delete = None

    st.title("🧾 Bill Tracker")

    if st.session_state.pop("load_failed", False):
        st.error(LOAD_FAILED_MESSAGE)
    flash = st.session_state.pop("flash", None)
    if flash:
        st.warning(flash)

    # One reminder per browser session
    if not st.session_state.get("reminded"):
        st.session_state.reminded = True
        run_async(app.notify_due())

    editing = app.store.get(st.session_state.editing_id) if st.session_state.editing_id else None
    render_form(app, editing)

    st.markdown("---")
    render_bill_list(app)


def reset_form():
    st.session_state.editing_id = None
    st.session_state.form_version += 1


def render_form(app: BillTrackerApp, editing: Optional[Bill]):
    """Create / edit form."""
    st.subheader("✏️ Edit Bill" if editing else "➕ Add Bill")

    # Bumping the version gives every widget a fresh key, which clears the form
    key = f"{st.session_state.form_version}-{editing.id if editing else 'new'}"

    with st.form(f"bill-form-{key}"):
        name = st.text_input(
            "Name *",
            value=editing.name if editing else "",
            key=f"name-{key}",
        )
        amount = st.text_input(
            "Amount *",
            value=str(editing.amount) if editing else "",
            placeholder="0.00",
            key=f"amount-{key}",
        )
        col1, col2 = st.columns(2)
        with col1:
            due_date = st.date_input(
                "Due date *",
                value=editing.due_date if editing else date.today(),
                key=f"due-{key}",
            )
        with col2:
            options = list(Recurrence)
            default = editing.recurrence if editing else Recurrence.MONTHLY
            recurrence = st.selectbox(
                "Recurrence",
                options=options,
                index=options.index(default),
                format_func=lambda r: r.value.title(),
                key=f"recurrence-{key}",
            )
        notes = st.text_area(
            "Notes",
            value=(editing.notes or "") if editing else "",
            key=f"notes-{key}",
        )

        col1, col2 = st.columns(2)
        with col1:
            submitted = st.form_submit_button("💾 Save", type="primary")
        with col2:
            cancelled = st.form_submit_button("↩️ Reset")

    if cancelled:
        reset_form()
        st.rerun()

    if submitted:
        fields = {
            "id": str(editing.id) if editing else "",
            "name": name,
            "amount": amount,
            "due_date": due_date.isoformat() if due_date else "",
            "recurrence": recurrence.value,
            "notes": notes,
        }
        try:
            _, saved = run_async(app.upsert(fields))
        except ValidationError as e:
            st.error(e.first_issue or "Invalid bill")
            return
        if not saved:
            st.session_state.flash = SAVE_FAILED_MESSAGE
        reset_form()
        st.rerun()


def render_bill_list(app: BillTrackerApp):
    """Search, filter and list bills."""
    col1, col2 = st.columns([2, 1])
    with col1:
        query = st.text_input("🔍 Search", placeholder="Name or notes")
    with col2:
        status_filter = st.selectbox(
            "Status",
            options=list(StatusFilter),
            format_func=lambda s: STATUS_LABELS[s],
        )

    today = date.today()
    view = app.view(query, status_filter, today)
    symbol = app.currency_symbol

    col1, col2 = st.columns(2)
    col1.metric("Bills", format_count(view.count))
    col2.metric("Unpaid total", format_money(view.unpaid_total, symbol))

    if not view.visible:
        st.info("No bills to show.")
        return

    for bill in view.visible:
        render_bill(app, bill, today, symbol)


def render_bill(app: BillTrackerApp, bill: Bill, today: date, symbol: str):
    """One bill row with its actions."""
    days = days_until(bill.due_date, today)
    urgency = classify(bill, today)

    badges = ""
    if bill.is_recurring:
        badges += f'<span class="badge">{bill.recurrence.value}</span>'
    if bill.paid:
        badges += '<span class="badge paid">paid</span>'
    notes = f'<p class="notes">{escape_html(bill.notes)}</p>' if bill.notes else ""

    st.markdown(f"""
    <div class="bill-title {urgency.value}">
        <strong>{escape_html(bill.name)}</strong>
        <span>{format_money(bill.amount, symbol)}</span>
    </div>
    <div class="bill-meta">
        Due: {bill.due_date.isoformat()} ({format_due_label(days)}){badges}
    </div>
    {notes}
    """, unsafe_allow_html=True)

    bill_id = str(bill.id)
    col1, col2, col3 = st.columns(3)
    with col1:
        if st.button("Mark Unpaid" if bill.paid else "Mark Paid", key=f"toggle-{bill_id}"):
            try:
                _, saved = run_async(app.toggle_paid(bill_id))
            except NotFoundError:
                st.error("That bill no longer exists.")
                return
            if not saved:
                st.session_state.flash = SAVE_FAILED_MESSAGE
            st.rerun()
    with col2:
        if st.button("Edit", key=f"edit-{bill_id}"):
            st.session_state.editing_id = bill_id
            st.session_state.form_version += 1
            st.rerun()
    with col3:
        if st.session_state.pending_delete == bill_id:
            if st.button("Confirm delete", key=f"confirm-delete-{bill_id}", type="primary"):
                st.session_state.pending_delete = None
                _, saved = run_async(app.delete(bill_id))
                if not saved:
                    st.session_state.flash = SAVE_FAILED_MESSAGE
                if st.session_state.editing_id == bill_id:
                    reset_form()
                st.rerun()
        elif st.button("Delete", key=f"delete-{bill_id}"):
            st.session_state.pending_delete = bill_id
            st.rerun()

    st.markdown("---")


if __name__ == "__main__":
    main()
