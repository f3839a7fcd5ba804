"""
Streamlit Frontend for SmartSpend

This is the thin presentation layer. Every figure on screen comes from
FinanceSession; nothing here computes totals or filters by itself.

PAGES:
1. Dashboard - balance/income/expense cards, this week, insights, recent
2. Analytics - expense breakdown by category, income vs expense this week
3. History   - filters, sorting, delete, CSV export
4. Settings  - set real-world balance, currency, theme, full reset

Failures from storage or the AI assistant are shown as dismissible
messages. They never block the ledger.
"""

import asyncio
from datetime import date

import streamlit as st

from smartspend.agents import CHAT_GREETING, CollaboratorUnavailableError
from smartspend.config import validate_all_settings
from smartspend.export import NothingToExportError
from smartspend.logs import configure_from_settings
from smartspend.models import (
    Category,
    ChatMessage,
    ChatRole,
    InsightSeverity,
    InvalidInputError,
    SortKey,
    TransactionFilter,
    TransactionType,
    format_amount,
)
from smartspend.session import FinanceSession, create_session
from smartspend.validation import TransactionForm, apply_receipt


# Page configuration
st.set_page_config(
    page_title="SmartSpend",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_session() -> FinanceSession:
    """Load the session once per server process."""
    configure_from_settings()
    return create_session()


def money(session: FinanceSession, value) -> str:
    return f"{session.settings.currency_symbol}{format_amount(value)}"


def main():
    """Main application entry point."""
    session = get_session()
    
    st.sidebar.title("💰 SmartSpend")
    st.sidebar.markdown("---")
    
    page = st.sidebar.radio(
        "Navigate to:",
        ["📊 Dashboard", "📈 Analytics", "🧾 History", "⚙️ Settings"],
        index=0,
    )
    
    st.sidebar.markdown("---")
    if st.sidebar.button(f"Currency: {session.settings.currency_symbol}"):
        session.toggle_currency()
        st.rerun()
    if st.sidebar.button("☀️ Light mode" if session.settings.dark_mode else "🌙 Dark mode"):
        session.toggle_theme()
        st.rerun()
    
    if not session.has_assistant:
        status = validate_all_settings()
        st.sidebar.caption(
            "🤖 AI features are off. Set GEMINI_API_KEY to enable receipt scan, "
            "insights and chat."
            if not status["gemini"]
            else "🤖 AI features are off."
        )
    
    if session.store.last_write_error:
        st.warning(f"Changes are kept for this session but could not be saved: {session.store.last_write_error}")
    
    render_add_form(session)
    
    if page == "📊 Dashboard":
        render_dashboard(session)
    elif page == "📈 Analytics":
        render_analytics(session)
    elif page == "🧾 History":
        render_history(session)
    elif page == "⚙️ Settings":
        render_settings(session)
    
    render_chat(session)


def render_add_form(session: FinanceSession):
    """Add-transaction form with receipt scan and smart categorize."""
    if "form" not in st.session_state:
        st.session_state.form = TransactionForm(date=date.today().isoformat())
    form: TransactionForm = st.session_state.form
    
    with st.sidebar.expander("➕ Add Transaction", expanded=False):
        if session.has_assistant:
            receipt = st.file_uploader("Scan a receipt", type=["jpg", "jpeg", "png", "webp"])
            if receipt and st.button("🔍 Read receipt"):
                with st.spinner("Reading receipt..."):
                    try:
                        data = run_async(session.scan_receipt(receipt.read()))
                        st.session_state.form = apply_receipt(form, data)
                        st.rerun()
                    except (CollaboratorUnavailableError, InvalidInputError) as e:
                        st.error(f"Failed to analyze receipt. Please try again. ({e})")
        
        tx_type = st.radio(
            "Type",
            options=list(TransactionType),
            index=list(TransactionType).index(form.type),
            format_func=lambda t: t.value.title(),
            horizontal=True,
        )
        amount = st.text_input(f"Amount ({session.settings.currency_symbol})", value=form.amount)
        description = st.text_input("Description", value=form.description)
        category = st.selectbox(
            "Category",
            options=list(Category),
            index=list(Category).index(form.category),
            format_func=lambda c: c.value,
        )
        if session.has_assistant and st.button("✨ Suggest category"):
            suggestion = run_async(session.suggest_category(description))
            if suggestion:
                st.session_state.form = form.model_copy(
                    update={"category": suggestion, "description": description, "amount": amount}
                )
                st.rerun()
        tx_date = st.date_input("Date", value=date.fromisoformat(form.date) if form.date else date.today())
        
        if st.button("Save", type="primary"):
            submitted = TransactionForm(
                type=tx_type,
                amount=amount,
                category=category,
                date=tx_date.isoformat(),
                description=description,
            )
            try:
                _, warnings = session.submit_form(submitted)
            except InvalidInputError as e:
                for issue in e.issues:
                    st.error(issue)
            else:
                for warning in warnings:
                    st.warning(warning)
                st.session_state.form = TransactionForm(date=date.today().isoformat())
                st.rerun()


def render_dashboard(session: FinanceSession):
    st.title("📊 Dashboard")
    totals = session.totals()
    
    col1, col2, col3 = st.columns(3)
    col1.metric("Total Balance", money(session, totals.balance))
    col2.metric("Income", money(session, totals.income))
    col3.metric("Expenses", money(session, totals.expense))
    
    left, right = st.columns(2)
    with left:
        st.subheader("This Week")
        render_weekly_chart(session)
    with right:
        st.subheader("Smart Insights")
        if st.button("✨ Refresh AI"):
            with st.spinner("Analyzing your spending..."):
                st.session_state.insights = run_async(session.insights())
        insights = st.session_state.get("insights", [])
        if not insights:
            st.caption("Tap the button to analyze your spending habits.")
        for insight in insights:
            show = {
                InsightSeverity.WARNING: st.warning,
                InsightSeverity.POSITIVE: st.success,
            }.get(insight.severity, st.info)
            show(f"**{insight.title}**\n\n{insight.message}")
    
    st.subheader("Recent Transactions")
    recent = session.recent(5)
    if not recent:
        st.caption("No transactions yet.")
    for tx in recent:
        render_transaction_row(session, tx, key_prefix="recent")


def render_weekly_chart(session: FinanceSession):
    series = session.weekly_series()
    st.bar_chart(
        {
            "income": {b.day_label: float(b.income) for b in series},
            "expense": {b.day_label: float(b.expense) for b in series},
        },
        color=["#10b981", "#ef4444"],
    )
    with st.expander("Top daily expenses"):
        for bucket in series:
            if bucket.top_expenses:
                items = ", ".join(
                    f"{tx.description} ({money(session, tx.amount)})" for tx in bucket.top_expenses
                )
                st.markdown(f"**{bucket.day_label} {bucket.date}:** {items}")


def render_analytics(session: FinanceSession):
    st.title("📈 Analytics")
    
    st.subheader("Expense Breakdown")
    breakdown = session.category_breakdown()
    if not breakdown:
        st.caption("No expense data available")
    else:
        st.bar_chart({item.category.value: float(item.total) for item in breakdown})
        for item in breakdown:
            with st.expander(f"{item.category.value}: {money(session, item.total)}"):
                st.markdown("**Top 3 Expenses**")
                for tx in item.top_entries:
                    st.markdown(f"- {tx.description}: {money(session, tx.amount)} ({tx.date})")
    
    st.subheader("Income vs Expenses")
    render_weekly_chart(session)


def render_history(session: FinanceSession):
    st.title("🧾 All Transactions")
    
    col1, col2, col3, col4, col5 = st.columns(5)
    category = col1.selectbox("Category", [None] + list(Category), format_func=lambda c: "All" if c is None else c.value)
    tx_type = col2.selectbox("Type", [None] + list(TransactionType), format_func=lambda t: "All" if t is None else t.value.title())
    date_from = col3.date_input("From", value=None)
    date_to = col4.date_input("To", value=None)
    sort_key = col5.selectbox("Sort", list(SortKey), format_func=lambda k: k.value)
    
    criteria = TransactionFilter(category=category, type=tx_type, date_from=date_from, date_to=date_to)
    rows = session.view(criteria, sort_key)
    
    try:
        filename, text = session.export_csv(criteria, sort_key)
        st.download_button("⬇️ Export CSV", data=text.encode("utf-8"), file_name=filename, mime="text/csv")
    except NothingToExportError:
        st.caption("Nothing to export yet.")
    
    if not rows:
        st.caption("No transactions match these filters.")
    for tx in rows:
        render_transaction_row(session, tx, key_prefix="history")


def render_transaction_row(session: FinanceSession, tx, key_prefix: str):
    sign = "+" if tx.is_income else "-"
    left, right = st.columns([4, 1])
    left.markdown(f"**{tx.description}**  \n{tx.date} • {tx.category.value}")
    right.markdown(f"**{sign}{money(session, tx.amount)}**")
    if right.button("🗑️", key=f"{key_prefix}-{tx.id}"):
        session.delete_transaction(tx.id)
        st.rerun()


def render_settings(session: FinanceSession):
    st.title("⚙️ Settings")
    
    st.subheader("Current Balance")
    st.markdown(
        "Enter your real bank balance. Your transaction history is not changed; "
        "only the starting offset is adjusted."
    )
    target = st.text_input("Actual balance", value=format_amount(session.totals().balance))
    if st.button("Update balance"):
        try:
            offset = session.set_balance(target)
            st.success(f"Balance updated (starting offset {money(session, offset)})")
        except InvalidInputError as e:
            st.error(str(e))
    
    st.markdown("---")
    st.subheader("Danger Zone")
    confirm = st.checkbox("I understand this deletes all transactions and settings")
    if st.button("Reset all data", disabled=not confirm):
        session.reset_all()
        st.session_state.pop("chat_history", None)
        st.session_state.pop("insights", None)
        st.rerun()


def render_chat(session: FinanceSession):
    """Chat panel. History lives in st.session_state; the assistant is stateless."""
    if not session.has_assistant:
        return
    
    if "chat_history" not in st.session_state:
        st.session_state.chat_history = [ChatMessage(role=ChatRole.MODEL, text=CHAT_GREETING)]
    
    with st.sidebar.expander("💬 Ask about your money", expanded=False):
        for msg in st.session_state.chat_history:
            st.markdown(f"**{'You' if msg.role == ChatRole.USER else 'Assistant'}:** {msg.text}")
        message = st.text_input("Message", key="chat_input")
        if st.button("Send") and message.strip():
            # The greeting is UI-only; it is not part of the model history
            history = st.session_state.chat_history[1:]
            reply = run_async(session.chat(history, message.strip()))
            st.session_state.chat_history += [
                ChatMessage(role=ChatRole.USER, text=message.strip()),
                ChatMessage(role=ChatRole.MODEL, text=reply),
            ]
            st.rerun()


if __name__ == "__main__":
    main()
