"""
SMS Transaction Extractor - Streamlit Frontend
Paste bank SMS messages, review extracted transactions and download a report
"""

import streamlit as st
import sys
import tempfile
from pathlib import Path

# Add backend to path
backend_path = Path(__file__).parent.parent / 'backend'
sys.path.insert(0, str(backend_path))

# Import backend modules
from config import config
from logging_config import setup_logging
from main import SmsPipeline, TransactionGrouper, STATUS_STORED
from output.writer import generate_pdf_report
from storage.transaction_store import InMemoryTransactionStore

setup_logging(console_output=True)

# Page configuration
st.set_page_config(
    page_title="SMS Transaction Extractor",
    page_icon="💬",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    .main-header {
        font-size: 2.5rem;
        font-weight: bold;
        color: #ef8145;
        margin-bottom: 0.5rem;
    }
    .sub-header {
        font-size: 1.2rem;
        color: #808183;
        margin-bottom: 2rem;
    }
</style>
""", unsafe_allow_html=True)

# Store lives for the browser session only
if 'store' not in st.session_state:
    st.session_state.store = InMemoryTransactionStore()
if 'last_results' not in st.session_state:
    st.session_state.last_results = None


def main():
    """Main application function."""

    st.markdown('<div class="main-header">💬 SMS Transaction Extractor</div>', unsafe_allow_html=True)
    st.markdown('<div class="sub-header">Turn bank and UPI text messages into structured transactions</div>', unsafe_allow_html=True)

    with st.sidebar:
        st.header("📋 Messages")
        messages_input = st.text_area(
            "SMS messages (one per line)",
            value="Rs.500 debited from A/c XX1234 via UPI to merchant@bank using UPI",
            height=200,
            help="Paste one message per line"
        )

        process_btn = st.button(
            "🚀 Extract Transactions",
            type="primary",
            use_container_width=True
        )

        if st.button("🗑️ Clear Captured Transactions", use_container_width=True):
            st.session_state.store.clear()
            st.session_state.last_results = None
            st.rerun()

    if process_btn:
        process_messages(messages_input)

    if st.session_state.last_results:
        display_last_results()

    display_captured()


def process_messages(messages_input: str):
    """Run pasted messages through the pipeline."""
    messages = [line.strip() for line in messages_input.splitlines() if line.strip()]
    if not messages:
        st.error("❌ Please enter at least one message")
        return

    if len(messages) > config.MAX_BATCH_SIZE:
        st.error(f"❌ Too many messages. Maximum: {config.MAX_BATCH_SIZE}")
        return

    pipeline = SmsPipeline(st.session_state.store)
    results = pipeline.process_messages(messages)
    st.session_state.last_results = list(zip(messages, results))

    stored = pipeline.get_stats()[STATUS_STORED]
    st.success(f"✅ {stored} of {len(messages)} messages stored as transactions")


def display_last_results():
    """Show per-message outcome of the last run."""
    st.subheader("🔍 Last Run")
    for text, result in st.session_state.last_results:
        with st.expander(f"{result.status}: {text[:60]}", expanded=False):
            if result.record:
                st.json(result.record.to_dict())
            else:
                st.write("No transaction extracted.")


def display_captured():
    """Show captured transactions and report download."""
    store = st.session_state.store
    summary = TransactionGrouper.summarize(store)

    st.subheader("📊 Captured Transactions")
    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Credits", f"₹{summary['credit']['total']:,.2f}", f"{summary['credit']['count']} txns")
    with col2:
        st.metric("Debits", f"₹{summary['debit']['total']:,.2f}", f"{summary['debit']['count']} txns")
    with col3:
        st.metric("Net", f"₹{summary['net']:+,.2f}")

    for direction in ("credit", "debit"):
        transactions = store.get_transactions(direction)
        if transactions:
            st.markdown(f"**{direction.title()}s**")
            st.dataframe(
                [dict(key=txn.key, **txn.to_dict()) for txn in transactions],
                use_container_width=True
            )

    if store.count():
        with tempfile.TemporaryDirectory() as tmp_dir:
            report_path = Path(tmp_dir) / "sms_transactions.pdf"
            generate_pdf_report(str(report_path), store.all_transactions())
            st.download_button(
                label="📥 Download PDF Report",
                data=report_path.read_bytes(),
                file_name="sms_transactions.pdf",
                mime="application/pdf"
            )


if __name__ == "__main__":
    main()
