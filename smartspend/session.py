"""
Session Orchestrator for SmartSpend

This module ties the components together for one user session:

    storage -> LedgerStore -> BalanceReconciler / Aggregator
                           -> Filter/Sort Engine -> Exporter
    FinanceAssistant (optional) for receipt scan, insights and chat

DESIGN DECISION: There are no ambient globals. Theme, currency and the
ledger live on an explicit FinanceSession that is loaded once at session
start and written through on every change.

Derived figures are recomputed from the ledger on every call.
"""

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence, Union

import structlog

from smartspend.agents import (
    CHAT_FAILURE_REPLY,
    UNAVAILABLE_INSIGHT,
    CollaboratorUnavailableError,
    FinanceAssistant,
    build_chat_context,
)
from smartspend.analytics import aggregator, filters
from smartspend.config import AppSettings, get_settings
from smartspend.export import export_filename, select_export_rows, to_delimited_text
from smartspend.ledger import BalanceReconciler, LedgerStore
from smartspend.models.assistant import ChatMessage, ReceiptData, SpendingInsight
from smartspend.models.transaction import (
    Category,
    CategoryTotal,
    DayBucket,
    SessionSettings,
    SortKey,
    Totals,
    Transaction,
    TransactionDraft,
    TransactionFilter,
)
from smartspend.services.storage import (
    InMemoryStorage,
    JsonFileStorage,
    LedgerStorageInterface,
    StorageError,
)
from smartspend.validation import TransactionForm, TransactionFormValidator


CURRENCY_SYMBOLS = ("$", "₹")

logger = structlog.get_logger(__name__)


class FinanceSession:
    """
    One user's session over the ledger.
    
    Usage:
        session = create_session()
        session.add_transaction(draft)
        session.totals().balance
    """
    
    def __init__(
        self,
        storage: Optional[LedgerStorageInterface] = None,
        assistant: Optional[FinanceAssistant] = None,
        app_settings: Optional[AppSettings] = None,
        validator: Optional[TransactionFormValidator] = None,
    ):
        self._storage = storage
        self._assistant = assistant
        self._app = app_settings or AppSettings()
        self._validator = validator or TransactionFormValidator()
        self.store = LedgerStore(storage)
        self.reconciler = BalanceReconciler(self.store)
        self.settings = SessionSettings()
    
    # -------------------------------------------------------------------------
    # Session boundary
    # -------------------------------------------------------------------------
    
    def load(self) -> "FinanceSession":
        """Load ledger, offset and preferences from storage."""
        self.store.load()
        if self._storage is not None:
            self.settings = SessionSettings(
                dark_mode=self._storage.load_theme(),
                currency_symbol=self._storage.load_currency_symbol(),
            )
        return self
    
    @property
    def has_assistant(self) -> bool:
        return self._assistant is not None
    
    @property
    def transactions(self) -> list[Transaction]:
        return self.store.list()
    
    # -------------------------------------------------------------------------
    # Ledger mutations
    # -------------------------------------------------------------------------
    
    def add_transaction(self, draft: TransactionDraft) -> Transaction:
        return self.store.add(draft)
    
    def submit_form(self, form: TransactionForm) -> tuple[Transaction, list[str]]:
        """
        Validate a form and add it.
        
        Returns:
            (transaction, warnings)
        
        Raises:
            InvalidInputError: If the form cannot become a transaction
        """
        draft = self._validator.validate(form)
        warnings = self._validator.warnings(draft)
        return self.store.add(draft), warnings
    
    def delete_transaction(self, transaction_id: str) -> bool:
        return self.store.remove(transaction_id)
    
    def reset_all(self) -> None:
        """Delete every transaction and setting, in memory and in storage."""
        self.store.clear()
        self.settings = SessionSettings()
    
    def set_balance(self, target_balance: object) -> Decimal:
        """Reconcile the offset so the balance equals target_balance."""
        return self.reconciler.reconcile_to_target(target_balance)
    
    # -------------------------------------------------------------------------
    # Derived figures
    # -------------------------------------------------------------------------
    
    def totals(self) -> Totals:
        return self.reconciler.compute_totals()
    
    def category_breakdown(self) -> list[CategoryTotal]:
        return aggregator.category_breakdown(self.store.list(), top_n=self._app.top_n)
    
    def weekly_series(self, reference_date: Optional[date] = None) -> list[DayBucket]:
        return aggregator.weekly_series(
            self.store.list(),
            reference_date=reference_date,
            top_n=self._app.top_n,
        )
    
    def recent(self, limit: int = 5) -> list[Transaction]:
        """Newest entries by insertion order."""
        return self.store.list()[:limit]
    
    def view(
        self,
        criteria: Optional[TransactionFilter] = None,
        sort_key: Union[SortKey, str, None] = None,
    ) -> list[Transaction]:
        """Filtered, sorted projection for the history list."""
        return filters.apply(self.store.list(), criteria, sort_key)
    
    def export_csv(
        self,
        criteria: Optional[TransactionFilter] = None,
        sort_key: Union[SortKey, str, None] = None,
        today: Optional[date] = None,
    ) -> tuple[str, str]:
        """
        Render the current view as CSV.
        
        Falls back to the full ledger when the view is empty.
        
        Returns:
            (filename, text)
        
        Raises:
            NothingToExportError: If the ledger is empty
        """
        full = self.store.list()
        rows = select_export_rows(filters.apply(full, criteria, sort_key), full)
        text = to_delimited_text(rows, self.settings.currency_symbol)
        return export_filename(self._app.product_name, today), text
    
    # -------------------------------------------------------------------------
    # Preferences
    # -------------------------------------------------------------------------
    
    def set_currency(self, symbol: str) -> None:
        self.settings = self.settings.model_copy(update={"currency_symbol": symbol})
        self._save_setting("save_currency_symbol", symbol)
    
    def toggle_currency(self) -> str:
        """Switch between $ and ₹ (display only, no conversion)."""
        current = self.settings.currency_symbol
        symbol = CURRENCY_SYMBOLS[1] if current == CURRENCY_SYMBOLS[0] else CURRENCY_SYMBOLS[0]
        self.set_currency(symbol)
        return symbol
    
    def toggle_theme(self) -> bool:
        dark_mode = not self.settings.dark_mode
        self.settings = self.settings.model_copy(update={"dark_mode": dark_mode})
        self._save_setting("save_theme", dark_mode)
        return dark_mode
    
    def _save_setting(self, method: str, value: object) -> None:
        if self._storage is None:
            return
        try:
            getattr(self._storage, method)(value)
        except StorageError as e:
            logger.error("storage_write_failed", operation=method, error=str(e))
    
    # -------------------------------------------------------------------------
    # AI collaborators
    # -------------------------------------------------------------------------
    
    def chat_context(self) -> str:
        """Snapshot of current figures for the chat assistant."""
        return build_chat_context(
            totals=self.totals(),
            breakdown=self.category_breakdown(),
            transactions=self.store.list(),
            currency_symbol=self.settings.currency_symbol,
            top_category_count=self._app.chat_top_categories,
            recent_count=self._app.chat_recent_count,
        )
    
    async def insights(self) -> list[SpendingInsight]:
        if self._assistant is None:
            return [UNAVAILABLE_INSIGHT]
        return await self._assistant.get_spending_insights(
            self.store.list(),
            self.settings.currency_symbol,
            sample_size=self._app.insight_sample_size,
        )
    
    async def chat(self, history: Sequence[ChatMessage], message: str) -> str:
        """Reply to message. The context is rebuilt from the ledger on every call."""
        if self._assistant is None:
            return CHAT_FAILURE_REPLY
        return await self._assistant.chat(self.chat_context(), history, message)
    
    async def scan_receipt(self, image_bytes: bytes) -> ReceiptData:
        """
        Raises:
            CollaboratorUnavailableError: If no assistant is configured or the scan fails
            InvalidInputError: If the upload is not an image
        """
        if self._assistant is None:
            raise CollaboratorUnavailableError("AI assistant is not configured")
        return await self._assistant.parse_receipt_image(image_bytes)
    
    async def suggest_category(self, description: str) -> Optional[Category]:
        if self._assistant is None:
            return None
        return await self._assistant.categorize_description(description)


def create_storage(app: AppSettings) -> LedgerStorageInterface:
    """
    Build the configured storage backend.
    
    Falls back to the local JSON backend if Google Sheets is selected
    but not configured.
    """
    if app.storage_backend == "memory":
        return InMemoryStorage()
    
    if app.storage_backend == "sheets":
        try:
            from smartspend.services.storage.google_sheets import GoogleSheetsStorage
            
            return GoogleSheetsStorage()
        except Exception as e:
            # Storage not configured - continue with local files
            logger.warning("sheets_storage_unavailable", error=str(e))
    
    return JsonFileStorage(app.data_path)


def create_assistant() -> Optional[FinanceAssistant]:
    """Build the AI assistant, or None if Gemini is not configured."""
    try:
        return FinanceAssistant()
    except Exception as e:
        logger.info("assistant_disabled", reason=str(e))
        return None


def create_session(
    storage: Optional[LedgerStorageInterface] = None,
    assistant: Optional[FinanceAssistant] = None,
    use_assistant: bool = True,
) -> FinanceSession:
    """
    Factory function to create and load a session.
    
    Args:
        storage: Backend to use; defaults to the configured one
        assistant: AI assistant; defaults to a Gemini assistant if configured
        use_assistant: Set to False to run without AI
    """
    app = get_settings().app
    storage = storage or create_storage(app)
    if assistant is None and use_assistant:
        assistant = create_assistant()
    
    session = FinanceSession(storage=storage, assistant=assistant, app_settings=app)
    return session.load()
