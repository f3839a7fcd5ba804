"""
AI Assistant for SmartSpend

DESIGN DECISION: Every AI feature is optional. The ledger works the same
with or without a Gemini key, and no AI failure may touch the ledger.

CRITICAL BOUNDARIES:

1. RECEIPT SCAN / CATEGORIZE:
   - CAN: Pre-fill form fields
   - CANNOT: Add a transaction - the user still submits the form

2. INSIGHTS:
   - CAN: Comment on the transactions it is shown
   - On failure: one neutral "AI Unavailable" placeholder

3. CHAT:
   - Stateless: (context snapshot, history, message) -> reply
   - The caller owns the history list and rebuilds the context snapshot
     whenever the ledger or currency changes
   - On failure: a fixed apology reply, never an exception
"""

import json
from io import BytesIO
from typing import Any, Optional, Sequence

import google.generativeai as genai
import structlog
from PIL import Image, ImageOps, UnidentifiedImageError
from pydantic import ValidationError
from tenacity import retry, stop_after_attempt, wait_exponential

from smartspend.config import get_settings
from smartspend.models.amounts import format_amount
from smartspend.models.assistant import (
    ChatMessage,
    ChatRole,
    InsightSeverity,
    ReceiptData,
    SpendingInsight,
)
from smartspend.models.errors import InvalidInputError
from smartspend.models.transaction import Category, Transaction


CHAT_GREETING = (
    "Hi! I can help you analyze your spending or answer questions about "
    "your budget. What would you like to know?"
)
CHAT_EMPTY_REPLY = "I didn't catch that, could you rephrase?"
CHAT_FAILURE_REPLY = "Sorry, I'm having trouble connecting to the network right now."

UNAVAILABLE_INSIGHT = SpendingInsight(
    title="AI Unavailable",
    message="Could not generate insights at this time.",
    severity=InsightSeverity.NEUTRAL,
)

# Longest side sent to the model; larger photos are downscaled
MAX_IMAGE_SIDE = 2048

logger = structlog.get_logger(__name__)


class CollaboratorUnavailableError(Exception):
    """The AI service failed, timed out or returned nothing usable."""
    pass


def normalize_receipt_image(image_bytes: bytes) -> bytes:
    """
    Re-encode an uploaded photo as an upright RGB JPEG.
    
    Raises:
        InvalidInputError: If the bytes are not a readable image
    """
    try:
        img = Image.open(BytesIO(image_bytes))
        img = ImageOps.exif_transpose(img)
        if img.mode != "RGB":
            img = img.convert("RGB")
        img.thumbnail((MAX_IMAGE_SIDE, MAX_IMAGE_SIDE))
        output = BytesIO()
        img.save(output, format="JPEG", quality=90)
        return output.getvalue()
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise InvalidInputError(
            "Could not read the receipt image",
            issues=[f"image: {e}"],
        )


def extract_json(text: str, opening: str = "{", closing: str = "}") -> Any:
    """
    Pull the first JSON object (or array) out of a model reply.
    
    Models sometimes wrap JSON in prose or code fences.
    
    Raises:
        ValueError: If no JSON can be found
    """
    start = text.find(opening)
    end = text.rfind(closing) + 1
    if start < 0 or end <= start:
        raise ValueError("No JSON found in model response")
    return json.loads(text[start:end])


class FinanceAssistant:
    """
    Gemini-backed assistant.
    
    Args:
        model: Anything with an async generate_content_async(contents, ...)
               returning an object with `.text`. Defaults to a configured
               genai.GenerativeModel.
    """
    
    def __init__(self, model: Optional[Any] = None):
        if model is None:
            self._settings = get_settings().gemini
            self._configure_genai()
        else:
            self._model = model
    
    def _configure_genai(self):
        """Configure Google Generative AI."""
        genai.configure(api_key=self._settings.api_key)
        self._model = genai.GenerativeModel(
            model_name=self._settings.model_name,
            generation_config={
                "temperature": self._settings.temperature,
                "max_output_tokens": self._settings.max_tokens,
            }
        )
    
    @retry(
        stop=stop_after_attempt(2),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=2),
        reraise=True,
    )
    async def _generate(self, contents: Any, json_output: bool = False) -> str:
        """Call the model once (retried once) and return its text."""
        kwargs = {}
        if json_output:
            kwargs["generation_config"] = {"response_mime_type": "application/json"}
        response = await self._model.generate_content_async(contents, **kwargs)
        return (response.text or "").strip()
    
    # -------------------------------------------------------------------------
    # Receipt scan
    # -------------------------------------------------------------------------
    
    async def parse_receipt_image(self, image_bytes: bytes) -> ReceiptData:
        """
        Read amount, date, merchant and category off a receipt photo.
        
        Partial results are normal - any field may be None.
        
        Raises:
            InvalidInputError: If the upload is not an image
            CollaboratorUnavailableError: If the model call fails
        """
        jpeg = normalize_receipt_image(image_bytes)
        categories = ", ".join(cat.value for cat in Category.expense_categories())
        
        prompt = f"""Analyze this receipt image. Extract the following information:
- amount: Total Amount (number)
- date: Date (ISO string format YYYY-MM-DD if found, otherwise null)
- merchant: Merchant Name (string)
- category: Best guess from: {categories}

Respond with ONLY a JSON object with keys amount, date, merchant, category."""

        try:
            text = await self._generate(
                [{"mime_type": "image/jpeg", "data": jpeg}, prompt],
                json_output=True,
            )
            data = extract_json(text)
            receipt = ReceiptData.model_validate(data)
        except (ValueError, ValidationError) as e:
            logger.warning("ai_response_unusable", call="parse_receipt_image", error=str(e))
            raise CollaboratorUnavailableError(f"Receipt could not be read: {e}") from e
        except Exception as e:
            logger.error("ai_call_failed", call="parse_receipt_image", error=str(e))
            raise CollaboratorUnavailableError(f"Receipt service unavailable: {e}") from e
        
        logger.info(
            "receipt_parsed",
            has_amount=receipt.amount is not None,
            has_date=receipt.date is not None,
            has_merchant=receipt.merchant is not None,
            category=receipt.category.value if receipt.category else None,
        )
        return receipt
    
    # -------------------------------------------------------------------------
    # Categorize
    # -------------------------------------------------------------------------
    
    async def categorize_description(self, description: str) -> Optional[Category]:
        """
        Suggest a category for a free-text description.
        
        Returns None when the description is blank, the call fails, or
        the reply is not one of the known categories.
        """
        if not description or not description.strip():
            return None
        
        categories = ", ".join(cat.value for cat in Category.expense_categories())
        prompt = (
            f'Categorize the expense description "{description.strip()}" into exactly '
            f"one of these categories: {categories}. Return only the category name."
        )
        
        try:
            text = await self._generate(prompt)
        except Exception as e:
            logger.warning("ai_call_failed", call="categorize_description", error=str(e))
            return None
        
        category = Category.from_label(text)
        if category is None:
            logger.info("ai_category_unrecognized", reply=text[:50])
        return category
    
    # -------------------------------------------------------------------------
    # Insights
    # -------------------------------------------------------------------------
    
    async def get_spending_insights(
        self,
        transactions: Sequence[Transaction],
        currency_symbol: str,
        sample_size: int = 50,
    ) -> list[SpendingInsight]:
        """
        Three short, actionable observations about recent spending.
        
        Only the first `sample_size` transactions (newest first) are sent.
        On any failure a single neutral placeholder is returned.
        """
        summary = "\n".join(
            f"{tx.date}: {tx.description} - {currency_symbol}{format_amount(tx.amount)} "
            f"({tx.category.value}, {tx.type.value})"
            for tx in list(transactions)[:sample_size]
        )
        
        prompt = f"""Analyze these recent financial transactions and provide 3 short, actionable insights or tips for the user.
Focus on spending habits, potential savings, or budget adherence.

Transactions:
{summary or "(none yet)"}

Respond with ONLY a JSON array of objects with keys: title, message, severity (warning, positive, or neutral)."""

        try:
            text = await self._generate(prompt, json_output=True)
            data = extract_json(text, "[", "]")
            insights = [SpendingInsight.model_validate(item) for item in data]
        except Exception as e:
            logger.warning("ai_call_failed", call="get_spending_insights", error=str(e))
            return [UNAVAILABLE_INSIGHT]
        
        logger.info("insights_generated", count=len(insights))
        return insights
    
    # -------------------------------------------------------------------------
    # Chat
    # -------------------------------------------------------------------------
    
    async def chat(
        self,
        context_snapshot: str,
        history: Sequence[ChatMessage],
        message: str,
    ) -> str:
        """
        Answer one user message given a context snapshot and prior turns.
        
        The assistant keeps no state between calls.
        """
        contents = [
            {
                "role": "user",
                "parts": [
                    "You are a friendly personal finance assistant. Answer using "
                    "ONLY the financial data below. Keep answers short and "
                    "practical. If the data does not answer the question, say so.\n"
                    f"{context_snapshot}"
                ],
            },
            {"role": "model", "parts": ["Understood. I will answer from that data."]},
        ]
        for turn in history:
            contents.append({"role": turn.role.value, "parts": [turn.text]})
        contents.append({"role": ChatRole.USER.value, "parts": [message]})
        
        try:
            text = await self._generate(contents)
        except Exception as e:
            logger.warning("ai_call_failed", call="chat", error=str(e))
            return CHAT_FAILURE_REPLY
        
        return text or CHAT_EMPTY_REPLY
