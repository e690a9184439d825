"""Bank statement extraction via the OpenAI Responses API.

Public API:
    - :func:`extract_statement`

One document in, one :class:`~statement_scanner.models.ExtractionResult` out.
The call is made exactly once (no retries). Every failure is raised as
:class:`~statement_scanner.errors.ExtractionError`; a partial result is never
returned. The model is not deterministic, so the same image may yield slightly
different rows on repeated calls.
"""

from __future__ import annotations

import json
import os
import time
from collections.abc import Mapping
from typing import Any

from openai import OpenAI
from openai.types.responses import ResponseTextConfigParam
from pydantic import ValidationError

from . import prompting
from .errors import ExtractionError
from .logging_setup import get_logger
from .models import ExtractionResult

_DEFAULT_MODEL: str = "gpt-5"
_MODEL_ENV_VAR = "STATEMENT_SCANNER_MODEL"

_logger = get_logger("statement_scanner.extraction")


def resolve_model(model: str | None = None) -> str:
    if model and model.strip():
        return model.strip()
    env_val = os.getenv(_MODEL_ENV_VAR)
    if env_val and env_val.strip():
        return env_val.strip()
    return _DEFAULT_MODEL


def _create_client() -> OpenAI:
    return OpenAI()


def _response_text(resp: Any) -> str | None:
    """Locate the output text on a Responses SDK result.

    Prefer ``resp.output_text``; fall back to ``resp.output[0].content[0].text``.
    """

    text: str | None = getattr(resp, "output_text", None)
    if text:
        return text
    try:
        first = resp.output[0] if getattr(resp, "output", None) else None
        content = getattr(first, "content", None)
        if content:
            txt_obj = getattr(content[0], "text", None)
            if isinstance(txt_obj, str):
                return txt_obj
            # Some SDKs expose text as an object with a ``value`` string.
            maybe_val = getattr(txt_obj, "value", None)
            if isinstance(maybe_val, str):
                return maybe_val
    except (AttributeError, IndexError, TypeError):
        return None
    return None


def decode_extraction(text: str | None) -> ExtractionResult:
    """Decode the model's JSON document into an :class:`ExtractionResult`.

    Raises :class:`ExtractionError` when the text is empty, is not a JSON
    object, lacks ``transactions``, or fails field validation.
    """

    if not text or not text.strip():
        raise ExtractionError("No data returned from the extraction service.")
    try:
        decoded = json.loads(text)
    except ValueError as e:
        # JSONDecodeError, and the int-digit limit which json.loads raises as a plain ValueError.
        raise ExtractionError("The extraction service returned malformed JSON.") from e
    if not isinstance(decoded, Mapping):
        raise ExtractionError("The extraction service returned an unexpected document shape.")
    if "transactions" not in decoded:
        raise ExtractionError("The extraction service returned no transactions field.")
    try:
        return ExtractionResult.model_validate(decoded)
    except ValidationError as e:
        raise ExtractionError(
            f"The extraction service returned invalid data ({e.error_count()} validation errors)."
        ) from e


def extract_statement(
    image_bytes: bytes,
    mime_type: str,
    *,
    model: str | None = None,
    client: OpenAI | None = None,
    filename: str | None = None,
) -> ExtractionResult:
    """Extract transactions from a statement image or PDF.

    Parameters
    ----------
    image_bytes:
        The raw encoded document, already read by the caller.
    mime_type:
        ``image/*`` or ``application/pdf``.
    model:
        Model name; defaults to ``STATEMENT_SCANNER_MODEL`` or ``gpt-5``.
    client:
        Optional pre-built OpenAI client. When omitted a client is created
        from the environment (``OPENAI_API_KEY``).
    filename:
        Name reported to the service for PDF payloads.

    Raises
    ------
    ExtractionError
        For unusable input, a rejected service call, or an empty or
        structurally invalid response.
    """

    if not image_bytes:
        raise ExtractionError("The selected file is empty.", hint="Choose a different file.")
    if not prompting.is_supported_mime_type(mime_type):
        raise ExtractionError(
            f"Unsupported file type: {mime_type or 'unknown'}.",
            hint="Upload an image (PNG, JPEG, ...) or a PDF.",
        )

    model_name = resolve_model(model)
    input_items = prompting.build_user_input(
        image_bytes, mime_type, filename=filename or "statement.pdf"
    )
    text_cfg = ResponseTextConfigParam(format=prompting.build_response_format())

    _logger.info(
        "extract_statement:request model=%s mime_type=%s bytes=%d",
        model_name,
        mime_type,
        len(image_bytes),
    )
    t0 = time.perf_counter()
    try:
        api = client if client is not None else _create_client()
        resp = api.responses.create(
            model=model_name,
            instructions=prompting.build_system_instructions(),
            input=input_items,
            text=text_cfg,
        )
    except Exception as e:  # noqa: BLE001 - SDK, transport and auth failures alike
        dt_ms = (time.perf_counter() - t0) * 1000.0
        _logger.error(
            "extract_statement:failed latency_ms=%.2f error=%s",
            dt_ms,
            e.__class__.__name__,
        )
        raise ExtractionError(f"The extraction service request failed: {e}") from e

    try:
        result = decode_extraction(_response_text(resp))
    except ExtractionError as e:
        dt_ms = (time.perf_counter() - t0) * 1000.0
        _logger.error(
            "extract_statement:invalid_response latency_ms=%.2f reason=%s",
            dt_ms,
            e.message,
        )
        raise

    dt_ms = (time.perf_counter() - t0) * 1000.0
    _logger.info(
        "extract_statement:done num_transactions=%d latency_ms=%.2f",
        len(result.transactions),
        dt_ms,
    )
    return result


__all__ = ["decode_extraction", "extract_statement", "resolve_model"]
