"""Prompt construction for bank statement extraction.

This module builds:
- The system instructions for the extraction task, including the amount sign
  convention.
- The multimodal ``input`` payload carrying the statement bytes as a base64
  data URL (``input_image`` for images, ``input_file`` for PDFs).
- The strict ``response_format`` (JSON Schema) object for the OpenAI
  Responses API.
"""

from __future__ import annotations

import base64
from typing import Any

from openai.types.responses.response_format_text_json_schema_config_param import (
    ResponseFormatTextJSONSchemaConfigParam,
)

PDF_MIME_TYPE = "application/pdf"


def is_supported_mime_type(mime_type: str | None) -> bool:
    """Return True for ``image/*`` and ``application/pdf``."""

    if not mime_type:
        return False
    mt = mime_type.strip().lower()
    return mt == PDF_MIME_TYPE or (mt.startswith("image/") and len(mt) > len("image/"))


def build_system_instructions() -> str:
    """Return the extraction instructions.

    The sign convention is delegated to the model: credits positive, debits
    negative, absolute value when the sign cannot be determined.
    """

    return (
        "Analyze this bank statement document and extract all transactions.\n"
        "Amounts must be positive for deposits/credits and negative for "
        "withdrawals/debits when that can be determined; otherwise extract the "
        "absolute value.\n"
        "Keep dates in the format used by the statement (e.g., DD/MM/YY stays DD/MM/YY).\n"
        "For each transaction provide:\n"
        "- date: the date of the transaction.\n"
        "- description: the full title or description of the transaction.\n"
        "- amount: the numeric value.\n"
        "- notes: any additional info such as categories, reference numbers, or "
        "merchant locations; null when there is none.\n"
        "Also extract the bank name, the statement period, and the currency when "
        "visible; use null for anything that is not shown. "
        "Output JSON only that conforms to the specified schema."
    )


def _data_url(data: bytes, mime_type: str) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def build_user_input(
    data: bytes, mime_type: str, *, filename: str = "statement.pdf"
) -> list[dict[str, Any]]:
    """Return the Responses API ``input`` list for one statement document.

    Images are sent as ``input_image``; PDFs as ``input_file`` with inline
    ``file_data``. The short text part asks for the extraction so the document
    is never sent without a task.
    """

    mt = mime_type.strip().lower()
    url = _data_url(data, mt)
    if mt == PDF_MIME_TYPE:
        if not filename.lower().endswith(".pdf"):
            filename = f"{filename}.pdf"
        doc_part: dict[str, Any] = {
            "type": "input_file",
            "filename": filename,
            "file_data": url,
        }
    else:
        doc_part = {"type": "input_image", "image_url": url, "detail": "high"}

    return [
        {
            "role": "user",
            "content": [
                doc_part,
                {
                    "type": "input_text",
                    "text": "Extract the statement transactions from this document.",
                },
            ],
        }
    ]


def build_response_format() -> ResponseFormatTextJSONSchemaConfigParam:
    """Return the strict JSON Schema response_format object.

    Strict mode requires every property to be listed in ``required``; fields
    that may be unknown are therefore typed ``["string", "null"]`` and the
    decoder treats ``null`` as absent.

    Schema shape:
    {
      "bankName": string | null,
      "period": string | null,
      "currency": string | null,
      "transactions": [
        {"date": string, "description": string, "amount": number, "notes": string | null}
      ]
    }
    """

    result: ResponseFormatTextJSONSchemaConfigParam = {
        "type": "json_schema",
        "name": "bank_statement",
        "schema": {
            "type": "object",
            "properties": {
                "bankName": {"type": ["string", "null"]},
                "period": {"type": ["string", "null"]},
                "currency": {"type": ["string", "null"]},
                "transactions": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "date": {"type": "string"},
                            "description": {"type": "string"},
                            "amount": {"type": "number"},
                            "notes": {"type": ["string", "null"]},
                        },
                        "required": ["date", "description", "amount", "notes"],
                        "additionalProperties": False,
                    },
                },
            },
            "required": ["bankName", "period", "currency", "transactions"],
            "additionalProperties": False,
        },
        "strict": True,
    }
    return result
