import base64
from typing import Any, Dict, List

PDF_MIME_TYPE = "application/pdf"


def prepare_pdf(filename: str, raw: bytes) -> List[Dict[str, Any]]:
    """
    Wrap a PDF for the agent as-is.

    The whole document travels as one base64 entry; no page rasterizing
    happens here.
    """
    return [
        {
            "filename": filename,
            "base64": base64.b64encode(raw).decode("ascii"),
            "mimeType": PDF_MIME_TYPE,
            "pageNumber": 1,
            "isFullPDF": True,
        }
    ]
