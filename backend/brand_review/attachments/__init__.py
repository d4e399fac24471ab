from .email_parser import ExtractedImage, ParsedEmail, parse_email
from .pdf import PDF_MIME_TYPE, prepare_pdf

__all__ = ["ExtractedImage", "ParsedEmail", "PDF_MIME_TYPE", "parse_email", "prepare_pdf"]
