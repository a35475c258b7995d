"""
Custom Exceptions for Report Portal
===================================

Use these instead of generic Exception to:
1. Make errors more specific and debuggable
2. Enable proper error handling at API layer
3. Provide meaningful error messages to users

Usage:
    from report_portal.core.exceptions import ReportNotFoundError, DocxExportError

    if not report:
        raise ReportNotFoundError(report_id)

    try:
        data = await exporter.export(...)
    except DocxExportError as e:
        logger.error(f"Export failed: {e}")
        raise
"""

from typing import Optional, Any, Dict


class PortalError(Exception):
    """Base exception for all Report Portal errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


# ============================================
# Authorization Errors
# ============================================

class AuthorizationError(PortalError):
    """User not authorized for this action"""

    status_code = 403

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message, code="NOT_AUTHORIZED")


# ============================================
# Resource Errors (404-type)
# ============================================

class ResourceNotFoundError(PortalError):
    """Base class for not found errors"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} with ID '{resource_id}' not found",
            code=f"{resource_type.upper()}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id}
        )


class ReportNotFoundError(ResourceNotFoundError):
    """Report not found"""

    def __init__(self, report_id: str):
        super().__init__("Report", report_id)


class PostNotFoundError(ResourceNotFoundError):
    """Board post not found"""

    def __init__(self, post_id: str):
        super().__init__("Post", post_id)


class UserNotFoundError(ResourceNotFoundError):
    """User not found"""

    def __init__(self, user_id: str):
        super().__init__("User", user_id)


# ============================================
# Validation Errors (400-type)
# ============================================

class ValidationError(PortalError):
    """Input validation failed"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class ExportValidationError(ValidationError):
    """Export request rejected before any work started"""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, field=field)
        self.code = "EXPORT_VALIDATION_FAILED"


class PageOutOfRangeError(ValidationError):
    """Requested page is outside [1, total_pages]"""

    def __init__(self, requested: str, total_pages: int):
        super().__init__(f"Enter a page number between 1 and {total_pages}.", field="page")
        self.code = "PAGE_OUT_OF_RANGE"
        self.details.update({"requested": requested, "total_pages": total_pages})


# ============================================
# Document Export Errors
# ============================================

class DocumentGenerationError(PortalError):
    """Document generation failed"""

    def __init__(self, message: str, doc_type: Optional[str] = None):
        super().__init__(message, code="DOCUMENT_GENERATION_FAILED")
        if doc_type:
            self.details["doc_type"] = doc_type


class DocxExportError(DocumentGenerationError):
    """Word export failed - no file was produced"""

    def __init__(self, reason: str):
        super().__init__(f"Export failed: {reason}", doc_type="docx")
        self.code = "DOCX_EXPORT_FAILED"


class PPTExportError(DocumentGenerationError):
    """Slide deck export failed - no file was produced"""

    def __init__(self, reason: str = ""):
        super().__init__(
            "An error occurred while converting to PPTX. "
            "Check your network connection and make sure pop-ups and downloads are not blocked.",
            doc_type="pptx"
        )
        self.code = "PPT_EXPORT_FAILED"
        if reason:
            self.details["reason"] = reason


# ============================================
# Helper function for API responses
# ============================================

def error_response(error: PortalError) -> Dict[str, Any]:
    """Convert exception to API error response format"""
    return {
        "success": False,
        "error": error.to_dict()
    }
