import logging
from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError, DatabaseError, OperationalError

logger = logging.getLogger(__name__)


def parse_exception_to_error_detail(e: Exception, entity: str = "record") -> dict:
    """Parse exception into structured error detail dictionary"""
    if isinstance(e, IntegrityError):
        error_msg = str(e.orig) if hasattr(e, 'orig') else str(e)

        if "unique" in error_msg.lower() or "duplicate key" in error_msg.lower():
            return {
                "error": "DuplicateEntryError",
                "message": f"A {entity} with these details already exists",
                "type": "duplicate_constraint",
                "suggestion": "Please change the conflicting value and try again"
            }
        elif "not null" in error_msg.lower():
            return {
                "error": "MissingRequiredFieldError",
                "message": "Required fields are missing",
                "type": "missing_field",
                "suggestion": "Please ensure all required fields are provided"
            }
        elif "foreign key" in error_msg.lower():
            return {
                "error": "InvalidReferenceError",
                "message": f"The {entity} refers to a record that does not exist",
                "type": "foreign_key_constraint",
                "suggestion": "Please check the referenced ids"
            }

    elif isinstance(e, OperationalError):
        return {
            "error": "DatabaseConnectionError",
            "message": "Unable to connect to the database",
            "type": "database_connection",
            "suggestion": "Please try again later"
        }

    elif isinstance(e, DatabaseError):
        return {
            "error": "DatabaseError",
            "message": "A database error occurred",
            "type": "database_error",
            "suggestion": "Please verify your data and try again"
        }

    return {
        "error": "UnexpectedError",
        "message": "An unexpected error occurred",
        "type": "internal_error",
        "suggestion": "Please try again or contact support"
    }


def not_found(entity: str, entity_id) -> HTTPException:
    logger.warning(f"{entity} with ID {entity_id} not found")
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={
            "error": "NotFoundError",
            "message": f"{entity} with ID {entity_id} not found",
            "type": "resource_not_found"
        }
    )


def conflict(message: str, field: str = None, suggestion: str = None) -> HTTPException:
    logger.warning(message)
    detail = {
        "error": "DuplicateEntryError",
        "message": message,
        "type": "duplicate_constraint",
    }
    if field:
        detail["field"] = field
    if suggestion:
        detail["suggestion"] = suggestion
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail)


def database_error(e: Exception, action: str, entity: str = "record") -> HTTPException:
    """Map a failed query/commit to an HTTPException, logging it first"""
    if isinstance(e, IntegrityError):
        logger.error(f"Integrity error {action}: {str(e)}")
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=parse_exception_to_error_detail(e, entity))
    if isinstance(e, OperationalError):
        logger.error(f"Database connection error {action}: {str(e)}")
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=parse_exception_to_error_detail(e, entity))
    logger.error(f"Unexpected error {action}: {str(e)}", exc_info=True)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=parse_exception_to_error_detail(e, entity))
