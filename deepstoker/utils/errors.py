# deepstoker/utils/errors.py
"""Error handling and formatting utilities."""


class UserError(Exception):
    """Errors shown to user - must be clear and actionable."""
    pass


class ValidationError(UserError):
    """Input validation errors."""
    pass


class ConfigurationError(ValidationError):
    """Session or engine configuration that cannot be run."""
    pass


def format_error(error_type, message, suggestion=None):
    """Format an error message for display.

    Args:
        error_type (str): Type of error (e.g., "INVALID_CONFIG", "UNKNOWN_CONTROL")
        message (str): Error message
        suggestion (str, optional): Helpful suggestion for the user

    Returns:
        str: Formatted error message
    """
    output = f"⚠ {error_type}: {message}"
    if suggestion:
        output += f"\n  → {suggestion}"
    return output


def format_success(message, details=None):
    """Format a success message for display.

    Args:
        message (str): Success message
        details (dict, optional): Additional details to display

    Returns:
        str: Formatted success message
    """
    output = f"✓ {message}"
    if details:
        for key, value in details.items():
            output += f"\n  {key}: {value}"
    return output


def invalid_choice_error(param_name, value, choices):
    """Format an error for a value outside a fixed set of names."""
    return format_error(
        "INVALID_CHOICE",
        f"Unknown {param_name} '{value}'",
        f"Choose one of: {', '.join(choices)}"
    )


def success_dict(message, **kwargs):
    """Create a success response dictionary.

    Args:
        message (str): Success message
        **kwargs: Additional fields to include in response

    Returns:
        dict: Success dictionary
    """
    result = {
        "ok": True,
        "status": message
    }
    result.update(kwargs)
    return result


def error_dict(error_type, message, **kwargs):
    """Create an error response dictionary.

    Args:
        error_type (str): Error type
        message (str): Error message
        **kwargs: Additional fields to include in response

    Returns:
        dict: Error dictionary
    """
    result = {
        "ok": False,
        "error": error_type,
        "message": message
    }
    result.update(kwargs)
    return result
