"""Logging helpers that keep credentials out of log output."""

import logging


def mask_sensitive(value: str | None, keep_chars: int = 4) -> str:
    """Mask a secret, keeping only its last few characters.

    Args:
        value: The secret to mask
        keep_chars: Number of trailing characters to keep visible

    Returns:
        "***" followed by the kept suffix, or "***" alone when the value is
        too short to reveal anything safely
    """
    if not value or len(value) <= keep_chars * 2:
        return "***"
    return "***" + value[-keep_chars:]


def log_config_param(
    logger: logging.Logger,
    service: str,
    param: str,
    value: str | None,
    sensitive: bool = False,
) -> None:
    """Log one configuration parameter, masking it when sensitive.

    Args:
        logger: Logger to write to
        service: Service name shown as prefix (e.g. "Jira")
        param: Parameter name
        value: Parameter value
        sensitive: Mask the value with mask_sensitive
    """
    display = mask_sensitive(value) if sensitive else value
    logger.info(f"{service} {param}: {display if display is not None else 'Not Provided'}")
