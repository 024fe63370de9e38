"""Default values used by the Jira models and formatters."""

EMPTY_STRING = ""
JIRA_DEFAULT_ID = "0"
UNKNOWN = "Unknown"
UNASSIGNED = "Unassigned"
NONE_VALUE = "None"
NOT_AVAILABLE = "N/A"
NO_DESCRIPTION = "No description provided"
