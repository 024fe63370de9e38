"""Constants shared by the Jira operations."""

API_BASE_PATH = "rest/api/3"

DEFAULT_TIMEOUT_SECONDS = 30
DEFAULT_MAX_RETRIES = 3
DEFAULT_BASE_DELAY_MS = 1000

DEFAULT_SEARCH_MAX_RESULTS = 50
PROJECT_PAGE_SIZE = 50

AUTH_REQUIRED_MESSAGE = (
    "Jira authentication required. Set JIRA_BASE_URL, JIRA_EMAIL, "
    "and JIRA_API_TOKEN environment variables."
)
INVALID_CREDENTIALS_MESSAGE = (
    "Invalid Jira credentials. Please check your email and API token."
)
PERMISSION_DENIED_MESSAGE = "Insufficient permissions for this Jira operation."
NOT_FOUND_MESSAGE = "Resource not found or insufficient permissions"
RATE_LIMIT_MESSAGE = "Jira API rate limit exceeded. Please wait and try again."
NETWORK_ERROR_MESSAGE = "Network error occurred while connecting to Jira."
VALIDATION_ERROR_MESSAGE = "Input validation failed."

# Attachments
MAX_ATTACHMENT_SIZE = 50 * 1024 * 1024  # 50 MB
BASE64_WARNING_SIZE = 10 * 1024 * 1024  # 10 MB
ALLOWED_URL_SCHEMES = frozenset({"http", "https"})
ATTACHMENT_URI_PREFIX = "jira://attachment/"

# Friendly link phrasings mapped to Jira's link type names
LINK_TYPE_NAMES = {
    "blocks": "Blocks",
    "is blocked by": "Blocks",
    "relates": "Relates",
    "relates to": "Relates",
    "duplicates": "Duplicate",
    "duplicate": "Duplicate",
    "is duplicated by": "Duplicate",
    "clones": "Cloners",
    "is cloned by": "Cloners",
}

# Phrasings where the first issue is the inward side of the link
INWARD_LINK_PHRASES = frozenset({"is blocked by", "is duplicated by", "is cloned by"})

EPIC_FIELD_NAME_HINTS = ("epic link", "parent link")
EPIC_FIELD_SCHEMA_HINTS = ("epic", "parent")

EPIC_FIELD_NOT_FOUND_MESSAGE = (
    "Epic Link custom field not found in your Jira instance. "
    "This may be a team-managed project or the field has a different name. "
    "Use jira_search_issues with a custom JQL query instead."
)
