"""Tests for the Jira users and fields mixins."""

FIELDS = [
    {"id": "summary", "name": "Summary", "custom": False},
    {
        "id": "customfield_10071",
        "name": "Team",
        "custom": True,
        "schema": {"type": "option", "custom": "com.atlassian.jira.plugin.system.customfieldtypes:select"},
        "clauseNames": ["cf[10071]", "Team"],
    },
]


class TestUsers:
    def test_get_users_params(self, jira_fetcher):
        jira_fetcher.request.return_value = [
            {"accountId": "abc", "displayName": "Jane", "emailAddress": "j@example.com"}
        ]

        users = jira_fetcher.get_users(query="jane", max_results=10)

        jira_fetcher.request.assert_called_once_with(
            "GET",
            "user/search",
            params={"startAt": 0, "maxResults": 10, "query": "jane"},
        )
        assert users[0].account_id == "abc"
        assert users[0].email == "j@example.com"

    def test_get_users_by_account_id(self, jira_fetcher):
        jira_fetcher.request.return_value = []
        jira_fetcher.get_users(account_id="abc", username="jdoe")
        params = jira_fetcher.request.call_args.kwargs["params"]
        assert params["accountId"] == "abc"
        assert params["username"] == "jdoe"

    def test_get_current_user(self, jira_fetcher):
        jira_fetcher.request.return_value = {"accountId": "me", "displayName": "Me"}
        assert jira_fetcher.get_current_user().display_name == "Me"
        jira_fetcher.request.assert_called_once_with("GET", "myself")


class TestFields:
    def test_get_fields(self, jira_fetcher):
        jira_fetcher.request.return_value = FIELDS

        fields = jira_fetcher.get_fields()

        jira_fetcher.request.assert_called_once_with("GET", "field")
        assert fields[1].schema_type == "option"
        assert fields[1].clause_names == ["cf[10071]", "Team"]

    def test_get_custom_fields(self, jira_fetcher):
        jira_fetcher.request.return_value = FIELDS
        assert [f.id for f in jira_fetcher.get_custom_fields()] == ["customfield_10071"]
