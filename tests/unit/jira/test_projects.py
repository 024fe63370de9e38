"""Tests for the Jira projects mixin."""

from mcp_jira.models.jira import JiraProject


def _project(key):
    return {"id": key.lower(), "key": key, "name": f"Project {key}"}


class TestVisibleProjects:
    def test_pages_until_last(self, jira_fetcher):
        jira_fetcher.request.side_effect = [
            {"values": [_project("A"), _project("B")], "isLast": False},
            {"values": [_project("C")], "isLast": True},
        ]

        projects = jira_fetcher.get_visible_projects(expand=["description"], recent=5)

        assert [p.key for p in projects] == ["A", "B", "C"]
        calls = jira_fetcher.request.call_args_list
        assert calls[0].kwargs["params"] == {
            "startAt": 0,
            "maxResults": 50,
            "expand": "description",
            "recent": 5,
        }
        assert calls[1].kwargs["params"]["startAt"] == 2

    def test_empty_page_stops(self, jira_fetcher):
        jira_fetcher.request.return_value = {"values": [], "isLast": False}
        assert jira_fetcher.get_visible_projects() == []
        assert jira_fetcher.request.call_count == 1


class TestProjectDetails:
    def test_get_project_details(self, jira_fetcher):
        jira_fetcher.request.return_value = {
            **_project("PROJ"),
            "lead": {"accountId": "abc", "displayName": "Lead Person"},
            "components": [{"id": "1", "name": "Web"}],
            "issueTypes": [{"id": "1", "name": "Bug"}],
        }

        project = jira_fetcher.get_project_details("PROJ", expand=["lead"])

        jira_fetcher.request.assert_called_once_with(
            "GET", "project/PROJ", params={"expand": "lead"}
        )
        assert isinstance(project, JiraProject)
        assert project.lead.display_name == "Lead Person"
        assert [c.name for c in project.components] == ["Web"]


class TestLookups:
    def test_issue_types_global_and_project(self, jira_fetcher):
        jira_fetcher.request.return_value = [{"id": "1", "name": "Bug"}]

        jira_fetcher.get_issue_types()
        jira_fetcher.get_issue_types("PROJ")

        paths = [c.args[1] for c in jira_fetcher.request.call_args_list]
        assert paths == ["issuetype", "project/PROJ/issuetype"]

    def test_priorities(self, jira_fetcher):
        jira_fetcher.request.return_value = [{"id": "1", "name": "Highest"}, "junk"]
        assert [p.name for p in jira_fetcher.get_priorities()] == ["Highest"]


class TestStatuses:
    GROUPS = [
        {"id": "1", "name": "Bug", "statuses": [{"id": "10", "name": "Open"}]},
        {"id": "2", "name": "Task", "statuses": [{"id": "20", "name": "Done"}]},
    ]

    def test_global(self, jira_fetcher):
        jira_fetcher.request.return_value = [{"id": "10", "name": "Open"}]
        statuses = jira_fetcher.get_statuses()
        jira_fetcher.request.assert_called_once_with("GET", "status")
        assert [s.name for s in statuses] == ["Open"]

    def test_project_flattens_groups(self, jira_fetcher):
        jira_fetcher.request.return_value = self.GROUPS
        statuses = jira_fetcher.get_statuses("PROJ")
        assert [s.name for s in statuses] == ["Open", "Done"]

    def test_issue_type_by_id_or_name(self, jira_fetcher):
        jira_fetcher.request.return_value = self.GROUPS
        assert [s.name for s in jira_fetcher.get_statuses("PROJ", "2")] == ["Done"]
        assert [s.name for s in jira_fetcher.get_statuses("PROJ", "Bug")] == ["Open"]

    def test_unknown_issue_type_falls_back_to_all(self, jira_fetcher):
        jira_fetcher.request.return_value = self.GROUPS
        assert len(jira_fetcher.get_statuses("PROJ", "999")) == 2
