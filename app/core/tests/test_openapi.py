"""Tests for the drf-spectacular postprocessing hook."""

from core.openapi import group_endpoints


def make_schema():
    return {
        "paths": {
            "/members/login/": {"post": {"operationId": "members_login_create"}},
            "/payments/fees/": {"get": {"operationId": "payments_fees_list", "tags": ["x"]}},
            "/health/": {"parameters": []},
        }
    }


class TestGroupEndpoints:
    def test_adds_jwt_summaries(self):
        result = group_endpoints(make_schema(), None, None, True)

        login = result["paths"]["/members/login/"]["post"]
        assert login["summary"] == "Log in"
        assert login["tags"] == ["Members"]

    def test_tags_by_app(self):
        result = group_endpoints(make_schema(), None, None, True)

        assert result["paths"]["/payments/fees/"]["get"]["tags"] == ["Payments"]

    def test_tag_descriptions(self):
        result = group_endpoints(make_schema(), None, None, True)

        assert [tag["name"] for tag in result["tags"]] == ["Members", "Payments"]
