"""Unit tests for form submission normalization."""

import json

from routes.audit import normalize_form_fields, get_field, submission_from_payload


class TestNormalizeFormFields:

    def test_json_string(self):
        raw = json.dumps({"email": " a@b.co ", "services": ["seo", "ads"]})
        assert normalize_form_fields(raw) == {"email": "a@b.co", "services": "seo, ads"}

    def test_query_string(self):
        assert normalize_form_fields("name=Jane&website=example.com") == {"name": "Jane", "website": "example.com"}

    def test_mapping(self):
        assert normalize_form_fields({"name": "Jane", "n": None}) == {"name": "Jane", "n": ""}

    def test_garbage(self):
        assert normalize_form_fields(None) == {}
        assert normalize_form_fields(42) == {}


class TestGetField:

    def test_exact_key_first(self):
        fields = {"your_email": "fuzzy@b.co", "email": "exact@b.co"}
        assert get_field(fields, ["email"], "mail") == "exact@b.co"

    def test_fuzzy_fallback(self):
        assert get_field({"field_Your_E-Mail_address": "", "contact_mail": "c@b.co"}, ["email"], "mail") == "c@b.co"

    def test_nothing(self):
        assert get_field({}, ["email"], "mail") == ""


class TestSubmissionFromPayload:

    def test_elementor_payload(self):
        payload = {
            "form_fields": json.dumps({
                "your_name": "Jane",
                "email_address": "jane@example.com",
                "company_website": "example.com",
                "twitter_url": "https://x.com/jane",
            })
        }

        submission = submission_from_payload(payload)

        assert submission["name"] == "Jane"
        assert submission["email"] == "jane@example.com"
        assert submission["website_url"] == "example.com"
        assert submission["socials"]["x"] == "https://x.com/jane"

    def test_flat_payload(self):
        submission = submission_from_payload({
            "website": "https://example.com",
            "email": "a@b.co",
            "facebook_url": "https://facebook.com/x",
        })
        assert submission["website_url"] == "https://example.com"
        assert submission["socials"]["facebook"] == "https://facebook.com/x"

    def test_x_url_beats_twitter_url(self):
        submission = submission_from_payload({"x_url": "https://x.com/new", "twitter_url": "https://x.com/old"})
        assert submission["socials"]["x"] == "https://x.com/new"
