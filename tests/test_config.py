"""
Configuration Unit Tests

Tests for derived settings such as the CORS allow-list and mail fallbacks.
"""

from certify.core.config import Settings


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


class TestCorsOrigins:
    """Tests for Settings.cors_origins_list."""

    def test_defaults_include_portal_and_localhost(self):
        origins = make_settings().cors_origins_list

        assert "https://www.highfurries.com" in origins
        assert "http://localhost:5173" in origins

    def test_env_extras_are_trimmed(self):
        """Verify extra origins lose whitespace and trailing slashes."""
        origins = make_settings(ALLOWED_ORIGINS=" https://a.example.com/ ,https://b.example.com").cors_origins_list

        assert "https://a.example.com" in origins
        assert "https://b.example.com" in origins

    def test_null_origin_allowed(self):
        assert "null" in make_settings().cors_origins_list

    def test_no_duplicates(self):
        origins = make_settings(ALLOWED_ORIGINS="http://localhost:3000").cors_origins_list

        assert origins.count("http://localhost:3000") == 1


class TestMailSettings:
    """Tests for SMTP / legacy Gmail fallbacks."""

    def test_gmail_fallback_host(self):
        settings = make_settings(EMAIL_USER="me@gmail.com", EMAIL_PASS="pw")

        assert settings.mail_host == "smtp.gmail.com"
        assert settings.mail_user == "me@gmail.com"
        assert settings.mail_configured is True

    def test_smtp_credentials_take_priority(self):
        settings = make_settings(
            SMTP_HOST="smtp.example.com",
            SMTP_USER="smtp-user",
            SMTP_PASSWORD="smtp-pass",
            EMAIL_USER="legacy",
            EMAIL_PASS="legacy-pass",
        )

        assert settings.mail_host == "smtp.example.com"
        assert settings.mail_user == "smtp-user"
        assert settings.mail_password == "smtp-pass"

    def test_from_address_falls_back_to_user(self):
        assert make_settings(SMTP_USER="u@example.com").mail_from_address == "u@example.com"

    def test_not_configured_without_password(self):
        assert make_settings(SMTP_USER="u@example.com").mail_configured is False


class TestMisc:
    def test_storage_configured_by_cloud_name(self):
        assert make_settings().storage_configured is False
        assert make_settings(CLOUDINARY_CLOUD_NAME="demo").storage_configured is True

    def test_verification_url(self):
        settings = make_settings(VERIFY_BASE_URL="https://x.example.com/verify")

        assert settings.verification_url("HF-2024-1234") == "https://x.example.com/verify?id=HF-2024-1234"
