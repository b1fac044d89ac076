"""Unit tests for accounts.core.config: Settings validation."""

import unittest

from pydantic import SecretStr, ValidationError

from accounts.core.config import DEFAULT_JWT_SECRET, Settings


class TestSettingsValidation(unittest.TestCase):
    """Settings rejects unsafe or malformed values at startup."""

    def test_defaults_match_token_lifetimes(self) -> None:
        settings = Settings()
        self.assertEqual(settings.SESSION_TOKEN_EXPIRE_HOURS, 24)
        self.assertEqual(settings.RESET_TOKEN_EXPIRE_MINUTES, 60)
        self.assertEqual(settings.BCRYPT_ROUNDS, 5)

    def test_rejects_non_sql_database_url(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(DATABASE_URL="mysql://root@localhost/accounts")

    def test_rejects_blank_jwt_secret(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(JWT_SECRET=SecretStr("   "))

    def test_rejects_default_secret_in_prod(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(APP_ENV="prod", JWT_SECRET=SecretStr(DEFAULT_JWT_SECRET))

    def test_accepts_custom_secret_in_prod(self) -> None:
        settings = Settings(
            APP_ENV="prod",
            JWT_SECRET=SecretStr("a-real-secret-of-at-least-32-bytes-long"),
        )
        self.assertEqual(settings.APP_ENV, "prod")

    def test_rejects_short_secret_in_prod(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(APP_ENV="prod", JWT_SECRET=SecretStr("x" * 31))
        settings = Settings(APP_ENV="prod", JWT_SECRET=SecretStr("x" * 32))
        self.assertEqual(settings.APP_ENV, "prod")

    def test_short_secret_allowed_in_dev(self) -> None:
        settings = Settings(APP_ENV="dev", JWT_SECRET=SecretStr("short"))
        self.assertEqual(settings.JWT_SECRET.get_secret_value(), "short")

    def test_rejects_out_of_range_bcrypt_rounds(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(BCRYPT_ROUNDS=3)
        with self.assertRaises(ValidationError):
            Settings(BCRYPT_ROUNDS=20)

    def test_rejects_non_http_public_base_url(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(PUBLIC_BASE_URL="ftp://example.com")

    def test_reset_link_base(self) -> None:
        settings = Settings(PUBLIC_BASE_URL="https://accounts.example.com/", API_PREFIX="/api")
        self.assertEqual(
            settings.reset_link_base,
            "https://accounts.example.com/api/user/resetPassword/",
        )


if __name__ == "__main__":
    unittest.main()
