import unittest
from unittest.mock import MagicMock, patch

from firebase_admin import auth
from firebase_admin import exceptions as firebase_exceptions

from portfolio_api.errors import AuthError, StoreError
from portfolio_api.identity import FirebaseIdentityClient


class FirebaseIdentityClientTests(unittest.TestCase):
    def setUp(self):
        self.app = MagicMock()
        self.identity = FirebaseIdentityClient(self.app)

    @patch("portfolio_api.identity.auth.get_user_by_email")
    def test_found(self, mock_get_user):
        mock_get_user.return_value = MagicMock(
            uid="uid-1",
            email="admin@example.com",
            display_name="Admin",
            email_verified=True,
            disabled=False,
        )

        account = self.identity.get_user_by_email("admin@example.com")

        mock_get_user.assert_called_once_with("admin@example.com", app=self.app)
        self.assertEqual(
            account.as_dict(),
            {
                "uid": "uid-1",
                "email": "admin@example.com",
                "displayName": "Admin",
                "emailVerified": True,
                "disabled": False,
            },
        )

    @patch("portfolio_api.identity.auth.get_user_by_email")
    def test_unknown_email(self, mock_get_user):
        mock_get_user.side_effect = auth.UserNotFoundError("No user record found")
        with self.assertRaises(AuthError):
            self.identity.get_user_by_email("nobody@example.com")

    @patch("portfolio_api.identity.auth.get_user_by_email")
    def test_empty_email_skips_lookup(self, mock_get_user):
        with self.assertRaises(AuthError):
            self.identity.get_user_by_email("")
        mock_get_user.assert_not_called()

    @patch("portfolio_api.identity.auth.get_user_by_email")
    def test_backend_failure(self, mock_get_user):
        mock_get_user.side_effect = firebase_exceptions.UnavailableError("down")
        with self.assertRaises(StoreError):
            self.identity.get_user_by_email("admin@example.com")


if __name__ == "__main__":
    unittest.main()
