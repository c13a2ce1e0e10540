"""Unit tests for PasswordHashingService."""

from unittest.mock import patch

from knotes_identity import Password, PasswordHashingService


class TestPasswordHashingService:
    """Tests for bcrypt hashing and verification."""

    def setup_method(self):
        """Set up test fixtures."""
        self.service = PasswordHashingService(rounds=4)

    def test_hash_is_not_plaintext(self):
        """Test that the hash does not contain the password."""
        hashed = self.service.hash(Password("my_secure_password"))

        assert "my_secure_password" not in hashed
        assert hashed.startswith("$2")

    def test_hash_is_salted(self):
        """Test that hashing twice gives different hashes."""
        first = self.service.hash(Password("my_secure_password"))
        second = self.service.hash(Password("my_secure_password"))

        assert first != second

    def test_verify_correct_password(self):
        """Test that the original password verifies."""
        hashed = self.service.hash(Password("my_secure_password"))

        assert self.service.verify("my_secure_password", hashed) is True

    def test_verify_wrong_password(self):
        """Test that a different password does not verify."""
        hashed = self.service.hash(Password("my_secure_password"))

        assert self.service.verify("wrong_password", hashed) is False

    def test_verify_malformed_hash_returns_false(self):
        """Test that a corrupt hash is a failed check, not an error."""
        assert self.service.verify("my_secure_password", "not-a-bcrypt-hash") is False

    def test_verify_decoy_never_matches(self):
        """Test that the decoy check fails for any input, its own seed included."""
        assert self.service.verify_decoy("my_secure_password") is False
        assert self.service.verify_decoy("knotes-decoy") is False

    def test_verify_decoy_checks_a_hash_at_the_configured_cost(self):
        """Test that the decoy hash is made with the service work factor."""
        with patch.object(
            PasswordHashingService,
            "verify",
            autospec=True,
            return_value=True,
        ) as verify:
            assert self.service.verify_decoy("my_secure_password") is False

        _, password, decoy_hash = verify.call_args.args
        assert password == "my_secure_password"
        assert decoy_hash.startswith("$2b$04$")

    def test_needs_rehash_for_other_work_factor(self):
        """Test that hashes from a different work factor are flagged."""
        old = PasswordHashingService(rounds=5).hash(Password("my_secure_password"))

        assert self.service.needs_rehash(old) is True

    def test_needs_rehash_current_hash(self):
        """Test that hashes with the current work factor are kept."""
        current = self.service.hash(Password("my_secure_password"))

        assert self.service.needs_rehash(current) is False

    def test_needs_rehash_garbage(self):
        """Test that unparseable hashes are flagged."""
        assert self.service.needs_rehash("garbage") is True
