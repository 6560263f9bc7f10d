"""
Snapgram Backend — Password Hashing Tests
===========================================
"""

from app.security import hash_password, verify_password


class TestPasswordHashing:

    def test_hash_is_not_plaintext(self):
        hashed = hash_password("hunter22")
        assert hashed != "hunter22"
        assert hashed.startswith("$2")

    def test_correct_password_verifies(self):
        hashed = hash_password("hunter22")
        assert verify_password("hunter22", hashed)

    def test_wrong_password_fails(self):
        hashed = hash_password("hunter22")
        assert not verify_password("hunter23", hashed)

    def test_same_password_gets_different_salts(self):
        assert hash_password("hunter22") != hash_password("hunter22")
