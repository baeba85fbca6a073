"""
Message encryption.

Message bodies are encrypted at rest with AES-256-GCM. Each message gets a fresh
salt and nonce; the key is derived from the process-wide secret with
PBKDF2-HMAC-SHA256. The stored value is base64(salt || nonce || tag || ciphertext).
"""
import base64
import logging
import os

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from bingo.config import settings
from bingo.core.exceptions import EncryptionConfigError

logger = logging.getLogger(__name__)

SALT_LENGTH = 16
NONCE_LENGTH = 12
TAG_LENGTH = 16
KEY_LENGTH = 32

DECRYPTION_FAILED_TEXT = "[Unable to decrypt message]"


class MessageCipher:
    """Encrypts and decrypts message content with a shared secret."""

    def __init__(self, secret: str | None, iterations: int = 100_000):
        if not secret:
            raise EncryptionConfigError("MESSAGE_ENCRYPTION_KEY is not configured")
        if iterations < 1:
            raise EncryptionConfigError("message_kdf_iterations must be positive")
        self._secret = secret.encode()
        self._iterations = iterations

    def _derive_key(self, salt: bytes) -> bytes:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=KEY_LENGTH,
            salt=salt,
            iterations=self._iterations,
        )
        return kdf.derive(self._secret)

    def encrypt(self, plaintext: str) -> str:
        salt = os.urandom(SALT_LENGTH)
        nonce = os.urandom(NONCE_LENGTH)
        sealed = AESGCM(self._derive_key(salt)).encrypt(nonce, plaintext.encode("utf-8"), None)
        # AESGCM appends the tag; store it ahead of the body.
        body, tag = sealed[:-TAG_LENGTH], sealed[-TAG_LENGTH:]
        return base64.b64encode(salt + nonce + tag + body).decode("ascii")

    def decrypt(self, ciphertext: str) -> str:
        """Raises ValueError (or InvalidTag) when the value was not produced with this secret."""
        combined = base64.b64decode(ciphertext, validate=True)
        if len(combined) < SALT_LENGTH + NONCE_LENGTH + TAG_LENGTH:
            raise ValueError("Ciphertext too short")
        salt = combined[:SALT_LENGTH]
        nonce = combined[SALT_LENGTH:SALT_LENGTH + NONCE_LENGTH]
        tag = combined[SALT_LENGTH + NONCE_LENGTH:SALT_LENGTH + NONCE_LENGTH + TAG_LENGTH]
        body = combined[SALT_LENGTH + NONCE_LENGTH + TAG_LENGTH:]
        plain = AESGCM(self._derive_key(salt)).decrypt(nonce, body + tag, None)
        return plain.decode("utf-8")

    def decrypt_or_placeholder(self, ciphertext: str, message_id: str | None = None) -> str:
        """Decrypt, falling back to a fixed placeholder so one bad row never breaks a listing."""
        try:
            return self.decrypt(ciphertext)
        except Exception as e:
            logger.warning("Message decryption failed for message=%s: %s", message_id, type(e).__name__)
            return DECRYPTION_FAILED_TEXT


_message_cipher: MessageCipher | None = None


def get_message_cipher() -> MessageCipher:
    """Get or create the process-wide cipher from settings."""
    global _message_cipher
    if _message_cipher is None:
        _message_cipher = MessageCipher(settings.message_encryption_key, settings.message_kdf_iterations)
    return _message_cipher


def reset_message_cipher() -> None:
    """Forget the cached cipher so the next call re-reads settings."""
    global _message_cipher
    _message_cipher = None
