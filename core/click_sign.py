import hashlib
import hmac
import logging
from typing import Optional

from config.settings import settings

logger = logging.getLogger(__name__)

class SignatureVerifier:
    """Checks the MD5 ``sign_string`` Click attaches to every webhook call.

    The signed string is the plain concatenation
    ``click_trans_id + service_id + secret_key + merchant_trans_id
    [+ merchant_prepare_id] + amount + action + sign_time``; the prepare id
    only takes part in the complete phase.
    """

    def __init__(self, secret_key: str):
        self._secret_key = secret_key or ""

    def build(
        self,
        click_trans_id: str,
        service_id: str,
        merchant_trans_id: str,
        amount: str,
        action: str,
        sign_time: str,
        merchant_prepare_id: Optional[str] = None,
    ) -> str:
        """Return the hex digest the provider is expected to send"""
        raw = (
            f"{click_trans_id}{service_id}{self._secret_key}{merchant_trans_id}"
            f"{merchant_prepare_id or ''}{amount}{action}{sign_time}"
        )
        return hashlib.md5(raw.encode("utf-8")).hexdigest()

    def verify(self, sign_string: str, **fields) -> bool:
        """Compare the caller-supplied hash with the reconstructed one"""
        if not self._secret_key:
            logger.warning("CLICK_SECRET_KEY is not configured; rejecting signature")
            return False
        expected = self.build(**fields).encode("utf-8")
        return hmac.compare_digest(expected, (sign_string or "").encode("utf-8"))

# Loaded once at process start, read-only thereafter
signature_verifier = SignatureVerifier(settings.CLICK_SECRET_KEY)

def get_signature_verifier() -> SignatureVerifier:
    """Dependency returning the process-wide verifier"""
    return signature_verifier
