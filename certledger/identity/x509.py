"""X.509 client identity reader.

Reads the identity and attributes a ledger peer derives from the submitting
client's enrollment certificate:

- ``get_id()`` returns ``base64("x509::<subject DN>::<issuer DN>")``.
- Attributes are taken from the certificate-authority attribute extension
  (OID ``1.2.3.4.5.6.7.8.1``) whose raw value is a JSON document of the form
  ``{"attrs": {"role": "admin", ...}}``.

Certificates are only parsed here; issuing them is the CA's job.
"""

from __future__ import annotations

import base64
import json
import logging
from typing import Dict, Optional, Tuple, Union

from cryptography import x509
from cryptography.x509.oid import ObjectIdentifier

from ..errors import IdentityUnavailable

logger = logging.getLogger(__name__)

ATTRIBUTE_EXTENSION_OID = ObjectIdentifier("1.2.3.4.5.6.7.8.1")


class X509Identity:
    """Caller identity backed by a parsed X.509 certificate."""

    def __init__(self, certificate: x509.Certificate):
        self.certificate = certificate
        self._attributes: Optional[Dict[str, str]] = None

    @classmethod
    def from_pem(cls, pem: Union[str, bytes]) -> "X509Identity":
        data = pem.encode("utf-8") if isinstance(pem, str) else pem
        try:
            cert = x509.load_pem_x509_certificate(data)
        except ValueError as e:
            raise IdentityUnavailable(f"failed to get client identity: {e}")
        return cls(cert)

    def get_id(self) -> str:
        try:
            subject = self.certificate.subject.rfc4514_string()
            issuer = self.certificate.issuer.rfc4514_string()
        except ValueError as e:
            raise IdentityUnavailable(f"failed to get client identity: {e}")
        raw = f"x509::{subject}::{issuer}"
        return base64.b64encode(raw.encode("utf-8")).decode("ascii")

    def get_attribute_value(self, name: str) -> Tuple[str, bool]:
        attrs = self._load_attributes()
        if name in attrs:
            return attrs[name], True
        return "", False

    def _load_attributes(self) -> Dict[str, str]:
        if self._attributes is not None:
            return self._attributes
        try:
            ext = self.certificate.extensions.get_extension_for_oid(ATTRIBUTE_EXTENSION_OID)
        except x509.ExtensionNotFound:
            self._attributes = {}
            return self._attributes
        except ValueError as e:
            raise IdentityUnavailable(f"failed to read certificate extensions: {e}")

        raw = getattr(ext.value, "value", b"")
        try:
            doc = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise IdentityUnavailable(f"malformed attribute extension: {e}")
        attrs = doc.get("attrs") if isinstance(doc, dict) else None
        if not isinstance(attrs, dict):
            raise IdentityUnavailable("malformed attribute extension: missing 'attrs' object")
        self._attributes = {str(k): str(v) for k, v in attrs.items()}
        logger.debug("Loaded %d certificate attributes", len(self._attributes))
        return self._attributes


__all__ = ["X509Identity", "ATTRIBUTE_EXTENSION_OID"]
