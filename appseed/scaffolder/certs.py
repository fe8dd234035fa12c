"""Local development TLS certificates.

Generates a self-signed certificate and RSA private key for the new project
and writes them as ``cert.pem`` and ``private.key`` in the project root.

Repeat runs: by default existing files are left alone and the run fails, so
a project's keys are never replaced by accident.  Passing ``overwrite=True``
(which is the default in certs-only mode) regenerates both files.
"""

from __future__ import annotations

import ipaddress
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import NamedTuple

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import ExtendedKeyUsageOID, NameOID

from appseed.config import ProjectConfig
from appseed.filesystem import FileSystem, FileSystemError


CERT_FILENAME = "cert.pem"
KEY_FILENAME = "private.key"
KEY_SIZE = 2048
VALIDITY = timedelta(days=730)
ORGANIZATION = "appseed development"

CERT_MODE = 0o644
KEY_MODE = 0o600


class CertGenerationError(Exception):
    """Raised when the key pair or certificate cannot be produced or saved.

    Attributes:
        written: Files that were already written when the failure happened,
            so the caller can remove a half-written pair.
    """

    def __init__(self, message: str, written: list[Path] | None = None) -> None:
        self.written = list(written or [])
        super().__init__(message)


class CertPaths(NamedTuple):
    cert_path: Path
    key_path: Path


def _subject_alt_name(common_name: str) -> x509.GeneralName:
    try:
        return x509.IPAddress(ipaddress.ip_address(common_name))
    except ValueError:
        return x509.DNSName(common_name)


def build_certificate(
    common_name: str,
    *,
    key_size: int = KEY_SIZE,
    validity: timedelta = VALIDITY,
    now: datetime | None = None,
) -> tuple[bytes, bytes]:
    """Create a self-signed certificate for *common_name*.

    Returns:
        ``(cert_pem, key_pem)``.  The key is an unencrypted RSA key in
        traditional OpenSSL PEM form.

    Raises:
        CertGenerationError: If key generation, signing or serialisation
            fails (including an unusable common name).
    """
    now = now or datetime.now(timezone.utc)
    try:
        key = rsa.generate_private_key(public_exponent=65537, key_size=key_size)
        name = x509.Name([
            x509.NameAttribute(NameOID.ORGANIZATION_NAME, ORGANIZATION),
            x509.NameAttribute(NameOID.COMMON_NAME, common_name),
        ])
        cert = (
            x509.CertificateBuilder()
            .subject_name(name)
            .issuer_name(name)
            .public_key(key.public_key())
            .serial_number(x509.random_serial_number())
            # Tolerate small clock skew between generation and first use
            .not_valid_before(now - timedelta(minutes=1))
            .not_valid_after(now + validity)
            .add_extension(
                x509.SubjectAlternativeName([_subject_alt_name(common_name)]),
                critical=False,
            )
            .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
            .add_extension(
                x509.KeyUsage(
                    digital_signature=True,
                    content_commitment=False,
                    key_encipherment=True,
                    data_encipherment=False,
                    key_agreement=False,
                    key_cert_sign=True,
                    crl_sign=False,
                    encipher_only=False,
                    decipher_only=False,
                ),
                critical=True,
            )
            .add_extension(
                x509.ExtendedKeyUsage(
                    [ExtendedKeyUsageOID.SERVER_AUTH, ExtendedKeyUsageOID.CLIENT_AUTH]
                ),
                critical=False,
            )
            .sign(key, hashes.SHA256())
        )
        cert_pem = cert.public_bytes(serialization.Encoding.PEM)
        key_pem = key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.TraditionalOpenSSL,
            encryption_algorithm=serialization.NoEncryption(),
        )
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise CertGenerationError(
            f"could not generate certificate for {common_name!r}: {exc}"
        ) from exc
    return cert_pem, key_pem


def generate_tls_certs(
    config: ProjectConfig,
    fs: FileSystem,
    overwrite: bool | None = None,
) -> CertPaths:
    """Write ``cert.pem`` and ``private.key`` into ``config.app_path``.

    Args:
        config: Supplies the destination and ``tls_common_name``.
        fs: Filesystem to write to.
        overwrite: Replace existing files.  Defaults to
            ``config.tls_certs_only``.

    Raises:
        CertGenerationError: If either file already exists (without
            *overwrite*), or generation or a write fails.
    """
    if overwrite is None:
        overwrite = config.tls_certs_only

    paths = CertPaths(
        cert_path=config.app_path / CERT_FILENAME,
        key_path=config.app_path / KEY_FILENAME,
    )
    if not overwrite:
        existing = [str(p) for p in paths if fs.exists(p)]
        if existing:
            raise CertGenerationError(
                f"refusing to overwrite existing {', '.join(existing)}"
            )

    cert_pem, key_pem = build_certificate(config.tls_common_name)

    try:
        if not fs.exists(config.app_path):
            fs.make_dirs(config.app_path)
    except FileSystemError as exc:
        raise CertGenerationError(str(exc)) from exc

    written: list[Path] = []
    for path, data, mode in (
        (paths.cert_path, cert_pem, CERT_MODE),
        (paths.key_path, key_pem, KEY_MODE),
    ):
        try:
            fs.write_bytes(path, data, mode, exclusive=not overwrite)
        except FileSystemError as exc:
            raise CertGenerationError(str(exc), written=written) from exc
        written.append(path)
    return paths
