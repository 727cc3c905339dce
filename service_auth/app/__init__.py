"""
Auth Service package.

This package exposes the FastAPI application for hashing passwords and for
issuing and verifying signed tokens. It is intentionally small and focused:

- app.main: Application entrypoint that wires routes and lifecycle.
- app.keys: Key ring holding the rotating HMAC signing secrets.
- app.tokens: Token codec (issuance, multi-key verification, expiry).
- app.passwords: Argon2id password hashing.

Design notes:
- Keep the package import side-effects minimal; configuration is read and
  the key ring is built when the service object is constructed.
- Use the shared/ utilities for logging, metrics, and errors.
- Treat this package as stateless; no issued token is ever stored.
"""
