"""
Generate a base64 AES-256 key for ENCRYPTION_KEY.

    python -m Security.generate_data_key
"""

from __future__ import annotations

from Security.key_management import generate_key


def main() -> None:
    print(generate_key())


if __name__ == "__main__":
    main()
