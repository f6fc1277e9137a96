# scripts/referral_hash.py
from __future__ import annotations

import sys

from statuspage.core.security import (
    REFERRAL_CODE_MAX_LENGTH,
    REFERRAL_CODE_MIN_LENGTH,
    hash_referral_code,
)


def main() -> int:
    if len(sys.argv) not in (2, 3):
        print("USO: python -m scripts.referral_hash <codigo> [salt]")
        return 2

    code = sys.argv[1]
    if not (REFERRAL_CODE_MIN_LENGTH <= len(code) <= REFERRAL_CODE_MAX_LENGTH):
        print(f"❌ El código debe tener entre {REFERRAL_CODE_MIN_LENGTH} y {REFERRAL_CODE_MAX_LENGTH} caracteres.")
        return 1

    salt = sys.argv[2] if len(sys.argv) == 3 else None
    print(f"REFERRAL_CODE_HASH={hash_referral_code(code, salt)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
