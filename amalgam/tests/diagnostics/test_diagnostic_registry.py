#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

from __future__ import annotations

import re
from pathlib import Path

from am_diagnostics import DIAGNOSTIC_CODE_FAMILIES
from am_errors import InvalidArgument, ResolutionFailure, SourceReadFailure

CODE_RE = re.compile(r"\b([A-Z]{3}-\d{4})\b")
SOURCE_DIR = Path(__file__).parent.parent.parent


def _registered() -> set[str]:
    return {code for codes in DIAGNOSTIC_CODE_FAMILIES.values() for code in codes}


def test_codes_are_unique_and_in_their_family():
    seen = []
    for family, codes in DIAGNOSTIC_CODE_FAMILIES.items():
        for code in codes:
            assert code.startswith(f"{family}-")
            seen.append(code)
    assert len(seen) == len(set(seen))


def test_error_class_codes_are_registered():
    registered = _registered()
    for code in (ResolutionFailure.code, SourceReadFailure.code, InvalidArgument.code):
        assert code in registered


def test_every_code_used_in_sources_is_registered():
    used = set()
    for path in SOURCE_DIR.glob("am*.py"):
        if path.name == "am_diagnostics.py":
            continue
        used.update(CODE_RE.findall(path.read_text(encoding="utf-8")))
    used.discard("AMG-9999")

    assert used, "no diagnostic codes found in sources"
    assert used <= _registered()
