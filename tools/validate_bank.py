from __future__ import annotations
from collections import Counter
import sys
from typing import List, Optional, Sequence

from career_core.question_bank import SECTION_RANGES, load_bank, section_of
from career_core.tiers import BUNDLES
from career_core.types import Question


def audit(items: Sequence[Question]) -> List[str]:
    problems: List[str] = []
    dupes = [qid for qid, n in Counter(q.id for q in items).items() if n > 1]
    if dupes:
        problems.append(f"duplicate ids: {sorted(dupes)}")
    orphans = [q.id for q in items if section_of(q.id) is None]
    if orphans:
        problems.append(f"ids outside every section range: {sorted(orphans)}")
    ids = {q.id for q in items}
    for name, (lo, hi) in SECTION_RANGES.items():
        missing = [i for i in range(lo, hi + 1) if i not in ids]
        if missing:
            problems.append(f"{name}: missing ids {missing}")
    for q in items:
        if not q.text.strip() or not q.category.strip():
            problems.append(f"{q.id}: empty text or category")
    for tier, sections in BUNDLES.items():
        unknown = [s for s in sections if s not in SECTION_RANGES]
        if unknown:
            problems.append(f"bundle {tier} names unknown sections {unknown}")
    return problems


def main(argv: Optional[Sequence[str]] = None) -> int:
    items = load_bank()
    for name, (lo, hi) in SECTION_RANGES.items():
        n = sum(1 for q in items if lo <= q.id <= hi)
        print(f"{name:<13} {lo:>5}-{hi:<5} {n:2d} questions")
    problems = audit(items)
    for p in problems:
        print(f"  ✗ {p}")
    if not problems:
        print("  ✓ Bank is consistent")
    return 2 if problems else 0


if __name__ == "__main__":
    sys.exit(main())
