"""
Country Code Suggestions
========================

"Did you mean ...?" hints for mistyped country codes and names.
"""

from typing import Dict, Optional


def edit_distance(a: str, b: str) -> int:
    """
    Optimal string alignment distance between two strings.

    Insertions, deletions, substitutions and swaps of two adjacent letters
    each cost one edit, so 'as' -> 'sa' is a single edit.
    """
    rows = [[0] * (len(b) + 1) for _ in range(len(a) + 1)]
    for i in range(len(a) + 1):
        rows[i][0] = i
    for j in range(len(b) + 1):
        rows[0][j] = j

    for i in range(1, len(a) + 1):
        for j in range(1, len(b) + 1):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            best = min(rows[i - 1][j] + 1, rows[i][j - 1] + 1, rows[i - 1][j - 1] + cost)
            if i > 1 and j > 1 and a[i - 1] == b[j - 2] and a[i - 2] == b[j - 1]:
                best = min(best, rows[i - 2][j - 2] + 1)
            rows[i][j] = best

    return rows[len(a)][len(b)]


def suggest_code(query: str, names: Dict[str, str]) -> Optional[str]:
    """
    Suggest the closest known country code for a query.

    Args:
        query: What the user typed (a code or an English country name)
        names: Known codes mapped to their English names

    Returns:
        The best matching code, or None when nothing is close enough
    """
    needle = query.strip().lower()
    if not needle:
        return None

    best: Optional[str] = None
    best_dist = None

    for code in sorted(names):
        name = names[code].lower()
        if needle == name:
            return code

        if len(needle) <= 3:
            dist = edit_distance(needle, code)
            max_dist = 1
        else:
            dist = edit_distance(needle, name)
            max_dist = 1 if len(needle) < 8 else 2

        if dist <= max_dist and (best_dist is None or dist < best_dist):
            best, best_dist = code, dist

    return best
