"""Edit distance suggestions for mistyped command names."""

DEFAULT_SUGGESTION_COUNT = 4
MAX_SUGGESTION_DISTANCE = 4


def levenshtein(a, b):
    """Minimum number of single-character edits turning ``a`` into ``b``."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)
    # keep the shorter string in the row
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, 1):
        current = [i]
        for j, cb in enumerate(b, 1):
            cost = 0 if ca == cb else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def max_threshold(text):
    """Largest distance still worth suggesting for an input of this length."""
    return min(len(text) // 2, MAX_SUGGESTION_DISTANCE)


def suggest_with_distances(name, candidates, n=DEFAULT_SUGGESTION_COUNT):
    """Closest candidates to ``name`` as ``(candidate, distance)`` pairs.

    Comparison is case-insensitive. A name that is itself a candidate gets
    no suggestions.
    """
    if n <= 0 or not name:
        return []
    candidates = list(candidates)
    if name in candidates:
        return []
    needle = name.lower()
    threshold = max_threshold(name)
    scored = []
    for candidate in candidates:
        dist = levenshtein(needle, candidate.lower())
        if dist <= threshold:
            scored.append((candidate, dist))
    scored.sort(key=lambda pair: (pair[1], pair[0]))
    return scored[:n]


def suggest(name, candidates, n=DEFAULT_SUGGESTION_COUNT):
    return [candidate for candidate, _ in suggest_with_distances(name, candidates, n)]


def format_suggestions(suggestions):
    """Render ``" Did you mean: a, b?"``, or an empty string."""
    if not suggestions:
        return ""
    return f" Did you mean: {', '.join(suggestions)}?"
