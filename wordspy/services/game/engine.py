"""Mode rules, spin orders and word assignment.

Pure functions: every random choice goes through the ``rng`` argument so
callers (and tests) can pass a seeded ``random.Random``.
"""

import random
from typing import List, Optional, Sequence

SIMILAR_WORD = 'similar-word'
IMPOSTOR = 'impostor'
MIXED = 'mixed'
GAME_MODES = (SIMILAR_WORD, IMPOSTOR, MIXED)
MODE_ALIASES = {'imposter': IMPOSTOR}

TAG_NORMAL = 'normal'
TAG_SIMILAR = 'similar'
TAG_IMPOSTOR = 'impostor'
DECOY_TAGS = (TAG_SIMILAR, TAG_IMPOSTOR)

IMPOSTOR_PLACEHOLDER = 'IMPOSTOR'
SIMILARITY_THRESHOLD = 0.6

MIN_PLAYERS = {
    SIMILAR_WORD: 2,  # 1 similar + at least 1 normal
    IMPOSTOR: 3,      # 1 impostor + at least 2 normal
    MIXED: 5,         # 1 similar + 1 impostor + at least 3 normal
}


def normalize_mode(mode) -> Optional[str]:
    """Return the canonical mode name, or None if it is not a known mode."""
    if not isinstance(mode, str):
        return None
    mode = mode.strip().lower()
    mode = MODE_ALIASES.get(mode, mode)
    return mode if mode in GAME_MODES else None


def min_players(mode: str) -> int:
    return MIN_PLAYERS[mode]


def decoy_tags(mode: str) -> List[str]:
    if mode == SIMILAR_WORD:
        return [TAG_SIMILAR]
    if mode == IMPOSTOR:
        return [TAG_IMPOSTOR]
    if mode == MIXED:
        return [TAG_SIMILAR, TAG_IMPOSTOR]
    raise ValueError(f'unknown game mode: {mode}')


def shuffle(items: Sequence, rng=None) -> list:
    """Fisher-Yates shuffle into a new list."""
    rng = rng or random
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def build_spin_order(mode: str, num_players: int, rng=None) -> List[str]:
    """One tag per player: the mode's decoys, the rest normal, shuffled."""
    decoys = decoy_tags(mode)
    if num_players < len(decoys):
        raise ValueError(f'{mode} needs at least {len(decoys)} players, got {num_players}')
    order = decoys + [TAG_NORMAL] * (num_players - len(decoys))
    return shuffle(order, rng)


def common_letter_count(word1: str, word2: str) -> int:
    """Letters of word1 found in word2, each letter of word2 used at most once."""
    remaining = list(word2)
    common = 0
    for letter in word1:
        if letter in remaining:
            remaining.remove(letter)
            common += 1
    return common


def are_words_similar(word1: str, word2: str, threshold: float = SIMILARITY_THRESHOLD) -> bool:
    shortest = min(len(word1), len(word2))
    if shortest == 0:
        return False
    return common_letter_count(word1.lower(), word2.lower()) / shortest >= threshold


def find_similar_word(words: Sequence[str], secret: str, rng=None) -> Optional[str]:
    """Pick a decoy for ``secret``: a similar word if any, else any other word."""
    rng = rng or random
    others = [w for w in words if w != secret]
    if not others:
        return None
    similar = [w for w in others if are_words_similar(secret, w)]
    return rng.choice(similar or others)


def word_for_tag(tag: str, secret: str, similar: Optional[str]) -> str:
    if tag == TAG_IMPOSTOR:
        return IMPOSTOR_PLACEHOLDER
    if tag == TAG_SIMILAR:
        return similar or secret
    return secret
