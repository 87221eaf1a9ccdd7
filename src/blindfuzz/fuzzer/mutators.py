"""
Mutator catalog.

A mutator is a pure, total function ``(data, rng) -> str``: it takes the
seed text and an explicit ``random.Random`` and returns one randomly
altered variant. Mutators never raise, whatever the input, the empty
string included.

**Random draws, in order:**

- insert-bracket: position in [0, len], then one of "<", ">", "/>"
- delete-character: index in [0, len) (no draw on empty input)
- insert-random-string: length in [1, K], position, then each code point in [0, 128)
- insert-random-character: position, then one code point in [0, 128)
- insert-markup: position, then one of MARKUP_FRAGMENTS
- insert-dictionary-token: position, then one dictionary token

The catalog is a plain tuple of Mutator entries; extending it means
appending one more entry built from one more function.
"""

import functools
from collections import namedtuple

BRACKETS = ("<", ">", "/>")
MARKUP_FRAGMENTS = ("<html>", "</html>", "<div>", "</div>", "<script>", "</script>")

# Upper bound on insert-random-string's run length
DEFAULT_MAX_STRING_LENGTH = 20

ASCII_RANGE = 128

Mutator = namedtuple("Mutator", ["name", "function"])


def _position(data, rng):
    # Insertion point; 0 on empty input.
    return rng.randint(0, len(data))


def _insert(data, pos, fragment):
    return data[:pos] + fragment + data[pos:]


def _random_ascii(rng, length):
    return "".join(chr(rng.randrange(ASCII_RANGE)) for _ in range(length))


def insert_bracket(data, rng):
    pos = _position(data, rng)
    return _insert(data, pos, rng.choice(BRACKETS))


def delete_character(data, rng):
    if not data:
        return data
    pos = rng.randrange(len(data))
    return data[:pos] + data[pos + 1:]


def insert_random_string(data, rng, max_length=DEFAULT_MAX_STRING_LENGTH):
    """Insert 1..max_length code points drawn from [0, 128), unfiltered."""
    length = rng.randint(1, max_length)
    pos = _position(data, rng)
    return _insert(data, pos, _random_ascii(rng, length))


def insert_random_character(data, rng):
    pos = _position(data, rng)
    return _insert(data, pos, _random_ascii(rng, 1))


def insert_markup(data, rng, fragments=MARKUP_FRAGMENTS):
    pos = _position(data, rng)
    return _insert(data, pos, rng.choice(fragments))


def insert_dictionary_token(data, rng, dictionary):
    pos = _position(data, rng)
    token = dictionary.get_word(rng)
    if token is None:
        return data
    return _insert(data, pos, token)


def build_catalog(max_string_length=DEFAULT_MAX_STRING_LENGTH, markup=False,
                  random_character=False, dictionary=None):
    """
    Build the ordered mutator catalog.

    The default catalog is insert-bracket, delete-character and
    insert-random-string. Optional mutators are appended after those, so
    enabling one never changes which mutator a given index selects among
    the defaults.

    Args:
        max_string_length: Bound K for insert-random-string (K >= 1)
        markup: Append insert-markup
        random_character: Append insert-random-character
        dictionary: A non-empty Dictionary appends insert-dictionary-token

    Returns:
        Tuple of Mutator entries
    """
    if max_string_length < 1:
        raise ValueError("max_string_length must be at least 1, got %d" % max_string_length)

    catalog = [
        Mutator("insert-bracket", insert_bracket),
        Mutator("delete-character", delete_character),
        Mutator("insert-random-string",
                functools.partial(insert_random_string, max_length=max_string_length)),
    ]
    if random_character:
        catalog.append(Mutator("insert-random-character", insert_random_character))
    if markup:
        catalog.append(Mutator("insert-markup", insert_markup))
    if dictionary:
        catalog.append(Mutator("insert-dictionary-token",
                               functools.partial(insert_dictionary_token, dictionary=dictionary)))
    return tuple(catalog)


DEFAULT_CATALOG = build_catalog()
