"""
Fuzzing Dictionary for Interesting Keywords/Tokens.

Loads an AFL/libFuzzer style dictionary whose tokens are spliced into the
seed by the insert-dictionary-token mutator.

**Dictionary Format:**
- Lines starting with '#' are comments
- Entries are strings in double quotes, optionally named: "keyword" or kw="keyword"
- Empty lines are ignored

**Example Dictionary:**
```
# markup
"<!--"
tag_open="<svg onload="
"&amp;"
```
"""

import logging
import os
import re


class Dictionary:
    """
    Dictionary of interesting tokens for fuzzing.

    Attributes:
        tokens: Tuple of dictionary entries, in file order, without duplicates
    """
    # Matches: "token" or name="token"
    line_re = re.compile(r'^(?:[A-Za-z0-9_]+\s*=\s*)?"(.+)"\s*$')

    def __init__(self, dict_path=None):
        """
        Initialize a dictionary from a file.

        Args:
            dict_path: Path to dictionary file (optional).
                      If None, missing or unreadable, the dictionary is empty.
        """
        self.tokens = ()
        if not dict_path:
            return
        if not os.path.exists(dict_path):
            logging.warning("dictionary %s not found, continuing without it", dict_path)
            return

        seen = []
        try:
            with open(dict_path, encoding="utf-8", errors="replace") as f:
                for line in f:
                    line = line.strip()
                    if not line or line.startswith('#'):
                        continue
                    word = self.line_re.search(line)
                    if word is None:
                        logging.debug("ignoring dictionary line %r", line)
                        continue
                    token = self._unescape(word.group(1))
                    if token not in seen:
                        seen.append(token)
        except OSError as e:
            logging.warning("could not read dictionary %s: %s; continuing without it", dict_path, e)
            return
        self.tokens = tuple(seen)

    @staticmethod
    def _unescape(token):
        """Decode the \\\\, \\" and \\xNN escapes AFL dictionaries use."""
        return re.sub(
            r'\\(x[0-9A-Fa-f]{2}|\\|")',
            lambda m: chr(int(m.group(1)[1:], 16)) if m.group(1)[0] == 'x' else m.group(1),
            token)

    def __len__(self):
        return len(self.tokens)

    def __bool__(self):
        return bool(self.tokens)

    def get_word(self, rng):
        """
        Get a random token from the dictionary.

        Returns:
            Random dictionary entry, or None if the dictionary is empty
        """
        if not self.tokens:
            return None
        return rng.choice(self.tokens)
